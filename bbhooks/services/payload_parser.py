"""
Payload parsing for Bitbucket Server webhooks and REST responses.

Bitbucket Server identifies a repository by its project key and slug; both
are flattened here into RepositoryIdentity owner and repository names.
"""

import json
from typing import Any, Dict

from pydantic import ValidationError

from bbhooks.models.pull_request import PullRequest, PullRequestEndpoint
from bbhooks.models.refs import (
    ChangeKind,
    RefChange,
    RefsChangedEvent,
    RefType,
    RepositoryIdentity,
)


class PayloadDecodeError(Exception):
    """Raised when a webhook payload or API response cannot be decoded."""
    pass


def parse_repository(raw: Dict[str, Any]) -> RepositoryIdentity:
    """
    Build a RepositoryIdentity from a Bitbucket Server repository object.

    Args:
        raw: Repository JSON object ({"id", "slug", "scmId", "project": {"key"}})

    Returns:
        Parsed repository identity
    """
    project = raw.get("project") or {}
    return RepositoryIdentity(
        id=raw.get("id"),
        owner_name=project["key"],
        repository_name=raw["slug"],
        scm_type=raw.get("scmId"),
    )


def parse_ref_change(raw: Dict[str, Any]) -> RefChange:
    """
    Build a RefChange from one entry of the "changes" array.

    Args:
        raw: Change JSON object

    Returns:
        Parsed ref change
    """
    ref = raw.get("ref") or {}
    ref_id = raw.get("refId") or ref["id"]
    raw_ref_type = ref.get("type")
    raw_change_type = raw.get("type")
    return RefChange(
        ref_id=ref_id,
        ref_display_id=ref.get("displayId") or ref_id,
        ref_type=RefType.from_raw(raw_ref_type),
        raw_ref_type=raw_ref_type,
        from_hash=raw["fromHash"],
        to_hash=raw["toHash"],
        raw_change_type=raw_change_type,
        change_kind=ChangeKind.from_raw(raw_change_type),
    )


def parse_refs_changed_event(payload: str) -> RefsChangedEvent:
    """
    Parse a refs-changed (or mirror synchronized) webhook body.

    Args:
        payload: Raw request body

    Returns:
        Structured refs-changed event

    Raises:
        PayloadDecodeError: If the body is not JSON or lacks required fields
    """
    try:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise PayloadDecodeError("Payload is not a JSON object")

        actor = data.get("actor") or {}
        return RefsChangedEvent(
            repository=parse_repository(data["repository"]),
            changes=tuple(parse_ref_change(change) for change in data.get("changes") or []),
            event_key=data.get("eventKey"),
            actor=actor.get("name"),
        )
    except PayloadDecodeError:
        raise
    except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
        raise PayloadDecodeError(f"Can not read hook payload: {e}") from e


def _parse_endpoint(raw: Dict[str, Any]) -> PullRequestEndpoint:
    return PullRequestEndpoint(
        repository=parse_repository(raw["repository"]),
        ref_id=raw.get("id"),
        branch_name=raw.get("displayId") or raw["id"],
        commit_hash=raw["latestCommit"],
    )


def parse_pull_request(raw: Dict[str, Any]) -> PullRequest:
    """
    Build a PullRequest from a Bitbucket Server pull request object.

    Raises:
        PayloadDecodeError: If required fields are missing
    """
    try:
        return PullRequest(
            id=str(raw["id"]),
            title=raw.get("title"),
            source=_parse_endpoint(raw["fromRef"]),
            destination=_parse_endpoint(raw["toRef"]),
        )
    except (KeyError, TypeError, AttributeError, ValidationError) as e:
        raise PayloadDecodeError(f"Invalid pull request object: {e}") from e
