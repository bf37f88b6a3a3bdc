"""Shared fixtures for hook processing tests."""

import json
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from bbhooks.models import (
    BitbucketServerNavigator,
    BitbucketServerSource,
    ChangeKind,
    CheckoutStrategy,
    PullRequest,
    PullRequestEndpoint,
    RefChange,
    RefsChangedEvent,
    RefType,
    RepositoryIdentity,
    SourceTraits,
)

SERVER_URL = "https://bitbucket.example.com"


def make_repository(owner: str = "PROJ", name: str = "repo", repo_id: Optional[int] = 1, scm: str = "git"):
    return RepositoryIdentity(id=repo_id, owner_name=owner, repository_name=name, scm_type=scm)


def make_change(
    display_id: str = "feature/x",
    kind: ChangeKind = ChangeKind.UPDATED,
    ref_type: str = "BRANCH",
    from_hash: str = "A" * 40,
    to_hash: str = "B" * 40,
) -> RefChange:
    prefix = "refs/heads/" if ref_type == "BRANCH" else "refs/tags/"
    raw = {
        ChangeKind.CREATED: "ADD",
        ChangeKind.UPDATED: "UPDATE",
        ChangeKind.REMOVED: "DELETE",
    }.get(kind, "RENAME")
    return RefChange(
        ref_id=prefix + display_id,
        ref_display_id=display_id,
        ref_type=RefType.from_raw(ref_type),
        raw_ref_type=ref_type,
        from_hash=from_hash,
        to_hash=to_hash,
        raw_change_type=raw,
        change_kind=kind,
    )


def make_event(*changes: RefChange, repository: Optional[RepositoryIdentity] = None) -> RefsChangedEvent:
    return RefsChangedEvent(repository=repository or make_repository(), changes=tuple(changes))


def make_pull_request(
    pr_id: str = "7",
    source_repository: Optional[RepositoryIdentity] = None,
    destination_repository: Optional[RepositoryIdentity] = None,
    source_branch: str = "feature/x",
    destination_branch: str = "master",
    source_hash: str = "B" * 40,
    destination_hash: str = "C" * 40,
) -> PullRequest:
    return PullRequest(
        id=pr_id,
        source=PullRequestEndpoint(
            repository=source_repository or make_repository(),
            ref_id=f"refs/heads/{source_branch}",
            branch_name=source_branch,
            commit_hash=source_hash,
        ),
        destination=PullRequestEndpoint(
            repository=destination_repository or make_repository(),
            ref_id=f"refs/heads/{destination_branch}",
            branch_name=destination_branch,
            commit_hash=destination_hash,
        ),
    )


def make_source(
    owner: str = "PROJ",
    repository: str = "repo",
    server_url: Optional[str] = SERVER_URL,
    repository_id: Optional[int] = None,
    origin: List[CheckoutStrategy] = (),
    fork: List[CheckoutStrategy] = (),
) -> BitbucketServerSource:
    return BitbucketServerSource(
        server_url=server_url,
        repo_owner=owner,
        repository=repository,
        repository_id=repository_id,
        traits=SourceTraits(origin_pr_strategies=tuple(origin), fork_pr_strategies=tuple(fork)),
    )


class FakeApi:
    """In-memory stand-in for the Bitbucket Server client."""

    def __init__(self, pull_requests: Optional[Dict[str, object]] = None):
        # ref_id -> list of pull requests, or an exception to raise
        self.pull_requests = pull_requests or {}
        self.calls: List[str] = []
        self.closed = False

    def get_outgoing_open_pull_requests(self, ref_id: str) -> List[PullRequest]:
        self.calls.append(ref_id)
        result = self.pull_requests.get(ref_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def client_factory(fake_api):
    """Factory returning the shared FakeApi, recording how it was built."""
    return MagicMock(return_value=fake_api)


@pytest.fixture
def navigator():
    return BitbucketServerNavigator(server_url=SERVER_URL, repo_owner="proj")


@pytest.fixture
def refs_changed_payload():
    """Build a raw repo:refs_changed webhook body."""
    def _payload(changes=None, owner="PROJ", slug="repo", repo_id=1, scm="git"):
        return json.dumps({
            "eventKey": "repo:refs_changed",
            "date": "2024-01-01T00:00:00+0000",
            "actor": {"name": "admin", "id": 1},
            "repository": {
                "slug": slug,
                "id": repo_id,
                "name": slug,
                "scmId": scm,
                "state": "AVAILABLE",
                "project": {"key": owner, "id": 1, "name": "Project"},
            },
            "changes": changes if changes is not None else [
                {
                    "ref": {"id": "refs/heads/master", "displayId": "master", "type": "BRANCH"},
                    "refId": "refs/heads/master",
                    "fromHash": "a" * 40,
                    "toHash": "b" * 40,
                    "type": "UPDATE",
                }
            ],
        })
    return _payload
