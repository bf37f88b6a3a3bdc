"""
Head event fired for one change kind of a refs-changed delivery.

A HeadEvent is offered to every registered navigator and source. It owns its
outgoing pull request cache; nothing is shared between events.
"""

from typing import Any, Dict, Optional, Sequence

from bbhooks.models.pull_request import PullRequest
from bbhooks.models.refs import ChangeKind, RefChange, RefsChangedEvent
from bbhooks.models.scm import Head, Revision
from bbhooks.services.branch_resolver import resolve_branches
from bbhooks.services.bitbucket_client import BitbucketServerClient
from bbhooks.services.matcher import match_source, matches_navigator
from bbhooks.services.pr_cache import ClientFactory, OutgoingPullRequestCache
from bbhooks.services.pull_request_resolver import resolve_pull_requests
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)


class HeadEvent:
    """
    Branch and pull request head changes of one kind from one delivery.

    Args:
        kind: Change kind shared by every change of this event
        changes: The changes of that kind, in delivery order
        origin: Identifier of the delivering host
        server_url: Bitbucket Server URL the hook was delivered for
        event: The full refs-changed event
        client_factory: Builds the API client used to list pull requests
    """

    def __init__(
        self,
        kind: ChangeKind,
        changes: Sequence[RefChange],
        origin: Optional[str],
        server_url: Optional[str],
        event: RefsChangedEvent,
        client_factory: ClientFactory = BitbucketServerClient.for_repository,
    ):
        self.kind = kind
        self.changes = tuple(changes)
        self.origin = origin
        self.server_url = server_url
        self.event = event
        self.pull_requests = OutgoingPullRequestCache(event, self.changes, client_factory)
        self.logger = logger.with_context(
            owner=event.repository.owner_name,
            repository=event.repository.repository_name,
            server_url=server_url,
            change_kind=kind.value,
        )

    def matches_navigator(self, candidate: Any) -> bool:
        return matches_navigator(candidate, self.event, self.server_url)

    def source_name(self) -> str:
        return self.event.repository.repository_name

    def resolve_heads(self, candidate: Any) -> Dict[Head, Optional[Revision]]:
        """
        Map each affected head to its new revision for a candidate source.

        Args:
            candidate: Registered source (any candidate kind)

        Returns:
            Head to revision mapping, None meaning the head was removed.
            Empty when the candidate does not match.
        """
        source = match_source(candidate, self.event, self.server_url)
        if source is None:
            return {}

        result: Dict[Head, Optional[Revision]] = {}
        resolve_branches(self.kind, self.changes, self.event, source, result)
        resolve_pull_requests(self.kind, self.changes, self.event, source, self.pull_requests, result)
        self.logger.debug(f"Resolved {len(result)} heads for source {source.name or source.repository}")
        return result

    def get_outgoing_pull_requests(self, server_url: str) -> list[PullRequest]:
        return self.pull_requests.get(server_url)

    def __repr__(self) -> str:
        return (
            f"HeadEvent(kind={self.kind.value}, repository={self.event.repository.owner_name}/"
            f"{self.source_name()}, changes={len(self.changes)})"
        )
