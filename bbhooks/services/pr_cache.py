"""
Per-event memo of outgoing pull requests.

One cache belongs to one head event. It is filled at most once per source
server URL, so offering the same event to several sources on the same server
costs a single round of API calls.
"""

from contextlib import closing
from typing import Callable, Dict, List, Protocol, Sequence

from bbhooks.models.pull_request import PullRequest
from bbhooks.models.refs import RefChange, RefsChangedEvent
from bbhooks.services.bitbucket_client import BitbucketServerClient, NotFoundError
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)


class PullRequestApi(Protocol):
    def get_outgoing_open_pull_requests(self, ref_id: str) -> List[PullRequest]: ...

    def close(self) -> None: ...


# (server_url, owner, repository) -> API client
ClientFactory = Callable[[str, str, str], PullRequestApi]


class OutgoingPullRequestCache:
    """Outgoing open pull requests of an event's branch changes, keyed by server URL."""

    def __init__(
        self,
        event: RefsChangedEvent,
        changes: Sequence[RefChange],
        client_factory: ClientFactory = BitbucketServerClient.for_repository,
    ):
        self.event = event
        self.changes = tuple(changes)
        self._client_factory = client_factory
        self._cached: Dict[str, List[PullRequest]] = {}

    def get(self, server_url: str) -> List[PullRequest]:
        """
        Return the open pull requests originating from the changed branches.

        Only pull requests whose source repository is the event's repository
        are kept. Failures for one ref are logged and skipped; a client that
        cannot be built leaves the server URL with no pull requests.

        Args:
            server_url: Server URL of the source asking

        Returns:
            Pull requests in change order
        """
        cached = self._cached.get(server_url)
        if cached is not None:
            return cached

        repository = self.event.repository
        pull_requests: List[PullRequest] = []
        try:
            client = self._client_factory(server_url, repository.owner_name, repository.repository_name)
        except Exception as e:
            logger.warning(
                f"Failed to create Bitbucket client for {server_url}: {e}",
                extra={"server_url": server_url},
                exc_info=True,
            )
            self._cached[server_url] = pull_requests
            return pull_requests

        with closing(client) as api:
            for change in self.changes:
                if not change.is_branch:
                    continue

                try:
                    pull_requests_for_change = api.get_outgoing_open_pull_requests(change.ref_id)
                except NotFoundError as e:
                    logger.info(f"No such Repository on Bitbucket: {e}", extra={"ref_id": change.ref_id})
                    continue
                except Exception as e:
                    logger.warning(
                        f"Failed to retrieve Pull Requests from Bitbucket: {e}",
                        extra={"ref_id": change.ref_id},
                        exc_info=True,
                    )
                    continue

                pull_requests.extend(
                    pull_request
                    for pull_request in pull_requests_for_change
                    if repository.matches_repository(pull_request.source.repository)
                )

        self._cached[server_url] = pull_requests
        return pull_requests

    def __contains__(self, server_url: str) -> bool:
        return server_url in self._cached
