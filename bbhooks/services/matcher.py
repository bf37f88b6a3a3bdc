"""
Source and navigator matching for hook events.

Only Bitbucket Server candidates are considered; Bitbucket Cloud and any
other kind of candidate never match.
"""

from typing import Any, Optional

from bbhooks.models.refs import RefsChangedEvent, RepositoryType
from bbhooks.models.source import BitbucketServerSource, CandidateKind
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)

# Server URL under which Bitbucket Cloud repositories are registered
CLOUD_SERVER_URL = "https://bitbucket.org"


def is_server_url_match(candidate_url: Optional[str], event_server_url: Optional[str]) -> bool:
    """
    Check whether a candidate's server URL is the one the event came from.

    Args:
        candidate_url: Server URL configured on the source or navigator
        event_server_url: Server URL the hook was delivered for

    Returns:
        True on exact (case-sensitive) equality, never for Bitbucket Cloud
    """
    if candidate_url is None or candidate_url == CLOUD_SERVER_URL:
        return False
    return candidate_url == event_server_url


def matches_navigator(candidate: Any, event: RefsChangedEvent, server_url: Optional[str]) -> bool:
    """
    Check whether a navigator is interested in the event's repository.

    Args:
        candidate: Registered navigator (any candidate kind)
        event: Refs-changed event
        server_url: Server URL the hook was delivered for

    Returns:
        True if the navigator is on the same server and scans the event's owner
    """
    if getattr(candidate, "kind", None) is not CandidateKind.BITBUCKET_SERVER_NAVIGATOR:
        return False

    return (
        is_server_url_match(candidate.server_url, server_url)
        and candidate.repo_owner.casefold() == event.repository.owner_name.casefold()
    )


def match_source(
    candidate: Any,
    event: RefsChangedEvent,
    server_url: Optional[str]
) -> Optional[BitbucketServerSource]:
    """
    Return the candidate as a Bitbucket Server source if the event applies to it.

    Owner and repository equality is checked by the resolvers.

    Args:
        candidate: Registered source (any candidate kind)
        event: Refs-changed event
        server_url: Server URL the hook was delivered for

    Returns:
        The matching source, or None
    """
    if getattr(candidate, "kind", None) is not CandidateKind.BITBUCKET_SERVER_SOURCE:
        return None

    if not is_server_url_match(candidate.server_url, server_url):
        return None

    repository_type = RepositoryType.from_scm(event.repository.scm_type)
    if repository_type is not RepositoryType.GIT:
        logger.info(
            f"Received event for unknown repository type: {event.repository.scm_type}",
            extra={"owner": event.repository.owner_name, "repository": event.repository.repository_name},
        )
        return None

    return candidate


def event_matches_source_repository(event: RefsChangedEvent, source: BitbucketServerSource) -> bool:
    """Check whether the event's repository is the source's own repository."""
    return event.repository.matches(source.repo_owner, source.repository, source.repository_id)
