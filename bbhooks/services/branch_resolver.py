"""Turns branch ref changes into branch heads and revisions."""

from typing import Dict, Optional, Sequence

from bbhooks.models.refs import ChangeKind, RefChange, RefsChangedEvent
from bbhooks.models.scm import BranchHead, GitRevision, Head, Revision
from bbhooks.models.source import BitbucketServerSource
from bbhooks.services.matcher import event_matches_source_repository
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)


def log_unknown_ref_type(change: RefChange) -> None:
    logger.info(
        f"Received event for unknown ref type {change.raw_ref_type} of ref {change.ref_display_id}",
        extra={"ref_id": change.ref_id},
    )


def resolve_branches(
    kind: ChangeKind,
    changes: Sequence[RefChange],
    event: RefsChangedEvent,
    source: BitbucketServerSource,
    result: Dict[Head, Optional[Revision]],
) -> None:
    """
    Add one branch head per branch change to ``result``.

    Nothing is added unless the event is for the source's own repository.
    Removed branches map to None.
    """
    if not event_matches_source_repository(event, source):
        return

    for change in changes:
        if not change.is_branch:
            log_unknown_ref_type(change)
            continue

        head = BranchHead(name=change.ref_display_id)
        if kind is ChangeKind.REMOVED:
            result[head] = None
        else:
            result[head] = GitRevision(head=head, commit_hash=change.to_hash)
