"""Partitions the ref changes of one event by change kind."""

from typing import Dict, List

from bbhooks.models.refs import ChangeKind, RefChange, RefsChangedEvent
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)


def classify_changes(event: RefsChangedEvent) -> Dict[ChangeKind, List[RefChange]]:
    """
    Group the event's changes into created, updated and removed buckets.

    Changes of unknown kind are logged and left out of every bucket. Kinds
    with no changes are absent from the result; each bucket keeps the
    delivery order of its changes.

    Args:
        event: Parsed refs-changed event

    Returns:
        Mapping of change kind to the changes of that kind
    """
    buckets: Dict[ChangeKind, List[RefChange]] = {}
    for change in event.changes:
        if change.change_kind is ChangeKind.UNKNOWN:
            logger.info(
                f"Unknown change event type of {change.raw_change_type} received from Bitbucket Server",
                extra={"ref_id": change.ref_id},
            )
            continue
        buckets.setdefault(change.change_kind, []).append(change)
    return buckets
