"""
Dispatch of head events to registered navigators and sources.

Dispatch is synchronous: each event is evaluated against each candidate in
turn and listeners are notified as matches are found.
"""

from typing import Dict, List, Optional, Protocol

from bbhooks.models.scm import Head, Revision
from bbhooks.models.source import BitbucketServerNavigator, BitbucketServerSource
from bbhooks.services.head_event import HeadEvent
from bbhooks.services.registry import SourceRegistry
from bbhooks.utils.logging import get_logger

logger = get_logger(__name__)


class HeadEventListener(Protocol):
    def on_navigator_match(self, event: HeadEvent, navigator: BitbucketServerNavigator) -> None: ...

    def on_heads(
        self,
        event: HeadEvent,
        source: BitbucketServerSource,
        heads: Dict[Head, Optional[Revision]],
    ) -> None: ...

    def on_reindex(self, source: BitbucketServerSource) -> None: ...


class LoggingListener:
    """Default listener, records what would be handed to the indexer."""

    def on_navigator_match(self, event: HeadEvent, navigator: BitbucketServerNavigator) -> None:
        logger.info(f"{event!r} matches navigator {navigator.name or navigator.repo_owner}")

    def on_heads(
        self,
        event: HeadEvent,
        source: BitbucketServerSource,
        heads: Dict[Head, Optional[Revision]],
    ) -> None:
        for head, revision in heads.items():
            if revision is None:
                logger.info(f"{source.repo_owner}/{source.repository}: head {head.name} removed")
            else:
                logger.info(f"{source.repo_owner}/{source.repository}: head {head.name} at {revision!r}")

    def on_reindex(self, source: BitbucketServerSource) -> None:
        logger.info(f"Re-index requested for {source.repo_owner}/{source.repository}")


class EventDispatcher:
    """Offers head events to every candidate of a registry."""

    def __init__(self, registry: SourceRegistry, listeners: Optional[List[HeadEventListener]] = None):
        self.registry = registry
        self.listeners: List[HeadEventListener] = list(listeners) if listeners is not None else [LoggingListener()]

    def fire_now(self, event: HeadEvent) -> None:
        """Evaluate the event against every navigator and source."""
        for navigator in self.registry.navigators:
            if event.matches_navigator(navigator):
                for listener in self.listeners:
                    listener.on_navigator_match(event, navigator)

        for source in self.registry.sources:
            heads = event.resolve_heads(source)
            if not heads:
                continue
            for listener in self.listeners:
                listener.on_heads(event, source, heads)

    def reindex(self, owner: str, repository: str) -> None:
        """Ask every source of the repository to be re-indexed."""
        sources = self.registry.sources_for(owner, repository)
        if not sources:
            logger.info(f"No source registered for {owner}/{repository}, nothing to re-index")
        for source in sources:
            for listener in self.listeners:
                listener.on_reindex(source)
