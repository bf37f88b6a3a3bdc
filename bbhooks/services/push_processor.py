"""
Push hook processor.

Turns a refs-changed delivery from Bitbucket Server into head events, one per
change kind, and fires them through the dispatcher.
"""

from typing import Optional

from bbhooks.config import settings
from bbhooks.models.refs import BitbucketType, HookEventType
from bbhooks.services.bitbucket_client import BitbucketServerClient
from bbhooks.services.classifier import classify_changes
from bbhooks.services.dispatcher import EventDispatcher
from bbhooks.services.head_event import HeadEvent
from bbhooks.services.payload_parser import PayloadDecodeError, parse_refs_changed_event
from bbhooks.services.pr_cache import ClientFactory
from bbhooks.services.registry import load_registry
from bbhooks.utils.logging import get_logger, log_refs_event

logger = get_logger(__name__)


class PushHookProcessor:
    """Processes refs-changed and mirror synchronized hooks."""

    def __init__(
        self,
        dispatcher: EventDispatcher,
        client_factory: ClientFactory = BitbucketServerClient.for_repository,
    ):
        self.dispatcher = dispatcher
        self.client_factory = client_factory

    def process(
        self,
        hook_event: HookEventType,
        payload: Optional[str],
        instance_type: BitbucketType,
        origin: Optional[str],
        server_url: Optional[str] = None,
    ) -> None:
        """
        Process one hook delivery.

        Args:
            hook_event: Event key of the delivery
            payload: Raw request body, None for an empty delivery
            instance_type: Kind of Bitbucket instance that sent the hook
            origin: Identifier of the delivering host
            server_url: Bitbucket Server URL the hook was configured for
        """
        if payload is None:
            return
        if server_url is None:
            # without a server URL the event would not match anything
            logger.debug("Ignoring push hook delivered without a server URL")
            return

        try:
            event = parse_refs_changed_event(payload)
        except PayloadDecodeError as e:
            logger.error(f"Can not read hook payload: {e}", exc_info=True)
            return

        owner = event.repository.owner_name
        repository = event.repository.repository_name
        log_refs_event(logger, owner, repository, hook_event.value, len(event.changes))

        if not event.changes:
            self.dispatcher.reindex(owner, repository)
            return

        for kind, changes in classify_changes(event).items():
            head_event = HeadEvent(kind, changes, origin, server_url, event, self.client_factory)
            self.dispatcher.fire_now(head_event)


_processor: Optional[PushHookProcessor] = None


def get_push_hook_processor() -> PushHookProcessor:
    """Get the application-wide processor, loading the registry on first use."""
    global _processor
    if _processor is None:
        _processor = PushHookProcessor(EventDispatcher(load_registry(settings.sources_file)))
    return _processor
