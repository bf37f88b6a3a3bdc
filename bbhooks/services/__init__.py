"""Hook processing services package."""

from bbhooks.services.bitbucket_client import (
    BitbucketApiError,
    BitbucketServerClient,
    NotFoundError,
    TransientApiError,
)
from bbhooks.services.dispatcher import EventDispatcher, HeadEventListener, LoggingListener
from bbhooks.services.head_event import HeadEvent
from bbhooks.services.payload_parser import PayloadDecodeError, parse_refs_changed_event
from bbhooks.services.push_processor import PushHookProcessor, get_push_hook_processor
from bbhooks.services.registry import RegistryError, SourceRegistry, load_registry

__all__ = [
    'BitbucketApiError',
    'BitbucketServerClient',
    'NotFoundError',
    'TransientApiError',
    'EventDispatcher',
    'HeadEventListener',
    'LoggingListener',
    'HeadEvent',
    'PayloadDecodeError',
    'parse_refs_changed_event',
    'PushHookProcessor',
    'get_push_hook_processor',
    'RegistryError',
    'SourceRegistry',
    'load_registry',
]
