"""
Utility modules for the Bitbucket Server hook service.
"""

from bbhooks.utils.logging import (
    get_logger,
    setup_logging,
    log_refs_event,
    log_api_call,
)
from bbhooks.utils.resilience import retry_with_backoff

__all__ = [
    "get_logger",
    "setup_logging",
    "log_refs_event",
    "log_api_call",
    "retry_with_backoff",
]
