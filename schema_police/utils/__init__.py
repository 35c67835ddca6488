"""
Utility modules for the schema police service.
"""

from schema_police.utils.logging import (
    get_logger,
    setup_logging,
    log_webhook_event,
    log_api_call,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "log_webhook_event",
    "log_api_call",
    "log_error_with_context",
]
