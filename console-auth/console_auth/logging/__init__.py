"""
Console Auth Logging Module

Structured logging for the verification flows.
"""

from .structured import (
    # Setup
    setup_logging,
    flow_context,

    # Logging functions
    log_event,
    log_audit,

    # Formatting
    JSONFormatter,

    # Context
    service_name_var,
    flow_id_var,
    flow_name_var,
)

__all__ = [
    "setup_logging",
    "flow_context",
    "log_event",
    "log_audit",
    "JSONFormatter",
    "service_name_var",
    "flow_id_var",
    "flow_name_var",
]
