"""
Console Auth Structured Logging

Library modules log through structlog. ``setup_logging`` routes those
events into the standard logging tree, where ``JSONFormatter`` renders
one JSON object per line.

Usage:
    from console_auth.logging import setup_logging, flow_context, log_audit

    setup_logging(service_name="inventory-console")

    with flow_context("password_reset"):
        ...
        log_audit("password.reset", outcome="success")
"""

import json
import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, TextIO

import structlog

service_name_var: ContextVar[str] = ContextVar("service_name", default="console-auth")
flow_id_var: ContextVar[str] = ContextVar("flow_id", default="")
flow_name_var: ContextVar[str] = ContextVar("flow_name", default="")

EVENTS_LOGGER = "console_auth.events"
AUDIT_LOGGER = "console_auth.audit"

PLAIN_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


# =============================================================================
# JSON Formatter
# =============================================================================

class JSONFormatter(logging.Formatter):
    """
    Render a record as a single JSON line.

    Key/value pairs bound through structlog arrive in ``extra_data`` and
    are merged at the top level. The active flow, if any, is attached
    under ``flow``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": service_name_var.get(),
        }

        flow_name = flow_name_var.get()
        if flow_name:
            entry["flow"] = {"name": flow_name, "id": flow_id_var.get() or None}

        entry.update(getattr(record, "extra_data", None) or {})

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        entry["source"] = f"{record.module}.{record.funcName}:{record.lineno}"
        return json.dumps(entry, default=str)


def _render_to_extra_data(_logger, _method_name, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Turn a structlog event into stdlib logging kwargs the JSON formatter reads."""
    event = event_dict.pop("event", "")
    exc_info = event_dict.pop("exc_info", None)
    kwargs: Dict[str, Any] = {"msg": event, "extra": {"extra_data": event_dict}}
    if exc_info:
        kwargs["exc_info"] = exc_info
    return kwargs


# =============================================================================
# Setup
# =============================================================================

def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure logging for a console process.

    Args:
        service_name: Name of the application embedding the flows
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: JSON lines when True, a plain pipe-separated format otherwise
        stream: Where to write; defaults to stdout

    Returns:
        Configured root logger
    """
    service_name_var.set(service_name)
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            _render_to_extra_data,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).debug("Logging configured", level=logging.getLevelName(log_level))
    return root_logger


@contextmanager
def flow_context(flow_name: str, flow_id: Optional[str] = None) -> Iterator[str]:
    """Tag every log line emitted inside the block with a flow name and id."""
    flow_id = flow_id or uuid.uuid4().hex[:8]
    name_token = flow_name_var.set(flow_name)
    id_token = flow_id_var.set(flow_id)
    try:
        yield flow_id
    finally:
        flow_name_var.reset(name_token)
        flow_id_var.reset(id_token)


# =============================================================================
# Domain events
# =============================================================================

def log_event(event_type: str, level: str = "INFO", **fields: Any) -> None:
    """
    Emit a named domain event (e.g. ``otp.resend_blocked``).

    The event type becomes the message; ``fields`` are kept together
    under ``event_data``.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    structlog.get_logger(EVENTS_LOGGER).log(log_level, event_type, event_data=fields)


def log_audit(
    action: str,
    actor_id: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    outcome: str = "success",
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Record a security-relevant action such as ``auth.login``.

    Args:
        action: What was done
        actor_id: ID of the acting user, if known
        resource_type: Kind of object acted on
        resource_id: ID of that object
        outcome: ``success`` or ``failure``
        metadata: Anything else worth keeping
    """
    fields: Dict[str, Any] = {
        "audit": True,
        "actor": {"id": actor_id, "type": "user"},
        "outcome": outcome,
    }
    if resource_type or resource_id:
        fields["resource"] = {"type": resource_type, "id": resource_id}
    if metadata:
        fields["metadata"] = metadata

    log = structlog.get_logger(AUDIT_LOGGER)
    if outcome == "failure":
        log.warning(action, **fields)
    else:
        log.info(action, **fields)
