"""
Structured logging for the multilingual search service.

Events are snake_case structlog events with key/value context. Each entry
carries service, level and an ISO 8601 timestamp; entries logged while an
HTTP request is handled also carry trace_id, request_id and client_id
(the caller address used for translation rate limiting).

User supplied text (queries, translation input, labels) is clipped to
MAX_LOGGED_TEXT_LENGTH characters before rendering.
"""
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional, Any, Dict
import structlog
from structlog.types import Processor

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
client_id_var: ContextVar[Optional[str]] = ContextVar("client_id", default=None)

SERVICE_NAME = "multisearch_api"

MAX_LOGGED_TEXT_LENGTH = 200
USER_TEXT_FIELDS = ("query", "partial_query", "text", "label", "category")

# Provider HTTP calls are already logged as translation_provider_* events
CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")


def add_trace_context(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Add trace_id, request_id, client_id and service name to a log entry."""
    for key, var in (
        ("trace_id", trace_id_var),
        ("request_id", request_id_var),
        ("client_id", client_id_var),
    ):
        value = var.get()
        if value:
            event_dict[key] = value

    event_dict["service"] = SERVICE_NAME

    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()

    return event_dict


def clip_user_text(
    logger: structlog.BoundLogger,
    method_name: str,
    event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Truncate long user supplied strings so one request cannot flood the log."""
    for key in USER_TEXT_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_LOGGED_TEXT_LENGTH:
            event_dict[key] = value[:MAX_LOGGED_TEXT_LENGTH] + "..."
            event_dict[f"{key}_length"] = len(value)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    service_name: Optional[str] = None,
    json_output: bool = True,
    http_client_level: str = "WARNING",
) -> None:
    """
    Configure structlog on top of the stdlib logging module.

    Args:
        log_level: Root level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        service_name: Overrides SERVICE_NAME
        json_output: JSON lines when True (containers), console renderer otherwise
        http_client_level: Level for the httpx/httpcore loggers
    """
    global SERVICE_NAME
    if service_name:
        SERVICE_NAME = service_name

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_trace_context,
        clip_user_text,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    quiet_level = getattr(logging, http_client_level.upper(), logging.WARNING)
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)
    """
    return structlog.get_logger(name)


def bind_request_context(
    trace_id: Optional[str],
    request_id: Optional[str],
    client_id: Optional[str] = None,
) -> None:
    """Set (or with None, clear) the request-scoped log context."""
    trace_id_var.set(trace_id)
    request_id_var.set(request_id)
    client_id_var.set(client_id)


def clear_request_context() -> None:
    bind_request_context(None, None, None)


def get_trace_id() -> Optional[str]:
    return trace_id_var.get()


def get_request_id() -> Optional[str]:
    return request_id_var.get()


def get_client_id() -> Optional[str]:
    return client_id_var.get()


def new_correlation_id() -> str:
    """UUID4 string used for generated trace and request ids."""
    return str(uuid.uuid4())
