"""
Cross-Origin Gateway - Logging Configuration
============================================
structlog setup with sanitizing of client-supplied header values
"""

import logging
import re
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor

from .config import settings


# Event keys whose values are copied from request headers the client controls
REQUEST_DERIVED_KEYS = frozenset({"origin", "referer", "requested_method", "path"})
MAX_LOGGED_VALUE_LENGTH = 256
CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


# =============================================================================
# Custom Processors
# =============================================================================


def sanitize_request_values(
    logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Neutralize header-derived values before rendering.

    Control characters are escaped so a crafted Origin cannot forge log
    lines, and overlong values are cut to MAX_LOGGED_VALUE_LENGTH.
    """
    for key in REQUEST_DERIVED_KEYS.intersection(event_dict):
        value = event_dict[key]
        if not isinstance(value, str):
            continue
        value = CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", value)
        if len(value) > MAX_LOGGED_VALUE_LENGTH:
            value = value[:MAX_LOGGED_VALUE_LENGTH] + "...[truncated]"
        event_dict[key] = value
    return event_dict


def add_service_context(
    logger: logging.Logger, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Tag events with the service name and version."""
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("version", settings.app_version)
    return event_dict


# =============================================================================
# Logger Configuration
# =============================================================================


def build_processors(json_output: bool) -> list[Processor]:
    """Processor chain shared by console and JSON output."""
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_service_context,
        sanitize_request_values,
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog on top of standard logging.

    Args:
        level: Log level name; defaults to settings.log_level
        json_output: Render JSON; defaults to on outside dev mode
    """
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)
    if json_output is None:
        json_output = not settings.dev_mode

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, namespaced under ``crossorigin``."""
    return structlog.get_logger(f"crossorigin.{name}" if name else "crossorigin")


configure_logging()

logger = get_logger()
