"""Structured logging configuration for deskcapture using structlog.

Logs go to stderr (and optionally a file) so that stdout stays free for
callers that stream image data or protocol messages.
"""

import logging
import os
import sys
from collections.abc import MutableMapping
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings

DISABLE_ENV_VAR = "DESKCAPTURE_DISABLE_CONSOLE_LOGGING"

# Parent of every module logger; the host's root logger is left alone
PACKAGE_LOGGER = "deskcapture"

# Event values longer than this are replaced by a size marker
MAX_VALUE_BYTES = 256


def redact_binary(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace raw image bytes in an event with their length.

    Capture code logs tool output and PNG buffers on failure paths; those
    must never reach a log file verbatim.
    """
    for key, value in event_dict.items():
        if isinstance(value, (bytes, bytearray)) and len(value) > MAX_VALUE_BYTES:
            event_dict[key] = f"<{len(value)} bytes>"
    return event_dict


def build_processors(
    structured: bool, add_timestamp: bool, add_caller_info: bool, colors: bool
) -> list[Any]:
    """Assemble the structlog processor chain.

    Args:
        structured: Finish with the JSON renderer instead of the console renderer
        add_timestamp: Add ISO timestamps
        add_caller_info: Add file, line and function of the call site
        colors: Colorize console output

    Returns:
        Processors in application order
    """
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_binary,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    if add_caller_info:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if structured
        else structlog.dev.ConsoleRenderer(colors=colors),
    ]
    return processors


def build_handlers(console: bool, log_file: Path | None) -> list[logging.Handler]:
    """Create the stdlib handlers, stderr and an optional file."""
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(logging.Formatter("%(message)s"))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = True,
    console: bool = True,
    add_timestamp: bool = True,
    add_caller_info: bool = True,
    colorize: bool = True,
) -> None:
    """Configure structured logging for deskcapture.

    Handlers are installed on the ``deskcapture`` logger, which stops
    propagating, so an embedding application keeps its own root handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output (overridden by DESKCAPTURE_DISABLE_CONSOLE_LOGGING)
        add_timestamp: Add timestamps to logs
        add_caller_info: Add caller information
        colorize: Colorize console output (only for non-structured)
    """
    if os.getenv(DISABLE_ENV_VAR) == "1":
        console = False
        log_file = None

    structlog.configure(
        processors=build_processors(
            structured, add_timestamp, add_caller_info, colors=colorize and console
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers = build_handlers(console, log_file)
    if not handlers:
        handlers = [logging.NullHandler()]
        level = "CRITICAL"

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for old in package_logger.handlers[:]:
        package_logger.removeHandler(old)
        old.close()
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.propagate = False


_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Configure logging from settings when the first logger is requested.

    Modules request their logger at import, so this runs when deskcapture
    is imported. Only the ``deskcapture`` logger is touched.
    """
    global _logging_initialized

    if _logging_initialized:
        return
    _logging_initialized = True

    if os.getenv(DISABLE_ENV_VAR) == "1":
        setup_logging(console=False)
        return

    try:
        settings = get_settings()
        setup_logging(
            level="DEBUG" if settings.debug_mode else settings.log_level,
            log_file=settings.log_file,
            structured=settings.structured_logs and not settings.debug_mode,
            colorize=settings.debug_mode,
        )
    except (ValueError, OSError, AttributeError):
        # Invalid settings or an unwritable log file: plain console logging
        setup_logging(level="INFO", structured=False)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.BoundLogger, structlog.get_logger(name))
