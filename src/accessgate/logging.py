"""Logging utilities for accessgate.

This module provides:
- Logging configuration from AccessGateConfig
- Safe, length-bounded previews of conditions and contexts
- Structured (JSON) output carrying subject_id and request_id
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .config import AccessGateConfig, LogLevel

# Record attributes set by the logging module itself; everything else is "extra".
_RESERVED_ATTRS = frozenset(
    {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info", "taskName",
        "subject_id", "request_id",
    }
)


def safe_preview(value: Any, limit: int = 240) -> str:
    """Create a length-bounded, single-line preview of a value for logging.

    Args:
        value: The value to preview (any type)
        limit: Maximum length of the preview (default: 240)

    Returns:
        A truncated string representation
    """
    if value is None:
        return ""

    if isinstance(value, str):
        s = value
    elif isinstance(value, (dict, list)):
        try:
            s = json.dumps(value, default=str, ensure_ascii=False, sort_keys=True)
        except (TypeError, ValueError):
            s = str(value)
    else:
        s = str(value)

    s = " ".join(s.split())

    if len(s) > limit:
        return s[: limit - 1] + "…"

    return s


class AccessGateFormatter(logging.Formatter):
    """Formatter that includes subject_id / request_id, as JSON or plain text."""

    def __init__(self, json_format: bool = True, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.json_format = json_format

    def format(self, record: logging.LogRecord) -> str:
        subject_id = getattr(record, "subject_id", None)
        request_id = getattr(record, "request_id", None)

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if subject_id:
            log_data["subject_id"] = str(subject_id)
        if request_id:
            log_data["request_id"] = str(request_id)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = safe_preview(value)

        if self.json_format:
            return json.dumps(log_data, default=str, ensure_ascii=False)

        parts = [
            f"[{log_data['timestamp']}]",
            log_data["level"],
            log_data["logger"],
        ]
        if subject_id:
            parts.append(f"subject_id={log_data['subject_id']}")
        if request_id:
            parts.append(f"request_id={log_data['request_id']}")
        parts.append(f": {log_data['message']}")
        return " ".join(parts)


class AccessGateLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that adds subject_id and request_id to every record.

    Usage:
        logger = get_access_logger(__name__, subject_id=user_id)
        logger.info("Checking access", request_id=req_id)
    """

    def __init__(
        self,
        logger: logging.Logger,
        subject_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(logger, {})
        self.subject_id = subject_id
        self.request_id = request_id

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        subject_id = kwargs.pop("subject_id", self.subject_id)
        request_id = kwargs.pop("request_id", self.request_id)

        extra = dict(kwargs.get("extra") or {})
        if subject_id:
            extra["subject_id"] = subject_id
        if request_id:
            extra["request_id"] = request_id
        kwargs["extra"] = extra

        return msg, kwargs


def setup_logging(
    config: Optional[AccessGateConfig] = None,
    json_format: Optional[bool] = None,
) -> None:
    """Configure root logging for a service embedding accessgate.

    Args:
        config: AccessGateConfig instance (if None, loads from environment)
        json_format: Override ``config.log_json``
    """
    if config is None:
        from .config import load_config_from_env

        config = load_config_from_env()

    level_map = {
        LogLevel.DEBUG: logging.DEBUG,
        LogLevel.INFO: logging.INFO,
        LogLevel.WARNING: logging.WARNING,
        LogLevel.ERROR: logging.ERROR,
        LogLevel.CRITICAL: logging.CRITICAL,
    }
    log_level = level_map.get(LogLevel(config.log_level), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(
        AccessGateFormatter(json_format=config.log_json if json_format is None else json_format)
    )
    root_logger.addHandler(console_handler)

    if config.service_name:
        logging.getLogger(config.service_name).setLevel(log_level)


def get_access_logger(
    name: str,
    subject_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> AccessGateLoggerAdapter:
    """Get a logger adapter bound to a subject and request.

    Example:
        logger = get_access_logger(__name__, subject_id="u1", request_id="req-9")
        logger.info("Resolved permissions")
    """
    return AccessGateLoggerAdapter(logging.getLogger(name), subject_id=subject_id, request_id=request_id)


__all__ = [
    "AccessGateFormatter",
    "AccessGateLoggerAdapter",
    "get_access_logger",
    "safe_preview",
    "setup_logging",
]
