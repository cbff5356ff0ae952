"""Configuration for services embedding accessgate.

Pydantic-validated settings plus the loaders that turn them into runtime
objects. ``load_config_from_env()`` is the only place environment variables
are read.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from pydantic import BaseModel, Field, field_validator

if TYPE_CHECKING:
    from .permissions.hierarchy import HierarchyGraph


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AccessGateConfig(BaseModel):
    """Settings for the authorization engine.

    Environment variables:
        ACCESSGATE_LOG_LEVEL          — logging level
        ACCESSGATE_LOG_JSON           — JSON log format (true/false)
        ACCESSGATE_HIERARCHY_PATH     — JSON hierarchy file (default: built-in catalog)
        ACCESSGATE_SUPER_SUBJECT_ROLE — record role treated as super-subject
        ACCESSGATE_AUDIT_DENIALS      — log denials at WARNING
        SERVICE_NAME                  — service logger name
    """

    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the service",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )
    hierarchy_path: Optional[Path] = Field(
        default=None,
        description="JSON file with the permission hierarchy; None uses the built-in catalog",
    )
    super_subject_role: str = Field(
        default="owner",
        description="Subject record role that bypasses all permission checks",
    )
    audit_denials: bool = Field(
        default=False,
        description="Log every denial at WARNING level",
    )
    service_name: Optional[str] = Field(
        default=None,
        description="Service name used for the service logger",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    @field_validator("super_subject_role")
    @classmethod
    def validate_super_subject_role(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("super_subject_role must not be empty")
        return v

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


def _truthy(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("true", "1", "yes", "on")


def load_config_from_env() -> AccessGateConfig:
    """Load configuration from environment variables.

    Returns:
        AccessGateConfig with values from environment or defaults.
    """
    import os

    return AccessGateConfig(
        log_level=os.getenv("ACCESSGATE_LOG_LEVEL", "INFO"),
        log_json=_truthy(os.getenv("ACCESSGATE_LOG_JSON")),
        hierarchy_path=os.getenv("ACCESSGATE_HIERARCHY_PATH") or None,
        super_subject_role=os.getenv("ACCESSGATE_SUPER_SUBJECT_ROLE", "owner"),
        audit_denials=_truthy(os.getenv("ACCESSGATE_AUDIT_DENIALS")),
        service_name=os.getenv("SERVICE_NAME"),
    )


def load_hierarchy(config: AccessGateConfig) -> HierarchyGraph:
    """Build the process-wide hierarchy once, at start-up.

    Raises:
        ConfigurationError: If ``hierarchy_path`` is set but unreadable.
    """
    from .permissions.catalog import DEFAULT_HIERARCHY
    from .permissions.hierarchy import HierarchyGraph

    if config.hierarchy_path is None:
        return DEFAULT_HIERARCHY
    return HierarchyGraph.from_json_file(config.hierarchy_path)


__all__ = [
    "AccessGateConfig",
    "LogLevel",
    "load_config_from_env",
    "load_hierarchy",
]
