"""Per-check ownership context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class PermissionContext:
    """Resource relationship supplied by the caller for one check.

    Only ``target_user_id`` and ``resource_owner_id`` take part in the
    decision, and only for ownership-qualified permissions. When both are
    absent ownership is never satisfied.

    Attributes:
        target_user_id: Subject the action is aimed at (e.g. the profile being edited).
        resource_owner_id: Subject owning the resource (e.g. the author of a note).
        resource_type: Audit metadata, e.g. ``"note"``.
        resource_id: Audit metadata.
        extra: Additional request metadata, never consulted by the engine.
    """

    target_user_id: Optional[str] = None
    resource_owner_id: Optional[str] = None
    resource_type: Optional[str] = None
    resource_id: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    def is_owner(self, subject_id: str) -> bool:
        """True when ``subject_id`` is the target or the owner of the resource."""
        if self.target_user_id is not None and self.target_user_id == subject_id:
            return True
        return self.resource_owner_id is not None and self.resource_owner_id == subject_id

    def as_log_dict(self) -> dict[str, Any]:
        return {
            key: value
            for key, value in (
                ("target_user_id", self.target_user_id),
                ("resource_owner_id", self.resource_owner_id),
                ("resource_type", self.resource_type),
                ("resource_id", self.resource_id),
            )
            if value is not None
        }


EMPTY_CONTEXT = PermissionContext()


__all__ = [
    "EMPTY_CONTEXT",
    "PermissionContext",
]
