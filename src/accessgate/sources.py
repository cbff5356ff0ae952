"""Subject permission sources.

The engine never loads subjects itself. A ``SubjectPermissionSource``
answers, for one subject id, whether the subject is a super-subject and
which permissions are granted directly and through the current position.

Provides:
- ``SubjectGrants`` — validated output shape of a source.
- ``SubjectPermissionSource`` — abstract boundary (async ``fetch``).
- ``grants_from_record()`` — turn a stored subject record into grants.
- ``InMemoryPermissionSource`` — dict-backed source for tests and fixtures.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import SubjectNotFoundError
from .permissions.permission_set import PermissionSet, flatten_grants
from .permissions.tokens import WILDCARD, validate_permission

logger = logging.getLogger(__name__)

DEFAULT_SUPER_SUBJECT_ROLE = "owner"


class SubjectGrants(BaseModel):
    """What a source knows about one subject."""

    model_config = ConfigDict(frozen=True)

    is_super_subject: bool = False
    direct_permissions: frozenset[str] = Field(default_factory=frozenset)
    position_permissions: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("direct_permissions", "position_permissions")
    @classmethod
    def validate_tokens(cls, v: frozenset[str]) -> frozenset[str]:
        for token in v:
            validate_permission(token)
        return v

    @property
    def direct(self) -> PermissionSet:
        return PermissionSet(self.direct_permissions)

    @property
    def position(self) -> PermissionSet:
        return PermissionSet(self.position_permissions)


class SubjectPermissionSource(ABC):
    """Boundary to whatever stores subjects and their access rights."""

    @abstractmethod
    async def fetch(self, subject_id: str) -> SubjectGrants:
        """Return the grants of ``subject_id``.

        Raises:
            SubjectNotFoundError: If the id cannot be resolved.
        """
        raise NotImplementedError


def _grouped_permissions(access: Any) -> Any:
    if not isinstance(access, Mapping):
        return None
    return access.get("permissions")


def grants_from_record(
    record: Mapping[str, Any],
    *,
    super_subject_role: str = DEFAULT_SUPER_SUBJECT_ROLE,
) -> SubjectGrants:
    """Build grants from a subject record as stored by the application.

    Expected shape (missing keys mean "no grants")::

        {
            "role": "employee",
            "access": {"permissions": {"user": ["user.viewOwn"], ...}},
            "current_position": {"access": {"permissions": {...}}},
        }

    A record whose ``role`` equals ``super_subject_role`` is a super-subject;
    its stored grants are ignored.
    """
    if record.get("role") == super_subject_role:
        return SubjectGrants(is_super_subject=True, direct_permissions=frozenset({WILDCARD}))

    direct = flatten_grants(_grouped_permissions(record.get("access")))
    position = record.get("current_position")
    # An unpopulated position reference (a bare id) carries no grants.
    if not isinstance(position, Mapping):
        position = {}
    position_grants = flatten_grants(_grouped_permissions(position.get("access")))

    return SubjectGrants(
        is_super_subject=False,
        direct_permissions=direct.as_frozenset(),
        position_permissions=position_grants.as_frozenset(),
    )


class InMemoryPermissionSource(SubjectPermissionSource):
    """Source backed by a dict of subject id → grants or raw record.

    Raw records are converted with :func:`grants_from_record` on every
    fetch, so edits to the dict are visible to the next request.

    Example::

        source = InMemoryPermissionSource({
            "u1": SubjectGrants(position_permissions=frozenset({"user.edit"})),
            "boss": {"role": "owner"},
        })
        grants = await source.fetch("u1")
    """

    def __init__(
        self,
        subjects: Mapping[str, SubjectGrants | Mapping[str, Any]] | None = None,
        *,
        super_subject_role: str = DEFAULT_SUPER_SUBJECT_ROLE,
    ) -> None:
        self._subjects: dict[str, SubjectGrants | Mapping[str, Any]] = dict(subjects or {})
        self._super_subject_role = super_subject_role

    def put(self, subject_id: str, grants: SubjectGrants | Mapping[str, Any]) -> None:
        self._subjects[subject_id] = grants

    def remove(self, subject_id: str) -> None:
        self._subjects.pop(subject_id, None)

    async def fetch(self, subject_id: str) -> SubjectGrants:
        try:
            entry = self._subjects[subject_id]
        except KeyError:
            logger.debug("Subject %s not present in in-memory source", subject_id)
            raise SubjectNotFoundError(subject_id) from None

        if isinstance(entry, SubjectGrants):
            return entry
        return grants_from_record(entry, super_subject_role=self._super_subject_role)


__all__ = [
    "DEFAULT_SUPER_SUBJECT_ROLE",
    "InMemoryPermissionSource",
    "SubjectGrants",
    "SubjectPermissionSource",
    "grants_from_record",
]
