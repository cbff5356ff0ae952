"""Effective permissions: grants merged and expanded through the hierarchy."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .permissions.hierarchy import HierarchyGraph, expand
from .permissions.permission_set import PermissionSet
from .sources import SubjectGrants, SubjectPermissionSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectivePermissions:
    """Fully resolved permissions of one subject at decision time.

    Valid for one check or one request at most. Never store it across
    requests: grants may change in between.
    """

    is_super_subject: bool
    permissions: PermissionSet

    @classmethod
    def super_subject(cls) -> EffectivePermissions:
        return cls(is_super_subject=True, permissions=PermissionSet.wildcard())

    def has(self, token: str) -> bool:
        return self.is_super_subject or self.permissions.contains_wildcard() or self.permissions.contains(token)


def resolve_effective_permissions(grants: SubjectGrants, graph: HierarchyGraph) -> EffectivePermissions:
    """Merge direct and position grants and expand them.

    A flagged super-subject short-circuits to ``{"*"}`` without expansion.
    Otherwise the subject is a super-subject iff the wildcard appears in
    the expanded set (granted directly, via the position, or implied).
    """
    if grants.is_super_subject:
        return EffectivePermissions.super_subject()

    seed = grants.direct.union(grants.position)
    expanded = expand(seed, graph)
    return EffectivePermissions(
        is_super_subject=expanded.contains_wildcard(),
        permissions=expanded,
    )


class EffectivePermissionsCalculator:
    """Fetch a subject's grants and resolve them against one hierarchy.

    Args:
        source: Where subject grants come from.
        graph: Implication hierarchy, fixed for the calculator's lifetime.
    """

    def __init__(self, source: SubjectPermissionSource, graph: HierarchyGraph) -> None:
        self._source = source
        self._graph = graph

    @property
    def graph(self) -> HierarchyGraph:
        return self._graph

    def resolve(self, grants: SubjectGrants) -> EffectivePermissions:
        return resolve_effective_permissions(grants, self._graph)

    async def compute(self, subject_id: str) -> EffectivePermissions:
        """Fetch and resolve. ``SubjectNotFoundError`` from the source propagates."""
        grants = await self._source.fetch(subject_id)
        effective = self.resolve(grants)
        logger.debug(
            "Resolved %d effective permissions for subject %s (super=%s)",
            len(effective.permissions),
            subject_id,
            effective.is_super_subject,
        )
        return effective


__all__ = [
    "EffectivePermissions",
    "EffectivePermissionsCalculator",
    "resolve_effective_permissions",
]
