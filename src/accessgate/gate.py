"""Authorization gate — the single entry point for permission decisions.

Provides:
- ``AuthorizationResult`` — two-state outcome (granted / denied).
- ``AuthorizationGate`` — combines the calculator and the evaluator.
- ``RequestAuthorizer`` — per-request helper that resolves a subject once.

Usage::

    gate = AuthorizationGate(source, graph=DEFAULT_HIERARCHY)

    result = await gate.authorize(user_id, Leaf(Permissions.USER_EDIT))
    if result.denied:
        return redirect("/insufficient-permissions")

    # Several checks in one request, one fetch:
    auth = gate.for_subject(user_id, request_id=request_id)
    can_edit = await auth.authorize(Permissions.USER_EDIT)
    can_note = await auth.authorize("note.editOwn", PermissionContext(resource_owner_id=author_id))
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from .config import AccessGateConfig, load_hierarchy
from .effective import EffectivePermissions, EffectivePermissionsCalculator
from .evaluator import ConditionEvaluator
from .exceptions import PermissionDeniedError
from .logging import get_access_logger, safe_preview
from .permissions.conditions import PermissionCondition, parse_condition, to_dict
from .permissions.context import EMPTY_CONTEXT, PermissionContext
from .permissions.hierarchy import HierarchyGraph
from .sources import SubjectPermissionSource

logger = logging.getLogger(__name__)


# ── Result ───────────────────────────────────────────────────────


class AuthorizationResult(str, Enum):
    """Outcome of an authorization check.

    ``DENIED`` carries no detail about which part of the condition failed.
    """

    GRANTED = "granted"
    DENIED = "denied"

    @property
    def granted(self) -> bool:
        return self is AuthorizationResult.GRANTED

    @property
    def denied(self) -> bool:
        return self is AuthorizationResult.DENIED

    def __bool__(self) -> bool:
        return self.granted


# ── Gate ─────────────────────────────────────────────────────────


class AuthorizationGate:
    """Decide whether a subject may perform an action.

    Args:
        source: Supplies subject grants.
        graph: Implication hierarchy used to expand grants.
        evaluator: Condition evaluator (a default one is created if omitted).
        audit_denials: Log denials at WARNING instead of INFO.

    Conditions may be passed as trees or in plain-data form
    (``"user.edit"``, ``{"any": [...]}``); see ``parse_condition``.
    """

    def __init__(
        self,
        source: SubjectPermissionSource,
        graph: HierarchyGraph,
        *,
        evaluator: ConditionEvaluator | None = None,
        audit_denials: bool = False,
    ) -> None:
        self._calculator = EffectivePermissionsCalculator(source, graph)
        self._evaluator = evaluator or ConditionEvaluator()
        self._denial_level = logging.WARNING if audit_denials else logging.INFO

    @classmethod
    def from_config(cls, source: SubjectPermissionSource, config: AccessGateConfig) -> AuthorizationGate:
        """Build a gate with the hierarchy and audit settings of ``config``."""
        return cls(source, load_hierarchy(config), audit_denials=config.audit_denials)

    @property
    def calculator(self) -> EffectivePermissionsCalculator:
        return self._calculator

    async def compute_effective_permissions(self, subject_id: str) -> EffectivePermissions:
        """Fetch and expand the permissions of ``subject_id``.

        Raises:
            SubjectNotFoundError: Propagated from the source.
        """
        return await self._calculator.compute(subject_id)

    def check(
        self,
        subject_id: str,
        condition: PermissionCondition | str | dict[str, Any],
        effective: EffectivePermissions,
        context: PermissionContext | None = None,
        *,
        request_id: Optional[str] = None,
    ) -> AuthorizationResult:
        """Decide against already-resolved permissions. Never fetches."""
        tree = parse_condition(condition)
        ctx = context or EMPTY_CONTEXT
        if self._evaluator.evaluate(tree, effective, subject_id, ctx):
            return AuthorizationResult.GRANTED

        self._log_denial(subject_id, tree, ctx, request_id)
        return AuthorizationResult.DENIED

    async def authorize(
        self,
        subject_id: str,
        condition: PermissionCondition | str | dict[str, Any],
        context: PermissionContext | None = None,
        cached_effective: EffectivePermissions | None = None,
        *,
        request_id: Optional[str] = None,
    ) -> AuthorizationResult:
        """Resolve (unless ``cached_effective`` is given) and decide.

        ``cached_effective`` must belong to ``subject_id`` and to the
        current request.

        Raises:
            SubjectNotFoundError: When resolving and the subject is unknown.
        """
        effective = cached_effective
        if effective is None:
            effective = await self.compute_effective_permissions(subject_id)
        return self.check(subject_id, condition, effective, context, request_id=request_id)

    async def require(
        self,
        subject_id: str,
        condition: PermissionCondition | str | dict[str, Any],
        context: PermissionContext | None = None,
        cached_effective: EffectivePermissions | None = None,
        *,
        request_id: Optional[str] = None,
    ) -> None:
        """Like :meth:`authorize` but raise on denial.

        Raises:
            PermissionDeniedError: The denial signal for the request layer to translate.
            SubjectNotFoundError: When resolving and the subject is unknown.
        """
        result = await self.authorize(
            subject_id,
            condition,
            context,
            cached_effective,
            request_id=request_id,
        )
        if result.denied:
            raise PermissionDeniedError(subject_id)

    def for_subject(self, subject_id: str, *, request_id: Optional[str] = None) -> RequestAuthorizer:
        """Per-request helper bound to one subject."""
        return RequestAuthorizer(self, subject_id, request_id=request_id)

    def _log_denial(
        self,
        subject_id: str,
        condition: PermissionCondition,
        context: PermissionContext,
        request_id: Optional[str],
    ) -> None:
        if not logger.isEnabledFor(self._denial_level):
            return
        access_logger = get_access_logger(__name__, subject_id=subject_id, request_id=request_id)
        access_logger.log(
            self._denial_level,
            "Authorization denied for subject %s: condition=%s context=%s",
            subject_id,
            safe_preview(to_dict(condition)),
            safe_preview(context.as_log_dict()),
        )


# ── Per-request helper ───────────────────────────────────────────


class RequestAuthorizer:
    """Authorize many checks for one subject within one request.

    The subject's effective permissions are fetched and expanded on the
    first check and reused for every later one. Create a new instance per
    request; never keep one across requests.
    """

    def __init__(self, gate: AuthorizationGate, subject_id: str, *, request_id: Optional[str] = None) -> None:
        self._gate = gate
        self.subject_id = subject_id
        self.request_id = request_id
        self._effective: EffectivePermissions | None = None

    @property
    def resolved(self) -> bool:
        return self._effective is not None

    async def effective_permissions(self) -> EffectivePermissions:
        if self._effective is None:
            self._effective = await self._gate.compute_effective_permissions(self.subject_id)
        return self._effective

    async def authorize(
        self,
        condition: PermissionCondition | str | dict[str, Any],
        context: PermissionContext | None = None,
    ) -> AuthorizationResult:
        effective = await self.effective_permissions()
        return self._gate.check(self.subject_id, condition, effective, context, request_id=self.request_id)

    async def require(
        self,
        condition: PermissionCondition | str | dict[str, Any],
        context: PermissionContext | None = None,
    ) -> None:
        if (await self.authorize(condition, context)).denied:
            raise PermissionDeniedError(self.subject_id)


__all__ = [
    "AuthorizationGate",
    "AuthorizationResult",
    "RequestAuthorizer",
]
