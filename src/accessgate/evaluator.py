"""Recursive evaluation of permission conditions."""

from __future__ import annotations

from .effective import EffectivePermissions
from .permissions.conditions import AllOf, AnyOf, Leaf, PermissionCondition
from .permissions.context import EMPTY_CONTEXT, PermissionContext


class ConditionEvaluator:
    """Decide whether a condition holds for a subject.

    Stateless; one instance can be shared by any number of concurrent
    checks.

    Rules:
    - A super-subject (flagged, or holding ``*``) satisfies every
      condition, ownership included.
    - ``Leaf``: the token must be held. Tokens ending in ``Own`` also
      require the subject to be the target or owner in ``context``.
    - ``AnyOf``: short-circuit OR, empty is False.
    - ``AllOf``: short-circuit AND, empty is True.

    Preconditions: conditions are built through ``Leaf`` / ``AnyOf`` /
    ``AllOf`` or ``parse_condition``, which reject malformed trees.
    """

    def evaluate(
        self,
        condition: PermissionCondition,
        effective: EffectivePermissions,
        subject_id: str,
        context: PermissionContext | None = None,
    ) -> bool:
        if effective.is_super_subject or effective.permissions.contains_wildcard():
            return True
        return self._evaluate(condition, effective, subject_id, context or EMPTY_CONTEXT)

    def _evaluate(
        self,
        condition: PermissionCondition,
        effective: EffectivePermissions,
        subject_id: str,
        context: PermissionContext,
    ) -> bool:
        if isinstance(condition, Leaf):
            has_token = effective.has(condition.permission)
            if condition.ownership_qualified:
                return has_token and context.is_owner(subject_id)
            return has_token

        if isinstance(condition, AnyOf):
            return any(self._evaluate(c, effective, subject_id, context) for c in condition.conditions)

        if isinstance(condition, AllOf):
            return all(self._evaluate(c, effective, subject_id, context) for c in condition.conditions)

        raise TypeError(f"Unsupported condition type: {type(condition).__name__}")


def evaluate(
    condition: PermissionCondition,
    effective: EffectivePermissions,
    subject_id: str,
    context: PermissionContext | None = None,
) -> bool:
    """Module-level shortcut for :meth:`ConditionEvaluator.evaluate`."""
    return _default_evaluator.evaluate(condition, effective, subject_id, context)


_default_evaluator = ConditionEvaluator()


__all__ = [
    "ConditionEvaluator",
    "evaluate",
]
