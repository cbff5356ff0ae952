"""Permission condition trees.

A condition is one of:
- ``Leaf(permission)`` — the subject must hold ``permission``.
- ``AnyOf(conditions)`` — at least one child holds (empty → never).
- ``AllOf(conditions)`` — every child holds (empty → always).

Route handlers usually describe requirements with plain data
(``"user.edit"``, ``{"any": [...]}``, ``{"all": [...]}``);
``parse_condition`` turns that shape into a tree and ``to_dict``
turns it back for audit logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Union

from ..exceptions import InvalidPermissionError
from .tokens import is_ownership_qualified, validate_permission


@dataclass(frozen=True)
class Leaf:
    """Single permission requirement."""

    permission: str

    def __post_init__(self) -> None:
        validate_permission(self.permission)

    @property
    def ownership_qualified(self) -> bool:
        return is_ownership_qualified(self.permission)


@dataclass(frozen=True)
class AnyOf:
    """OR over child conditions."""

    conditions: tuple[PermissionCondition, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", _coerce_children(self.conditions, "any"))


@dataclass(frozen=True)
class AllOf:
    """AND over child conditions."""

    conditions: tuple[PermissionCondition, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "conditions", _coerce_children(self.conditions, "all"))


PermissionCondition = Union[Leaf, AnyOf, AllOf]

_CONDITION_TYPES = (Leaf, AnyOf, AllOf)


def _coerce_children(children: Iterable[Any], kind: str) -> tuple[PermissionCondition, ...]:
    if isinstance(children, (str, dict)) or not isinstance(children, Iterable):
        raise InvalidPermissionError(f"'{kind}' condition expects a list of conditions", kind=kind)
    return tuple(parse_condition(child) for child in children)


def any_of(*conditions: PermissionCondition | str) -> AnyOf:
    """``AnyOf`` accepting bare permission strings as leaves."""
    return AnyOf(tuple(parse_condition(c) for c in conditions))


def all_of(*conditions: PermissionCondition | str) -> AllOf:
    """``AllOf`` accepting bare permission strings as leaves."""
    return AllOf(tuple(parse_condition(c) for c in conditions))


def parse_condition(raw: Any) -> PermissionCondition:
    """Build a condition tree from its plain-data form.

    Accepts an existing condition (returned as-is), a permission string,
    or a single-key mapping ``{"any": [...]}`` / ``{"all": [...]}``.

    Raises:
        InvalidPermissionError: For any other shape, or a malformed token.

    Example::

        parse_condition({"any": ["user.edit", {"all": ["user.editOwn", "user.viewOwn"]}]})
        # AnyOf((Leaf('user.edit'), AllOf((Leaf('user.editOwn'), Leaf('user.viewOwn')))))
    """
    if isinstance(raw, _CONDITION_TYPES):
        return raw
    if isinstance(raw, str):
        return Leaf(raw)
    if isinstance(raw, dict):
        if len(raw) != 1:
            raise InvalidPermissionError(
                f"Condition mapping must have exactly one key ('any' or 'all'), got {sorted(raw)}",
            )
        (key, children), = raw.items()
        if key == "any":
            return AnyOf(children)
        if key == "all":
            return AllOf(children)
        raise InvalidPermissionError(f"Unknown condition combinator: {key!r}", combinator=str(key))
    raise InvalidPermissionError(f"Unsupported condition type: {type(raw).__name__}")


def to_dict(condition: PermissionCondition) -> str | dict[str, list[Any]]:
    """Plain-data form of a condition (inverse of ``parse_condition``)."""
    if isinstance(condition, Leaf):
        return condition.permission
    if isinstance(condition, AnyOf):
        return {"any": [to_dict(c) for c in condition.conditions]}
    return {"all": [to_dict(c) for c in condition.conditions]}


__all__ = [
    "AllOf",
    "AnyOf",
    "Leaf",
    "PermissionCondition",
    "all_of",
    "any_of",
    "parse_condition",
    "to_dict",
]
