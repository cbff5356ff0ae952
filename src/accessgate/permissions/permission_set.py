"""PermissionSet value type.

An immutable, unordered collection of unique permission tokens. The
wildcard ``*`` may be a member like any other token; ``contains_wildcard``
reports it.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping

from ..exceptions import InvalidPermissionError
from .tokens import WILDCARD, validate_permission


class PermissionSet:
    """Frozen set of permission tokens.

    Construct with :meth:`of` when the tokens come from outside the engine
    (every token is validated). The plain constructor trusts its input and
    is used internally for already-validated tokens.

    Example::

        a = PermissionSet.of(["user.view", "user.edit"])
        b = PermissionSet.of(["user.edit", "note.list"])
        (a | b).contains("note.list")   # True
        a.contains_wildcard()           # False
    """

    __slots__ = ("_tokens",)

    def __init__(self, tokens: Iterable[str] = ()) -> None:
        self._tokens: frozenset[str] = frozenset(tokens)

    @classmethod
    def of(cls, tokens: Iterable[str]) -> PermissionSet:
        """Build a set from untrusted tokens, validating each one."""
        return cls(validate_permission(token) for token in tokens)

    @classmethod
    def wildcard(cls) -> PermissionSet:
        return cls((WILDCARD,))

    def union(self, other: PermissionSet) -> PermissionSet:
        return PermissionSet(self._tokens | other._tokens)

    def contains(self, token: str) -> bool:
        return token in self._tokens

    def contains_wildcard(self) -> bool:
        return WILDCARD in self._tokens

    def as_frozenset(self) -> frozenset[str]:
        return self._tokens

    def __or__(self, other: PermissionSet) -> PermissionSet:
        if not isinstance(other, PermissionSet):
            return NotImplemented
        return self.union(other)

    def __contains__(self, token: object) -> bool:
        return token in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PermissionSet):
            return self._tokens == other._tokens
        if isinstance(other, (set, frozenset)):
            return self._tokens == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._tokens)

    def __repr__(self) -> str:
        return f"PermissionSet({sorted(self._tokens)!r})"


def union(a: PermissionSet, b: PermissionSet) -> PermissionSet:
    """Deduplicating union of two permission sets."""
    return a.union(b)


def contains(permissions: PermissionSet, token: str) -> bool:
    return permissions.contains(token)


def contains_wildcard(permissions: PermissionSet) -> bool:
    return permissions.contains_wildcard()


def flatten_grants(grants: Mapping[str, Iterable[str]] | Iterable[str] | None) -> PermissionSet:
    """Flatten stored grants into one validated set.

    Access rights are usually stored grouped by category
    (``{"user": ["user.view", ...], "note": [...]}``); the category keys
    carry no meaning for authorization and are discarded. A flat list of
    tokens is accepted as-is.

    Example::

        flatten_grants({"user": ["user.view"], "note": ["note.list", "user.view"]})
        # PermissionSet(['note.list', 'user.view'])
        flatten_grants(["user.view"])
        # PermissionSet(['user.view'])

    Raises:
        InvalidPermissionError: If ``grants`` is a bare string or holds a
            malformed token.
    """
    if not grants:
        return PermissionSet()
    if isinstance(grants, str):
        raise InvalidPermissionError(
            f"Grants must be a mapping or a list of tokens, got a string: {grants!r}",
            token=grants,
        )
    if isinstance(grants, Mapping):
        return PermissionSet.of(token for tokens in grants.values() for token in (tokens or ()))
    return PermissionSet.of(grants)


__all__ = [
    "PermissionSet",
    "contains",
    "contains_wildcard",
    "flatten_grants",
    "union",
]
