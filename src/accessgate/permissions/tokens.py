"""Permission token rules.

Provides:
- ``WILDCARD`` — the reserved ``*`` token meaning "every permission".
- ``OWN_SUFFIX`` — suffix marking ownership-qualified permissions.
- ``validate_permission()`` — boundary check for raw token strings.
- ``is_ownership_qualified()`` / ``is_wildcard()``.
"""

from __future__ import annotations

from ..exceptions import InvalidPermissionError

WILDCARD = "*"
OWN_SUFFIX = "Own"


def validate_permission(token: object) -> str:
    """Return ``token`` unchanged if it is a usable permission string.

    Tokens are compared by exact, case-sensitive equality, so the only
    rejected shapes are non-strings, the empty string, and strings
    containing whitespace.

    Raises:
        InvalidPermissionError: If the token is malformed.
    """
    if not isinstance(token, str):
        raise InvalidPermissionError(
            f"Permission must be a string, got {type(token).__name__}",
            token=repr(token),
        )
    if not token:
        raise InvalidPermissionError("Permission token must not be empty")
    if any(ch.isspace() for ch in token):
        raise InvalidPermissionError(f"Permission token contains whitespace: {token!r}", token=token)
    return token


def is_wildcard(token: str) -> bool:
    return token == WILDCARD


def is_ownership_qualified(token: str) -> bool:
    """True when holding ``token`` also requires the ownership predicate."""
    return token.endswith(OWN_SUFFIX)


__all__ = [
    "OWN_SUFFIX",
    "WILDCARD",
    "is_ownership_qualified",
    "is_wildcard",
    "validate_permission",
]
