"""Permission primitives for accessgate.

Defines:
- Permission token rules (wildcard, ``Own`` suffix, validation)
- PermissionSet value type
- HierarchyGraph and expand(): implication closure
- Permissions / DEFAULT_HIERARCHY: the application's permission catalog
- Condition trees (Leaf / AnyOf / AllOf) and PermissionContext
"""

from .catalog import DEFAULT_HIERARCHY, Permissions, resource_hierarchy
from .conditions import (
    AllOf,
    AnyOf,
    Leaf,
    PermissionCondition,
    all_of,
    any_of,
    parse_condition,
    to_dict,
)
from .context import EMPTY_CONTEXT, PermissionContext
from .hierarchy import HierarchyGraph, expand
from .permission_set import (
    PermissionSet,
    contains,
    contains_wildcard,
    flatten_grants,
    union,
)
from .tokens import (
    OWN_SUFFIX,
    WILDCARD,
    is_ownership_qualified,
    is_wildcard,
    validate_permission,
)

__all__ = [
    "DEFAULT_HIERARCHY",
    "EMPTY_CONTEXT",
    "OWN_SUFFIX",
    "WILDCARD",
    "AllOf",
    "AnyOf",
    "HierarchyGraph",
    "Leaf",
    "PermissionCondition",
    "PermissionContext",
    "PermissionSet",
    "Permissions",
    "all_of",
    "any_of",
    "contains",
    "contains_wildcard",
    "expand",
    "flatten_grants",
    "is_ownership_qualified",
    "is_wildcard",
    "parse_condition",
    "resource_hierarchy",
    "to_dict",
    "union",
    "validate_permission",
]
