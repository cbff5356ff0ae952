from .config import AccessGateConfig, LogLevel, load_config_from_env, load_hierarchy
from .effective import (
    EffectivePermissions,
    EffectivePermissionsCalculator,
    resolve_effective_permissions,
)
from .evaluator import ConditionEvaluator, evaluate
from .exceptions import (
    AccessGateError,
    ConfigurationError,
    InvalidPermissionError,
    PermissionDeniedError,
    SubjectNotFoundError,
)
from .gate import AuthorizationGate, AuthorizationResult, RequestAuthorizer
from .logging import (
    AccessGateFormatter,
    AccessGateLoggerAdapter,
    get_access_logger,
    safe_preview,
    setup_logging,
)
from .permissions import (
    DEFAULT_HIERARCHY,
    WILDCARD,
    AllOf,
    AnyOf,
    HierarchyGraph,
    Leaf,
    PermissionCondition,
    PermissionContext,
    Permissions,
    PermissionSet,
    all_of,
    any_of,
    expand,
    flatten_grants,
    parse_condition,
)
from .sources import (
    InMemoryPermissionSource,
    SubjectGrants,
    SubjectPermissionSource,
    grants_from_record,
)

__all__ = [
    'AccessGateConfig',
    'LogLevel',
    'load_config_from_env',
    'load_hierarchy',
    'EffectivePermissions',
    'EffectivePermissionsCalculator',
    'resolve_effective_permissions',
    'ConditionEvaluator',
    'evaluate',
    'AccessGateError',
    'ConfigurationError',
    'InvalidPermissionError',
    'PermissionDeniedError',
    'SubjectNotFoundError',
    'AuthorizationGate',
    'AuthorizationResult',
    'RequestAuthorizer',
    'AccessGateFormatter',
    'AccessGateLoggerAdapter',
    'get_access_logger',
    'safe_preview',
    'setup_logging',
    'DEFAULT_HIERARCHY',
    'WILDCARD',
    'AllOf',
    'AnyOf',
    'HierarchyGraph',
    'Leaf',
    'PermissionCondition',
    'PermissionContext',
    'Permissions',
    'PermissionSet',
    'all_of',
    'any_of',
    'expand',
    'flatten_grants',
    'parse_condition',
    'InMemoryPermissionSource',
    'SubjectGrants',
    'SubjectPermissionSource',
    'grants_from_record',
]
