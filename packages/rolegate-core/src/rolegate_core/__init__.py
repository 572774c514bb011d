"""rolegate core - role-based access control with inheritance, globs and conditional grants."""

from rolegate_core.adapters import InMemoryRoleAdapter
from rolegate_core.conditions import Condition, normalize_when
from rolegate_core.config import RBACConfig, RolegateConfig, load_config, load_roles
from rolegate_core.errors import (
    ConfigError,
    RolegateError,
    RoleValidationError,
    UnknownRoleError,
)
from rolegate_core.interfaces import RoleAdapter
from rolegate_core.loggers import ConsoleLogger, default_logger
from rolegate_core.rbac import RBAC, create, create_tenant_rbac
from rolegate_core.roles import Permission, RoleDefinition, Roles, map_roles

__version__ = "0.1.0"

__all__ = [
    "RBAC",
    "Condition",
    "ConfigError",
    "ConsoleLogger",
    "InMemoryRoleAdapter",
    "Permission",
    "RBACConfig",
    "RoleAdapter",
    "RoleDefinition",
    "RoleValidationError",
    "RolegateConfig",
    "RolegateError",
    "Roles",
    "UnknownRoleError",
    "create",
    "create_tenant_rbac",
    "default_logger",
    "load_config",
    "load_roles",
    "map_roles",
    "normalize_when",
]
