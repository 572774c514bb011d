"""Role schema and role-map building."""

from rolegate_core.roles.builder import (
    MappedRole,
    MappedRoles,
    PermissionData,
    build_permission_data,
    map_role,
    map_roles,
    validate_role,
    validate_roles,
)
from rolegate_core.roles.models import Permission, RoleDefinition, Roles

__all__ = [
    "MappedRole",
    "MappedRoles",
    "Permission",
    "PermissionData",
    "RoleDefinition",
    "Roles",
    "build_permission_data",
    "map_role",
    "map_roles",
    "validate_role",
    "validate_roles",
]
