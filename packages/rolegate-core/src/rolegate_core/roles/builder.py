"""Build the lookup structure used by the permission resolver."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from rolegate_core.conditions import ALLOW, Condition
from rolegate_core.errors import RoleValidationError
from rolegate_core.matching import PatternPermission, compile_permission_pattern
from rolegate_core.roles.models import Permission, RoleDefinition


@dataclass(frozen=True)
class PermissionData:
    """A role's grants partitioned by how they are looked up."""

    direct: frozenset[str]
    conditional: Mapping[str, Condition]
    patterns: tuple[PatternPermission, ...]
    names: tuple[str, ...]


@dataclass(frozen=True)
class MappedRole:
    """Lookup-optimized form of a :class:`RoleDefinition`."""

    name: str
    direct: frozenset[str]
    conditional: Mapping[str, Condition]
    patterns: tuple[PatternPermission, ...]
    names: tuple[str, ...]
    inherits: tuple[str, ...] = ()


MappedRoles = Mapping[str, MappedRole]


def build_permission_data(can: Iterable[str | Permission | Mapping[str, Any]]) -> PermissionData:
    """Partition grants into direct, conditional and pattern permissions.

    When a name is declared twice the last declaration wins. Pattern order
    follows the first declaration of each name.
    """
    entries: dict[str, Condition] = {}
    for item in can:
        if isinstance(item, str):
            entries[item] = ALLOW
            continue
        permission = item if isinstance(item, Permission) else Permission.model_validate(item)
        entries[permission.name] = permission.when

    direct: set[str] = set()
    conditional: dict[str, Condition] = {}
    patterns: list[PatternPermission] = []
    for name, when in entries.items():
        regex = compile_permission_pattern(name)
        if regex is not None:
            patterns.append(PatternPermission(name=name, regex=regex, when=when))
        elif when is ALLOW:
            direct.add(name)
        else:
            conditional[name] = when

    return PermissionData(
        direct=frozenset(direct),
        conditional=MappingProxyType(conditional),
        patterns=tuple(patterns),
        names=tuple(entries),
    )


def validate_role(name: object, definition: object) -> RoleDefinition:
    """Validate one raw role definition."""
    if not isinstance(name, str):
        raise RoleValidationError(
            f"Expected role name to be a string, got {type(name).__name__}", field="role"
        )
    try:
        return RoleDefinition.model_validate(definition)
    except ValidationError as e:
        raise RoleValidationError(f"Invalid definition for role {name!r}: {e}", field=name) from e


def validate_roles(roles: object) -> dict[str, RoleDefinition]:
    """Validate a raw roles container into a fresh ``{name: RoleDefinition}`` dict."""
    if not isinstance(roles, Mapping):
        raise RoleValidationError(
            f"Expected roles to be a mapping, got {type(roles).__name__}", field="roles"
        )
    return {name: validate_role(name, definition) for name, definition in roles.items()}


def map_role(name: str, definition: RoleDefinition) -> MappedRole:
    data = build_permission_data(definition.can)
    return MappedRole(
        name=name,
        direct=data.direct,
        conditional=data.conditional,
        patterns=data.patterns,
        names=data.names,
        inherits=tuple(definition.inherits or ()),
    )


def map_roles(roles: Mapping[str, RoleDefinition | Mapping[str, Any]]) -> MappedRoles:
    """Validate raw roles and build a fresh, read-only role map."""
    validated = validate_roles(roles)
    return MappingProxyType({name: map_role(name, role) for name, role in validated.items()})
