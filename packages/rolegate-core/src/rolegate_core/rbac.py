"""Public RBAC entry point: construction, permission checks and role updates."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from rolegate_core.config.models import RBACConfig
from rolegate_core.errors import ConfigError
from rolegate_core.interfaces import RoleAdapter
from rolegate_core.loggers import PermissionLogger, default_logger
from rolegate_core.matching import Operation
from rolegate_core.resolver import PermissionResolver
from rolegate_core.roles import (
    MappedRoles,
    RoleDefinition,
    map_role,
    validate_role,
    validate_roles,
)

ConfigLike = RBACConfig | Mapping[str, Any] | None


def _coerce_config(config: ConfigLike) -> RBACConfig:
    if config is None:
        return RBACConfig()
    if isinstance(config, RBACConfig):
        return config
    try:
        return RBACConfig.model_validate(dict(config))
    except ValidationError as e:
        raise ConfigError(f"Invalid RBAC config: {e}") from e


def _build(roles: Mapping[str, RoleDefinition]) -> MappedRoles:
    return MappingProxyType({name: map_role(name, role) for name, role in roles.items()})


class RBAC:
    """Role-based access control over a set of role definitions.

    The mapped role table is rebuilt in full on every update and swapped in
    with a single assignment, so in-flight checks keep the snapshot they
    started with.
    """

    def __init__(self, roles: Mapping[str, Any], config: ConfigLike = None) -> None:
        self.config = _coerce_config(config)
        self._roles = validate_roles(roles)
        self._mapped = _build(self._roles)

    @property
    def logger(self) -> PermissionLogger | None:
        if not self.config.enable_logger:
            return None
        return self.config.logger or default_logger

    @property
    def roles(self) -> Mapping[str, RoleDefinition]:
        """Read-only view of the current role definitions."""
        return MappingProxyType(self._roles)

    @property
    def role_names(self) -> tuple[str, ...]:
        return tuple(self._roles)

    async def can(self, role: str, operation: Operation, params: Any = None) -> bool:
        """Check whether ``role`` may perform ``operation``.

        ``operation`` is an exact name, a glob (``products:*``), a
        ``/regex/flags`` string or a compiled pattern. ``params`` is passed to
        conditional grants.
        """
        resolver = PermissionResolver(self._mapped, self.logger)
        return await resolver.can(role, operation, params)

    def update_roles(self, roles: Mapping[str, Any]) -> None:
        """Replace the named roles; roles not mentioned are kept."""
        self._swap({**self._roles, **validate_roles(roles)})

    def add_role(self, name: str, definition: Any) -> None:
        """Insert or replace a single role."""
        self._swap({**self._roles, name: validate_role(name, definition)})

    def _swap(self, roles: dict[str, RoleDefinition]) -> None:
        mapped = _build(roles)
        self._roles, self._mapped = roles, mapped


def create(config: ConfigLike = None) -> Callable[[Mapping[str, Any]], RBAC]:
    """Curried factory: ``create(config)(roles)``."""
    rbac_config = _coerce_config(config)

    def factory(roles: Mapping[str, Any]) -> RBAC:
        return RBAC(roles, rbac_config)

    return factory


async def create_tenant_rbac(
    adapter: RoleAdapter, tenant_id: str, config: ConfigLike = None
) -> RBAC:
    """Build an RBAC instance from the roles an adapter stores for a tenant."""
    roles = await adapter.get_roles(tenant_id)
    return RBAC(roles, config)
