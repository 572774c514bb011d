"""In-memory role adapter keyed by tenant."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

DEFAULT_TENANT = "default"


class InMemoryRoleAdapter:
    """Keeps role definitions in a dict per tenant. Useful for tests and single-process apps."""

    def __init__(self, roles: Mapping[str, Any] | None = None) -> None:
        self._tenants: dict[str, dict[str, Any]] = {}
        if roles:
            self._tenants[DEFAULT_TENANT] = dict(roles)

    def _tenant(self, tenant_id: str | None) -> dict[str, Any]:
        return self._tenants.setdefault(tenant_id or DEFAULT_TENANT, {})

    async def get_roles(self, tenant_id: str | None = None) -> dict[str, Any]:
        return dict(self._tenants.get(tenant_id or DEFAULT_TENANT, {}))

    async def add_role(self, name: str, role: Any, tenant_id: str | None = None) -> None:
        self._tenant(tenant_id)[name] = role

    async def update_roles(self, roles: Mapping[str, Any], tenant_id: str | None = None) -> None:
        self._tenant(tenant_id).update(roles)

    def tenants(self) -> list[str]:
        return sorted(self._tenants)
