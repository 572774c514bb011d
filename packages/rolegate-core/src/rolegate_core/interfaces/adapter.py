"""Role storage adapter interface."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RoleAdapter(Protocol):
    """Source of role definitions, optionally partitioned by tenant.

    ``tenant_id=None`` addresses the adapter's default tenant.
    """

    async def get_roles(self, tenant_id: str | None = None) -> Mapping[str, Any]: ...

    async def add_role(self, name: str, role: Any, tenant_id: str | None = None) -> None: ...

    async def update_roles(self, roles: Mapping[str, Any], tenant_id: str | None = None) -> None: ...
