"""Tests for RBAC — construction, role updates, snapshots and tenant factories."""

from __future__ import annotations

import asyncio
import logging

import pytest

from rolegate_core import (
    RBAC,
    ConfigError,
    InMemoryRoleAdapter,
    RBACConfig,
    RoleDefinition,
    RoleValidationError,
    create,
    create_tenant_rbac,
    default_logger,
)


# -- Construction -------------------------------------------------------------


def test_roles_view_is_read_only(rbac):
    assert isinstance(rbac.roles["user"], RoleDefinition)
    with pytest.raises(TypeError):
        rbac.roles["new"] = RoleDefinition()


def test_role_names(rbac, default_roles):
    assert rbac.role_names == tuple(default_roles)


@pytest.mark.parametrize("roles", [None, ["user"], "user"])
def test_roles_must_be_mapping(roles):
    with pytest.raises(RoleValidationError):
        RBAC(roles)


def test_invalid_config_mapping():
    with pytest.raises(ConfigError):
        RBAC({}, {"enable_logger": "not-a-bool"})


def test_logger_defaults():
    assert RBAC({}).logger is default_logger
    assert RBAC({}, {"enable_logger": False}).logger is None


def test_custom_logger(permission_logger):
    rbac = RBAC({}, RBACConfig(logger=permission_logger))
    assert rbac.logger is permission_logger


@pytest.mark.parametrize("config", [{"enableLogger": False}, {"enable_logger": False, "log": print}])
def test_unknown_config_keys_rejected(config):
    with pytest.raises(ConfigError):
        RBAC({}, config)
    with pytest.raises(ConfigError):
        create(config)


def test_disabled_logger_wins_over_custom(permission_logger):
    rbac = RBAC({}, {"enable_logger": False, "logger": permission_logger})
    assert rbac.logger is None


@pytest.mark.asyncio
async def test_custom_logger_called_per_check(default_roles, permission_logger):
    rbac = RBAC(default_roles, {"logger": permission_logger})
    await rbac.can("user", "products:find")
    await rbac.can("user", "products:edit")
    assert permission_logger.call_count == 2
    permission_logger.assert_called_with("user", "products:edit", False)


@pytest.mark.asyncio
async def test_disabled_logger_not_called(default_roles, permission_logger):
    rbac = RBAC(default_roles, {"enable_logger": False, "logger": permission_logger})
    await rbac.can("user", "products:find")
    permission_logger.assert_not_called()


@pytest.mark.asyncio
async def test_default_logger_writes_audit_record(default_roles, caplog):
    rbac = RBAC(default_roles)
    with caplog.at_level(logging.INFO, logger="rolegate_core.audit"):
        await rbac.can("user", "products:find")
    assert "ROLE: [user] OPERATION: [products:find] PERMISSION: [True]" in caplog.text


# -- Updates ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_add_role(rbac):
    rbac.add_role("editor", {"can": ["posts:edit"], "inherits": ["user"]})
    assert await rbac.can("editor", "posts:edit") is True
    assert await rbac.can("editor", "products:find") is True


@pytest.mark.asyncio
async def test_add_role_replaces_existing(rbac):
    rbac.add_role("user", {"can": ["posts:read"]})
    assert await rbac.can("user", "posts:read") is True
    assert await rbac.can("user", "products:find") is False


@pytest.mark.asyncio
async def test_update_roles_merges(rbac):
    rbac.update_roles({"guest": {"can": ["products:view"]}})
    assert await rbac.can("guest", "products:view") is True
    assert await rbac.can("user", "products:find") is True


@pytest.mark.asyncio
async def test_update_roles_replaces_named_roles(rbac):
    rbac.update_roles({"supervisor": {"can": ["reports:read"]}})
    assert await rbac.can("supervisor", "reports:read") is True
    # no longer inherits user
    assert await rbac.can("supervisor", "products:find") is False


@pytest.mark.asyncio
async def test_update_roles_is_idempotent(rbac, default_roles):
    rbac.update_roles(default_roles)
    rbac.update_roles(default_roles)
    assert rbac.role_names == tuple(default_roles)
    assert await rbac.can("admin", "products:find") is True


def test_failed_update_keeps_previous_state(rbac):
    before = rbac.roles["user"]
    with pytest.raises(RoleValidationError):
        rbac.update_roles({"user": {"can": []}, "broken": {"can": "not-a-list"}})
    assert "broken" not in rbac.role_names
    assert rbac.roles["user"] is before


def test_failed_add_role_keeps_previous_state(rbac, default_roles):
    with pytest.raises(RoleValidationError):
        rbac.add_role("broken", {"can": [{"when": True}]})
    assert rbac.role_names == tuple(default_roles)


@pytest.mark.asyncio
async def test_in_flight_check_keeps_snapshot():
    release = asyncio.Event()
    entered = asyncio.Event()

    async def slow_owner(params):
        entered.set()
        await release.wait()
        return True

    rbac = RBAC({"owner": {"can": [{"name": "doc:edit", "when": slow_owner}]}}, {"enable_logger": False})
    pending = asyncio.ensure_future(rbac.can("owner", "doc:edit"))
    await asyncio.wait_for(entered.wait(), timeout=1)

    rbac.update_roles({"owner": {"can": []}})
    release.set()

    assert await asyncio.wait_for(pending, timeout=1) is True
    assert await rbac.can("owner", "doc:edit") is False


@pytest.mark.asyncio
async def test_awaitable_condition_survives_rebuild():
    async def resolved():
        return True

    rbac = RBAC({"r": {"can": [{"name": "op", "when": resolved()}]}}, {"enable_logger": False})
    assert await rbac.can("r", "op") is True
    rbac.add_role("other", {"can": []})
    assert await rbac.can("r", "op") is True


# -- Factories ----------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_is_curried(default_roles, permission_logger):
    factory = create({"logger": permission_logger})
    rbac = factory(default_roles)
    assert isinstance(rbac, RBAC)
    assert await rbac.can("supervisor", "products:find") is True
    permission_logger.assert_called_once_with("supervisor", "products:find", True)


def test_create_rejects_bad_config():
    with pytest.raises(ConfigError):
        create({"enable_logger": []})


@pytest.mark.asyncio
async def test_create_tenant_rbac():
    adapter = InMemoryRoleAdapter()
    await adapter.update_roles({"user": {"can": ["a"]}}, tenant_id="acme")
    await adapter.update_roles({"user": {"can": ["b"]}}, tenant_id="globex")

    acme = await create_tenant_rbac(adapter, "acme", {"enable_logger": False})
    globex = await create_tenant_rbac(adapter, "globex", {"enable_logger": False})

    assert await acme.can("user", "a") is True
    assert await acme.can("user", "b") is False
    assert await globex.can("user", "b") is True


@pytest.mark.asyncio
async def test_create_tenant_rbac_is_a_snapshot():
    adapter = InMemoryRoleAdapter({"user": {"can": ["a"]}})
    rbac = await create_tenant_rbac(adapter, "default", {"enable_logger": False})
    await adapter.add_role("admin", {"can": ["b"]}, tenant_id="default")
    assert "admin" not in rbac.role_names


@pytest.mark.asyncio
async def test_cancelled_awaitable_condition_denies():
    future = asyncio.get_running_loop().create_future()
    rbac = RBAC(
        {
            "parent": {"can": []},
            "r": {"can": [{"name": "op", "when": future}], "inherits": ["parent"]},
        },
        {"enable_logger": False},
    )
    future.cancel()
    assert await rbac.can("r", "op") is False
