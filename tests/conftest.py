"""Shared test fixtures for rolegate."""

from unittest.mock import MagicMock

import pytest

from rolegate_core.config.models import RolegateConfig
from rolegate_core.rbac import RBAC


def belongs_to_account(params, done):
    done(None, params is True)


async def async_belongs_to_account(params):
    return params is True


@pytest.fixture
def default_roles():
    return {
        "user": {"can": ["products:find"]},
        "supervisor": {
            "can": [{"name": "products:edit", "when": True}],
            "inherits": ["user"],
        },
        "admin": {
            "can": [{"name": "products:delete", "when": belongs_to_account}],
            "inherits": ["supervisor"],
        },
        "superadmin": {"can": ["products:find", "products:edit", "products:delete"]},
        "superhero": {"can": ["products:*"]},
        "asyncrole": {"can": [{"name": "products:async", "when": async_belongs_to_account}]},
    }


@pytest.fixture
def rbac(default_roles):
    return RBAC(default_roles, {"enable_logger": False})


@pytest.fixture
def permission_logger():
    return MagicMock()


@pytest.fixture
def sample_config():
    return RolegateConfig()


@pytest.fixture
def roles_yaml(tmp_path):
    """A roles file with inheritance, globs and a boolean condition."""
    path = tmp_path / "roles.yaml"
    path.write_text(
        "user:\n"
        "  can:\n"
        "    - products:find\n"
        "supervisor:\n"
        "  can:\n"
        "    - name: products:edit\n"
        "      when: true\n"
        "    - name: products:archive\n"
        "      when: false\n"
        "  inherits: [user]\n"
        "superhero:\n"
        "  can: ['products:*']\n"
    )
    return path
