"""YAML config and roles loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from rolegate_core.errors import ConfigError, RoleValidationError
from rolegate_core.roles import RoleDefinition, validate_roles

from .models import RolegateConfig


def load_config(cli_path: str | None = None) -> RolegateConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./rolegate.yaml"),
        Path.home() / ".rolegate" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            raw = _read_yaml(path)
            if raw is None:
                continue
            try:
                return RolegateConfig(**_expand_env_vars(raw))
            except (ValidationError, TypeError) as e:
                raise ConfigError(f"Invalid config in {path}: {e}") from e

    return RolegateConfig()


def load_roles(path: str | Path) -> dict[str, RoleDefinition]:
    """Load and validate a YAML roles file: ``{role: {can: [...], inherits: [...]}}``."""
    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Roles file not found: {path}")
    raw = _read_yaml(path)
    if raw is None:
        return {}
    try:
        return validate_roles(_expand_env_vars(raw))
    except RoleValidationError as e:
        raise ConfigError(f"Invalid roles in {path}: {e}") from e


def _read_yaml(path: Path) -> object:
    try:
        with open(path) as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `rolegate config init`
DEFAULT_CONFIG_TEMPLATE = """\
# rolegate.yaml

# Role definitions file (YAML mapping of role -> {can, inherits})
roles_file: "roles.yaml"

# Permission check logging
rbac:
  enable_logger: true
  console: false               # render checks with rich instead of the logging module

# Logging
log_level: "info"              # debug | info | warn | error
"""
