from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RBACConfig(BaseModel):
    """Runtime options for an RBAC instance."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enable_logger: bool = True
    logger: Callable[..., None] | None = None


class RBACSettings(BaseModel):
    enable_logger: bool = True
    console: bool = False


class RolegateConfig(BaseModel):
    roles_file: str = "roles.yaml"
    rbac: RBACSettings = Field(default_factory=RBACSettings)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
