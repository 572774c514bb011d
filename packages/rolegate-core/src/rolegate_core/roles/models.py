"""Declarative role schema.

Raw role definitions are validated into these models before a role map is
built. ``when`` values are normalized into :class:`Condition` objects during
validation, so an awaitable condition is wrapped exactly once and stays
shared across later role-map rebuilds.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from rolegate_core.conditions import ALLOW, Condition, normalize_when

NormalizedWhen = Annotated[Condition, BeforeValidator(normalize_when)]


class Permission(BaseModel):
    """A named grant gated by a ``when`` condition."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    when: NormalizedWhen = ALLOW


class RoleDefinition(BaseModel):
    """A role: ordered grants plus the names of the roles it inherits from."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    can: list[str | Permission] = Field(default_factory=list)
    inherits: list[str] | None = None

    @field_validator("can", mode="before")
    @classmethod
    def default_can(cls, v: Any) -> Any:
        return [] if v is None else v


Roles = dict[str, RoleDefinition]
