"""Interfaces for collaborators that supply roles to rolegate."""

from rolegate_core.interfaces.adapter import RoleAdapter

__all__ = ["RoleAdapter"]
