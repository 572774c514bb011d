"""Bundled role adapters."""

from rolegate_core.adapters.memory import InMemoryRoleAdapter

__all__ = ["InMemoryRoleAdapter"]
