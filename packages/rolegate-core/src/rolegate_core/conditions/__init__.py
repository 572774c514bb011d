"""Condition normalization for conditional grants."""

from rolegate_core.conditions.normalize import (
    ALLOW,
    DENY,
    Always,
    AwaitableCondition,
    CallbackCondition,
    Condition,
    PredicateCondition,
    When,
    is_callback,
    normalize_when,
)

__all__ = [
    "ALLOW",
    "DENY",
    "Always",
    "AwaitableCondition",
    "CallbackCondition",
    "Condition",
    "PredicateCondition",
    "When",
    "is_callback",
    "normalize_when",
]
