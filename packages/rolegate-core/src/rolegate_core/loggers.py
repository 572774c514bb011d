"""Permission loggers: called with ``(role, operation, result)`` after a check."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from rich.console import Console
from rich.text import Text

from rolegate_core.matching import Operation

PermissionLogger = Callable[[str, Operation, bool], None]

audit_logger = logging.getLogger("rolegate_core.audit")


def format_operation(operation: Operation) -> str:
    if isinstance(operation, re.Pattern):
        return f"/{operation.pattern}/"
    return operation


def default_logger(role: str, operation: Operation, result: bool) -> None:
    """Write one INFO record per permission check."""
    audit_logger.info(
        "ROLE: [%s] OPERATION: [%s] PERMISSION: [%s]",
        role,
        format_operation(operation),
        result,
    )


class ConsoleLogger:
    """Render permission checks to a rich console, framed by rules."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def __call__(self, role: str, operation: Operation, result: bool) -> None:
        line = Text.assemble(
            ("RBAC", "bold white"),
            " ROLE: [",
            (role, "bold yellow"),
            "] OPERATION: [",
            (format_operation(operation), "bold yellow"),
            "] PERMISSION: [",
            (str(result), "bold green" if result else "bold red"),
            "]",
        )
        self.console.rule(style="yellow")
        self.console.print(line)
        self.console.rule(style="yellow")
