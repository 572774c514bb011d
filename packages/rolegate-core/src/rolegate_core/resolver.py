"""Permission resolution over a mapped role snapshot.

Resolution order for an exact operation on a role:

1. direct grant -> allowed
2. first role pattern (glob or regex literal) matching the operation -> its condition
3. conditional grant for the operation -> its condition
4. inherited roles, checked concurrently and OR-ed together

A condition that evaluates False falls through to step 4. Regex and glob
operation requests skip all of this: they only scan the queried role's own
permission names.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

from rolegate_core.errors import RoleValidationError, UnknownRoleError
from rolegate_core.loggers import PermissionLogger
from rolegate_core.matching import (
    Operation,
    OperationKind,
    OperationRequest,
    classify_operation,
    find_pattern,
    has_matching_operation,
)
from rolegate_core.roles import MappedRole, MappedRoles

logger = logging.getLogger(__name__)


def validate_request(role: object, operation: object) -> None:
    if not isinstance(role, str):
        raise RoleValidationError(
            "Expected first parameter to be a string : role", field="role"
        )
    if not isinstance(operation, str) and not (
        isinstance(operation, re.Pattern) and isinstance(operation.pattern, str)
    ):
        raise RoleValidationError(
            "Expected second parameter to be a string or regex : operation",
            field="operation",
        )


class PermissionResolver:
    """Answers ``can`` queries against one immutable role map."""

    def __init__(self, roles: MappedRoles, logger: PermissionLogger | None = None) -> None:
        self._roles = roles
        self._logger = logger

    async def can(self, role: str, operation: Operation, params: Any = None) -> bool:
        """Resolve whether ``role`` may perform ``operation``.

        Raises RoleValidationError for bad argument types and UnknownRoleError
        for a role missing from the map. Every other outcome is a boolean.
        """
        validate_request(role, operation)
        request = classify_operation(operation)
        result = await self._resolve(role, request, params, (role,))
        if self._logger is not None:
            self._logger(role, operation, result)
        return result

    def _lookup(self, role: str) -> MappedRole:
        mapped = self._roles.get(role)
        if mapped is None:
            raise UnknownRoleError(role)
        return mapped

    async def _resolve(
        self,
        role: str,
        request: OperationRequest,
        params: Any,
        path: tuple[str, ...],
    ) -> bool:
        mapped = self._lookup(role)

        if request.kind is not OperationKind.exact:
            return has_matching_operation(request.regex, mapped.names)

        if request.name in mapped.direct:
            return True

        pattern = find_pattern(mapped.patterns, request.name)
        when = pattern.when if pattern is not None else mapped.conditional.get(request.name)
        if when is not None and await when.evaluate(params):
            return True

        return await self._resolve_inherited(mapped, request, params, path)

    async def _resolve_inherited(
        self,
        mapped: MappedRole,
        request: OperationRequest,
        params: Any,
        path: tuple[str, ...],
    ) -> bool:
        parents = []
        for parent in mapped.inherits:
            if parent in path:
                logger.debug("Inheritance cycle %s -> %s skipped", " -> ".join(path), parent)
            else:
                parents.append(parent)
        if not parents:
            return False

        results = await asyncio.gather(
            *(self._resolve(parent, request, params, (*path, parent)) for parent in parents),
            return_exceptions=True,
        )
        for parent, result in zip(parents, results):
            if isinstance(result, Exception):
                logger.debug("Inherited role %r of %r failed: %s", parent, mapped.name, result)
        return any(result is True for result in results)
