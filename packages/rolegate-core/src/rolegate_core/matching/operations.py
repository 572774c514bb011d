"""Operation classification and glob/regex matching.

An operation request is one of:

- a compiled ``re.Pattern`` or a ``/pattern/flags`` string (regex request),
- a string containing ``*`` (glob request),
- any other string (exact request).

Regex and glob requests are existential scans over a role's permission names.
Exact requests are looked up against the role's grants, and may match the
role's own pattern permissions (glob or regex-literal names).
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rolegate_core.conditions import Condition

Operation = str | re.Pattern[str]

# JavaScript-style flags accepted in "/pattern/flags" literals. Only i, m and s
# change matching in Python; the rest are accepted and ignored.
_JS_FLAGS = frozenset("dgimsuvy")
_FLAG_MAP = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}

_GLOB_TOKEN_RE = re.compile(r"\*\*/|\*\*|\*")
_GLOB_PATTERNS = {
    "*": "([^/]+)",
    "**": "(.+/)?([^/]+)",
    "**/": "(.+/)?",
}
_TRAILING_GLOBSTAR = "(.+)"


class OperationKind(str, Enum):
    """How an operation request is matched against a role."""

    regex = "regex"
    glob = "glob"
    exact = "exact"


@dataclass(frozen=True)
class OperationRequest:
    """A classified operation. ``regex`` is set for regex and glob requests."""

    kind: OperationKind
    name: str
    regex: re.Pattern[str] | None = None


@dataclass(frozen=True)
class PatternPermission:
    """A role permission whose name is a glob or a regex literal."""

    name: str
    regex: re.Pattern[str]
    when: Condition


def is_glob(value: object) -> bool:
    return isinstance(value, str) and "*" in value


def is_regex(value: object) -> bool:
    return isinstance(value, re.Pattern)


def regex_from_operation(value: Operation) -> re.Pattern[str] | None:
    """Return the regex an operation denotes, or None for non-regex strings."""
    if isinstance(value, re.Pattern):
        return value
    if not isinstance(value, str):
        return None
    return _parse_regex_literal(value)


@lru_cache(maxsize=1024)
def _parse_regex_literal(value: str) -> re.Pattern[str] | None:
    if not value.startswith("/"):
        return None
    last_slash = value.rfind("/")
    if last_slash <= 0:
        return None

    pattern = value[1:last_slash]
    flags = value[last_slash + 1 :]
    if not set(flags) <= _JS_FLAGS or len(set(flags)) != len(flags):
        return None

    re_flags = 0
    for flag in flags:
        re_flags |= _FLAG_MAP.get(flag, 0)
    try:
        return re.compile(pattern, re_flags)
    except re.error:
        return None


def _translate_glob(glob: str) -> str:
    parts: list[str] = []
    pos = 0
    for match in _GLOB_TOKEN_RE.finditer(glob):
        parts.append(re.escape(glob[pos : match.start()]))
        token = match.group()
        if token == "**" and match.end() == len(glob):
            parts.append(_TRAILING_GLOBSTAR)
        else:
            parts.append(_GLOB_PATTERNS[token])
        pos = match.end()
    parts.append(re.escape(glob[pos:]))
    return "".join(parts)


@lru_cache(maxsize=1024)
def _compile_glob(globs: tuple[str, ...], joined: bool) -> re.Pattern[str]:
    if joined:
        body = "((" + ")|(".join(_translate_glob(g) for g in globs) + "))"
    else:
        body = _translate_glob(globs[0])
    # \Z, not $: "$" also matches before a trailing newline
    return re.compile(rf"^{body}\Z")


def glob_to_regex(glob: str | Sequence[str]) -> re.Pattern[str]:
    """Compile a glob (or a list of alternative globs) to an anchored regex.

    ``*`` matches one path segment, ``**/`` any number of leading segments and
    a trailing ``**`` anything at all. Every other character is literal. The result
    is anchored at both ends, so ``search`` on it is a full match.
    """
    if isinstance(glob, str):
        return _compile_glob((glob,), False)
    return _compile_glob(tuple(glob), True)


def compile_permission_pattern(name: str) -> re.Pattern[str] | None:
    """Regex for a role-declared permission name, or None if the name is literal."""
    regex = _parse_regex_literal(name)
    if regex is not None:
        return regex
    if is_glob(name):
        return glob_to_regex(name)
    return None


def classify_operation(operation: Operation) -> OperationRequest:
    """Classify an operation request: regex first, then glob, then exact."""
    regex = regex_from_operation(operation)
    if regex is not None:
        name = operation if isinstance(operation, str) else operation.pattern
        return OperationRequest(OperationKind.regex, name, regex)
    if is_glob(operation):
        return OperationRequest(OperationKind.glob, operation, glob_to_regex(operation))
    return OperationRequest(OperationKind.exact, operation)


def has_matching_operation(regex: re.Pattern[str], names: Iterable[str]) -> bool:
    """True when the regex matches any of the permission names."""
    return any(regex.search(name) for name in names)


def find_pattern(
    patterns: Iterable[PatternPermission], operation: str
) -> PatternPermission | None:
    """First pattern permission, in declaration order, matching the operation."""
    for pattern in patterns:
        if pattern.regex.search(operation):
            return pattern
    return None
