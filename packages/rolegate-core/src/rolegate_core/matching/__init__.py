"""Operation matching: regex/glob classification, compilation and scans."""

from rolegate_core.matching.operations import (
    Operation,
    OperationKind,
    OperationRequest,
    PatternPermission,
    classify_operation,
    compile_permission_pattern,
    find_pattern,
    glob_to_regex,
    has_matching_operation,
    is_glob,
    is_regex,
    regex_from_operation,
)

__all__ = [
    "Operation",
    "OperationKind",
    "OperationRequest",
    "PatternPermission",
    "classify_operation",
    "compile_permission_pattern",
    "find_pattern",
    "glob_to_regex",
    "has_matching_operation",
    "is_glob",
    "is_regex",
    "regex_from_operation",
]
