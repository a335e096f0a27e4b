"""Core types."""

from launch_policy.core.types import (
    WILDCARD,
    FieldPath,
    LaunchContext,
    PredicateKind,
    Rule,
    RuleSet,
    freeze,
    is_scalar,
    thaw,
)

__all__ = [
    "WILDCARD",
    "FieldPath",
    "LaunchContext",
    "PredicateKind",
    "Rule",
    "RuleSet",
    "freeze",
    "is_scalar",
    "thaw",
]
