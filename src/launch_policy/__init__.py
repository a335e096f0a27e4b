"""Launch Policy - governance checks for automation job launches."""

__version__ = "0.1.0"
__author__ = "Launch Policy Team"

# Core exports
from launch_policy.core.types import FieldPath, LaunchContext, PredicateKind, Rule, RuleSet
from launch_policy.governance.policies.engine import PolicyEngine, decide
from launch_policy.governance.schemas import Decision, Violation

__all__ = [
    "Decision",
    "FieldPath",
    "LaunchContext",
    "PolicyEngine",
    "PredicateKind",
    "Rule",
    "RuleSet",
    "Violation",
    "decide",
]
