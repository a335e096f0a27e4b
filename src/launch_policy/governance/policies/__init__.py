"""Policies module - rule compilation, evaluation and decisions.

Provides deterministic policy evaluation with no side effects.
"""

from launch_policy.governance.policies.compiler import (
    compile_policy,
    compile_rule,
    load_policy_file,
)
from launch_policy.governance.policies.engine import (
    PolicyEngine,
    collect_violations,
    decide,
)
from launch_policy.governance.policies.evaluator import (
    evaluate,
    register_predicate,
    validate_rule,
)
from launch_policy.governance.policies.library import (
    credential_organization_rule,
    extra_vars_allow_list_rule,
    extra_vars_allow_list_rules,
)

__all__ = [
    "PolicyEngine",
    "collect_violations",
    "compile_policy",
    "compile_rule",
    "credential_organization_rule",
    "decide",
    "evaluate",
    "extra_vars_allow_list_rule",
    "extra_vars_allow_list_rules",
    "load_policy_file",
    "register_predicate",
    "validate_rule",
]
