"""Governance - launch policy compilation, evaluation and enforcement.

Components:
- resolve: selects values out of a launch context by field path
- evaluate: checks one rule against one context
- decide: aggregates every rule of a RuleSet into one Decision
- PolicyEngine: loads a policy file and enforces it for the platform
- Schemas: Decision, Violation, PolicyCheckResult, PolicyDocument

Design principles:
- Policies are checked BEFORE the job starts
- Evaluation is pure and deterministic
- Every rule runs; all violations are reported together
- A missing field is "no match", never an error
"""

from launch_policy.governance.resolver import ResolvedValue, resolve
from launch_policy.governance.policies.engine import PolicyEngine, decide
from launch_policy.governance.policies.evaluator import evaluate
from launch_policy.governance.policies.compiler import compile_policy, load_policy_file
from launch_policy.governance.schemas import (
    Decision,
    PolicyCheckResult,
    PolicyDocument,
    RuleDeclaration,
    Violation,
)

__all__ = [
    # Core components
    "PolicyEngine",
    "ResolvedValue",
    "compile_policy",
    "decide",
    "evaluate",
    "load_policy_file",
    "resolve",
    # Schemas
    "Decision",
    "PolicyCheckResult",
    "PolicyDocument",
    "RuleDeclaration",
    "Violation",
]
