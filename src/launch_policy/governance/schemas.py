"""Governance schemas - type definitions for policy documents and decisions.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Union
from uuid import uuid4

from pydantic import BaseModel, Field, model_validator

from launch_policy.core.types import PredicateKind


class Violation(BaseModel):
    """A single rule failure with its rendered message.

    Produced transiently during one evaluation; never persisted.
    """
    rule_id: str = Field(
        ...,
        description="Id of the rule that failed"
    )
    predicate_kind: PredicateKind = Field(
        ...,
        description="Kind of the failed rule"
    )
    message: str = Field(
        ...,
        description="Human-readable violation message"
    )
    violating: List[Any] = Field(
        default_factory=list,
        description="Deduplicated violating identifiers, first-occurrence order"
    )

    model_config = {"frozen": True}


class Decision(BaseModel):
    """Aggregate allow/deny outcome for one launch context.

    ``allowed`` is True exactly when ``violations`` is empty; a Decision
    breaking that invariant cannot be constructed.
    """
    allowed: bool = Field(
        default=True,
        description="Whether the launch may proceed"
    )
    violations: List[str] = Field(
        default_factory=list,
        description="Violation messages in rule-declaration order"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "allowed": False,
                "violations": [
                    "Credential used in job execution does not belong to any org. "
                    "Violating credentials: [Demo Credential]"
                ],
            }
        }
    }

    @model_validator(mode="after")
    def check_allowed_matches_violations(self) -> "Decision":
        if self.allowed != (len(self.violations) == 0):
            raise ValueError("allowed must be True exactly when there are no violations")
        return self

    @classmethod
    def from_violations(cls, violations: List[str]) -> "Decision":
        violations = list(violations)
        return cls(allowed=not violations, violations=violations)

    def to_output(self) -> Dict[str, Any]:
        """Output shape handed back to the platform."""
        return {"allowed": self.allowed, "violations": list(self.violations)}


class PolicyCheckResult(BaseModel):
    """Result of a policy evaluation with audit-friendly context.

    This is what PolicyEngine.evaluate returns. The pure Decision is
    available as ``decision``; the other fields vary per call.
    """
    check_id: str = Field(
        default_factory=lambda: f"chk_{uuid4().hex[:12]}",
        description="Unique check identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the check was performed"
    )
    decision: Decision = Field(
        ...,
        description="Allow/deny decision"
    )
    policy_name: str = Field(
        ...,
        description="Name of the rule set used"
    )
    policy_version: str = Field(
        ...,
        description="Version of the rule set used"
    )
    violations: List[Violation] = Field(
        default_factory=list,
        description="Structured violations, in rule-declaration order"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context for the check"
    )

    @property
    def is_allowed(self) -> bool:
        """Check if the launch was allowed."""
        return self.decision.allowed

    @property
    def is_denied(self) -> bool:
        """Check if the launch was denied."""
        return not self.decision.allowed


class RuleDeclaration(BaseModel):
    """One author-facing rule, before compilation."""
    id: str = Field(..., min_length=1, description="Unique rule id")
    kind: str = Field(..., description="Predicate kind, e.g. valueAllowList")
    path: Union[str, List[str]] = Field(
        ...,
        description="Field path, dotted text or explicit segment list"
    )
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Predicate-specific parameters"
    )
    message: str = Field(..., min_length=1, description="Message template")

    model_config = {"extra": "forbid"}


class PolicyDocument(BaseModel):
    """Parsed policy document, the in-memory form of launch_policy.yaml.

    Shorthand sections expand into canonical rules ahead of the
    explicit ``rules`` list.
    """

    class Metadata(BaseModel):
        name: str
        version: str
        description: str = ""
        author: str = ""

    metadata: Metadata
    extra_vars_allow_list: Dict[str, List[Any]] = Field(
        default_factory=dict,
        description="Allowed values per extra_vars key"
    )
    require_credential_organization: bool = Field(
        default=False,
        description="Deny credentials that do not belong to an organization"
    )
    rules: List[RuleDeclaration] = Field(default_factory=list)

    model_config = {"extra": "forbid"}
