"""Canonical rules composed by the platform.

Two constraints the platform ships out of the box:
- extra_vars keys restricted to an allow-list of values
- credentials used by a job must belong to an organization
"""

from typing import Any, Dict, List, Sequence

from launch_policy.common.exceptions import CompilationError
from launch_policy.core.types import FieldPath, PredicateKind, Rule, WILDCARD


EXTRA_VARS_MESSAGE = (
    "extra_vars contain disallowed values for keys: {violating}. "
    "Allowed values: {allowed}"
)
CREDENTIAL_ORGANIZATION_MESSAGE = (
    "Credential used in job execution does not belong to any org. "
    "Violating credentials: [{violating}]"
)


def extra_vars_allow_list_rule(key: str, allowed_values: Sequence[Any]) -> Rule:
    """Restrict ``extra_vars.<key>`` to the given values."""
    if key == WILDCARD:
        raise CompilationError(
            f"extra_vars key '{WILDCARD}' would be read as a wildcard",
            details={"rule_id": f"extra_vars.{key}.allow_list"},
        )
    return Rule(
        rule_id=f"extra_vars.{key}.allow_list",
        field_path=FieldPath(("extra_vars", key)),
        predicate_kind=PredicateKind.VALUE_ALLOW_LIST,
        parameters={"allowed_values": allowed_values, "report": "key"},
        message_template=EXTRA_VARS_MESSAGE,
    )


def extra_vars_allow_list_rules(allow_list: Dict[str, Sequence[Any]]) -> List[Rule]:
    """One allow-list rule per configured key, in mapping order."""
    return [extra_vars_allow_list_rule(key, values) for key, values in allow_list.items()]


def credential_organization_rule() -> Rule:
    """Every credential referenced by the launch must have an organization."""
    return Rule(
        rule_id="credentials.organization.not_null",
        field_path=FieldPath(("credentials", WILDCARD, "organization")),
        predicate_kind=PredicateKind.FIELD_MUST_NOT_BE_NULL,
        parameters={"identifier_field": "name"},
        message_template=CREDENTIAL_ORGANIZATION_MESSAGE,
    )
