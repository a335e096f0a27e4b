"""Rule Compiler - turns author-facing policy documents into RuleSets.

Policy documents are YAML files validated with pydantic. Any problem in
any rule fails the whole document; nothing is skipped.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import ValidationError

from launch_policy.common.exceptions import CompilationError
from launch_policy.core.types import FieldPath, Rule, RuleSet
from launch_policy.governance.policies.evaluator import ALLOWED_PLACEHOLDER, VIOLATING_PLACEHOLDER
from launch_policy.governance.policies.library import (
    credential_organization_rule,
    extra_vars_allow_list_rules,
)
from launch_policy.governance.schemas import PolicyDocument, RuleDeclaration


logger = logging.getLogger(__name__)

# Alternate placeholder spelling used in platform-facing messages
_PERCENT_PLACEHOLDERS = {
    "%violating%": VIOLATING_PLACEHOLDER,
    "%allowed%": ALLOWED_PLACEHOLDER,
}


def normalize_template(template: str) -> str:
    """Rewrite ``%violating%`` / ``%allowed%`` into the brace form."""
    for percent, brace in _PERCENT_PLACEHOLDERS.items():
        template = template.replace(percent, brace)
    return template


def compile_rule(declaration: Union[RuleDeclaration, Dict[str, Any]]) -> Rule:
    """Compile a single rule declaration.
    
    Raises:
        CompilationError: Unknown kind, malformed path or bad parameters
    """
    if not isinstance(declaration, RuleDeclaration):
        try:
            declaration = RuleDeclaration.model_validate(declaration)
        except ValidationError as e:
            raise CompilationError(
                f"Invalid rule declaration: {e}",
                details={"rule_id": declaration.get("id") if isinstance(declaration, dict) else None},
            ) from e
    
    try:
        if isinstance(declaration.path, str):
            field_path = FieldPath.parse(declaration.path)
        else:
            field_path = FieldPath(tuple(declaration.path))
        
        rule = Rule(
            rule_id=declaration.id,
            field_path=field_path,
            predicate_kind=declaration.kind,
            parameters=declaration.parameters,
            message_template=normalize_template(declaration.message),
        )
    except CompilationError as e:
        e.details.setdefault("rule_id", declaration.id)
        raise
    return rule


def compile_policy(document: Union[PolicyDocument, Dict[str, Any]]) -> RuleSet:
    """Compile a whole policy document into an ordered RuleSet.
    
    Shorthand sections come first (extra_vars allow-list, then the
    credential organization check), followed by explicit rules in
    declaration order.
    
    Raises:
        CompilationError: If any part of the document is invalid
    """
    if not isinstance(document, PolicyDocument):
        try:
            document = PolicyDocument.model_validate(document)
        except ValidationError as e:
            raise CompilationError(f"Invalid policy document: {e}") from e
    
    rules: List[Rule] = []
    rules.extend(extra_vars_allow_list_rules(document.extra_vars_allow_list))
    if document.require_credential_organization:
        rules.append(credential_organization_rule())
    rules.extend(compile_rule(declaration) for declaration in document.rules)
    
    rule_set = RuleSet(
        rules=tuple(rules),
        name=document.metadata.name,
        version=document.metadata.version,
    )
    logger.debug(
        f"Compiled policy {rule_set.name} v{rule_set.version}: {len(rule_set)} rules"
    )
    return rule_set


def load_policy_file(policy_file: Union[str, Path]) -> RuleSet:
    """Load and compile a YAML policy file.
    
    Raises:
        FileNotFoundError: If the file does not exist
        CompilationError: If the YAML or its content is invalid
    """
    policy_file = Path(policy_file)
    if not policy_file.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_file}")
    
    with open(policy_file, "r") as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise CompilationError(
                f"Policy file is not valid YAML: {e}",
                details={"policy_file": str(policy_file)},
            ) from e
    
    if not isinstance(raw_config, dict):
        raise CompilationError(
            "Policy file must contain a mapping at the top level",
            details={"policy_file": str(policy_file)},
        )
    return compile_policy(raw_config)
