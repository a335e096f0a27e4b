"""Shared fixtures for Launch Policy tests."""

import pytest

from launch_policy.common.config.settings import reset_config
from launch_policy.core.types import RuleSet
from launch_policy.governance.policies.library import (
    credential_organization_rule,
    extra_vars_allow_list_rules,
)


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test sees configuration built from its own environment."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def allow_list_rule_set():
    """extra_var_key restricted to two values."""
    return RuleSet(
        rules=tuple(extra_vars_allow_list_rules(
            {"extra_var_key": ["allowed_value1", "allowed_value2"]}
        )),
        name="extra-vars",
        version="1.0.0-test",
    )


@pytest.fixture
def credential_rule_set():
    """Credentials must belong to an organization."""
    return RuleSet(
        rules=(credential_organization_rule(),),
        name="credentials",
        version="1.0.0-test",
    )


@pytest.fixture
def combined_rule_set():
    """Both canonical constraints, allow-list first."""
    rules = extra_vars_allow_list_rules(
        {"extra_var_key": ["allowed_value1", "allowed_value2"]}
    )
    rules.append(credential_organization_rule())
    return RuleSet(rules=tuple(rules), name="combined", version="1.0.0-test")


@pytest.fixture
def policy_yaml_content():
    """Sample policy YAML for testing."""
    return """
metadata:
  name: "test-policy"
  version: "1.0.0-test"
  author: "Test Suite"
  description: "Test launch policy"

extra_vars_allow_list:
  extra_var_key:
    - "allowed_value1"
    - "allowed_value2"

require_credential_organization: true

rules:
  - id: "region.allow_list"
    kind: "valueAllowList"
    path: "extra_vars.regions[*]"
    parameters:
      allowed_values: ["us-east-1", "eu-west-1"]
      report: "value"
    message: "Regions not allowed: %violating%"
"""


@pytest.fixture
def policy_file(tmp_path, policy_yaml_content):
    """Write the sample policy to a temporary file."""
    path = tmp_path / "launch_policy.yaml"
    path.write_text(policy_yaml_content)
    return path
