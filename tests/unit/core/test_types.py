"""Tests for core types: FieldPath, LaunchContext, Rule, RuleSet."""

import pytest

from launch_policy.common.exceptions import CompilationError
from launch_policy.core.types import (
    WILDCARD,
    FieldPath,
    LaunchContext,
    PredicateKind,
    Rule,
    RuleSet,
)


class TestFieldPath:
    """Tests for field path parsing and rendering."""
    
    def test_parse_dotted_path(self):
        path = FieldPath.parse("extra_vars.extra_var_key")
        assert path.segments == ("extra_vars", "extra_var_key")
        assert not path.has_wildcard
    
    def test_parse_wildcard(self):
        path = FieldPath.parse("credentials[*].organization")
        assert path.segments == ("credentials", WILDCARD, "organization")
        assert path.has_wildcard
        assert path.last_key == "organization"
    
    def test_parse_nested_wildcards(self):
        path = FieldPath.parse("matrix[*][*]")
        assert path.segments == ("matrix", WILDCARD, WILDCARD)
        assert path.last_key == "matrix"
    
    def test_round_trip_text(self):
        assert str(FieldPath.parse("credentials[*].organization")) == "credentials[*].organization"
    
    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "extra_vars..key",
        ".extra_vars",
        "credentials[0].name",
        "credentials[*.name",
        "credentials]*[",
        "[*].name",
    ])
    def test_malformed_paths_rejected(self, text):
        with pytest.raises(CompilationError):
            FieldPath.parse(text)
    
    def test_empty_segment_rejected(self):
        with pytest.raises(CompilationError):
            FieldPath(("extra_vars", ""))
    
    def test_non_string_segment_rejected(self):
        with pytest.raises(CompilationError):
            FieldPath(("credentials", 0))
    
    def test_empty_path_rejected(self):
        with pytest.raises(CompilationError):
            FieldPath(())


class TestLaunchContext:
    """Tests for the immutable launch context."""
    
    def test_from_dict_is_read_only(self):
        context = LaunchContext.from_dict({"extra_vars": {"a": 1}, "credentials": [{"name": "x"}]})
        with pytest.raises(TypeError):
            context.payload["extra_vars"]["a"] = 2
        assert isinstance(context["credentials"], tuple)
    
    def test_source_mutation_does_not_leak(self):
        source = {"extra_vars": {"a": 1}}
        context = LaunchContext.from_dict(source)
        source["extra_vars"]["a"] = 2
        assert context["extra_vars"]["a"] == 1
    
    def test_to_dict_restores_plain_types(self):
        data = {"extra_vars": {"a": [1, 2]}, "credentials": [{"name": "x", "organization": None}]}
        assert LaunchContext.from_dict(data).to_dict() == data
    
    def test_mapping_behaviour(self):
        context = LaunchContext.from_dict({"extra_vars": {}})
        assert "extra_vars" in context
        assert len(context) == 1
        assert context == {"extra_vars": {}}
    
    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            LaunchContext.from_dict(["not", "a", "mapping"])


class TestRule:
    """Tests for Rule construction."""
    
    def test_coerces_path_and_kind(self):
        rule = Rule(
            rule_id="r1",
            field_path="credentials[*].organization",
            predicate_kind="fieldMustNotBeNull",
        )
        assert rule.field_path == FieldPath(("credentials", WILDCARD, "organization"))
        assert rule.predicate_kind == PredicateKind.FIELD_MUST_NOT_BE_NULL
    
    def test_parameters_are_frozen(self):
        rule = Rule(
            rule_id="r1",
            field_path="extra_vars.key",
            predicate_kind=PredicateKind.VALUE_ALLOW_LIST,
            parameters={"allowed_values": ["a", "b"]},
        )
        assert rule.parameters["allowed_values"] == ("a", "b")
        with pytest.raises(TypeError):
            rule.parameters["allowed_values"] = ["c"]
    
    def test_unknown_kind_rejected(self):
        with pytest.raises(CompilationError) as exc_info:
            Rule(rule_id="r1", field_path="extra_vars.key", predicate_kind="regexMatch")
        assert exc_info.value.details["rule_id"] == "r1"
    
    def test_empty_id_rejected(self):
        with pytest.raises(CompilationError):
            Rule(rule_id="", field_path="extra_vars.key", predicate_kind="valueAllowList")


class TestRuleSet:
    """Tests for RuleSet."""
    
    def test_preserves_order(self):
        rules = [
            Rule(rule_id=name, field_path="extra_vars.k", predicate_kind="fieldMustNotBeNull")
            for name in ("b", "a", "c")
        ]
        rule_set = RuleSet(rules=rules)
        assert [r.rule_id for r in rule_set] == ["b", "a", "c"]
        assert isinstance(rule_set.rules, tuple)
        assert len(rule_set) == 3
    
    def test_duplicate_ids_rejected(self):
        rule = Rule(rule_id="dup", field_path="extra_vars.k", predicate_kind="fieldMustNotBeNull")
        with pytest.raises(CompilationError):
            RuleSet(rules=(rule, rule))
