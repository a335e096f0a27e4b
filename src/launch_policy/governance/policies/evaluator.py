"""Constraint Evaluator - checks one rule against one launch context.

Each predicate kind has exactly one handler in the registry. Adding a
kind means registering a new handler; existing handlers are never
special-cased. Evaluation is a pure function of (rule, context).
"""

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, List, Optional, Type

from launch_policy.common.exceptions import CompilationError
from launch_policy.core.types import PredicateKind, Rule, is_scalar, thaw
from launch_policy.governance.resolver import ResolvedValue, resolve
from launch_policy.governance.schemas import Violation


logger = logging.getLogger(__name__)

VIOLATING_PLACEHOLDER = "{violating}"
ALLOWED_PLACEHOLDER = "{allowed}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def scalars_equal(left: Any, right: Any) -> bool:
    """Exact scalar equality with no coercion between scalar types.

    Numbers compare by value whatever their notation (``8080`` equals
    ``8080.0``). Strings, booleans and null only equal the same type:
    ``True`` does not equal ``1`` and ``"1"`` does not equal ``1``.
    """
    if _is_number(left) and _is_number(right):
        return left == right
    return type(left) is type(right) and left == right


def dedupe(items: List[Any]) -> List[Any]:
    """Drop repeated entries, keeping first-occurrence order."""
    unique: List[Any] = []
    for item in items:
        if not any(scalars_equal(item, seen) for seen in unique):
            unique.append(item)
    return unique


def render_message(template: str, violating: str, allowed: str) -> str:
    """Substitute placeholders by plain text replacement.

    Templates may contain other braces (e.g. JSON), so str.format is
    not usable here.
    """
    return template.replace(VIOLATING_PLACEHOLDER, violating).replace(ALLOWED_PLACEHOLDER, allowed)


def _to_json(value: Any) -> str:
    return json.dumps(thaw(value), ensure_ascii=False, default=str)


class PredicateHandler(ABC):
    """Evaluation logic for one predicate kind."""

    kind: PredicateKind

    @abstractmethod
    def validate(self, rule: Rule) -> None:
        """Check the rule's parameters.

        Raises:
            CompilationError: If a required parameter is missing or invalid
        """

    @abstractmethod
    def find_violating(self, rule: Rule, matches: List[ResolvedValue]) -> List[Any]:
        """Return violating identifiers in discovery order (may repeat)."""

    @abstractmethod
    def render_violating(self, rule: Rule, violating: List[Any]) -> str:
        pass

    def render_allowed(self, rule: Rule) -> str:
        return ""


_HANDLERS: Dict[PredicateKind, PredicateHandler] = {}


def register_predicate(kind: PredicateKind) -> Callable[[Type[PredicateHandler]], Type[PredicateHandler]]:
    """Class decorator registering a handler for a predicate kind."""
    def decorator(handler_cls: Type[PredicateHandler]) -> Type[PredicateHandler]:
        if kind in _HANDLERS:
            raise ValueError(f"Predicate kind '{kind.value}' already has a handler")
        handler_cls.kind = kind
        _HANDLERS[kind] = handler_cls()
        return handler_cls
    return decorator


def get_handler(kind: PredicateKind) -> PredicateHandler:
    try:
        return _HANDLERS[PredicateKind(kind)]
    except (KeyError, ValueError):
        raise CompilationError(f"No handler for predicate kind '{kind}'") from None


def _rule_error(rule: Rule, message: str) -> CompilationError:
    return CompilationError(
        f"Rule '{rule.rule_id}': {message}",
        details={"rule_id": rule.rule_id, "predicate_kind": rule.predicate_kind.value},
    )


@register_predicate(PredicateKind.VALUE_ALLOW_LIST)
class ValueAllowListHandler(PredicateHandler):
    """Every resolved value must be one of ``allowed_values``.

    Parameters:
        allowed_values: ordered sequence of scalars (required)
        report: "key" reports the variable name holding a bad value,
            "value" reports the bad value itself. Defaults to "key".
    """

    REPORT_MODES = ("key", "value")

    def validate(self, rule: Rule) -> None:
        params = rule.parameters
        if "allowed_values" not in params:
            raise _rule_error(rule, "missing required parameter 'allowed_values'")
        allowed = params["allowed_values"]
        if isinstance(allowed, (str, bytes)) or not isinstance(allowed, Sequence):
            raise _rule_error(rule, "'allowed_values' must be a list of scalars")
        for value in allowed:
            if not is_scalar(value):
                raise _rule_error(rule, f"'allowed_values' contains a non-scalar value {value!r}")
        if params.get("report", "key") not in self.REPORT_MODES:
            raise _rule_error(rule, f"'report' must be one of {list(self.REPORT_MODES)}")

    def find_violating(self, rule: Rule, matches: List[ResolvedValue]) -> List[Any]:
        allowed = rule.parameters["allowed_values"]
        report = rule.parameters.get("report", "key")
        violating = []
        for match in matches:
            if is_scalar(match.value) and any(scalars_equal(match.value, a) for a in allowed):
                continue
            if report == "key":
                violating.append(match.owner_key)
            else:
                violating.append(thaw(match.value))
        return violating

    def render_violating(self, rule: Rule, violating: List[Any]) -> str:
        return _to_json(violating)

    def render_allowed(self, rule: Rule) -> str:
        return _to_json({rule.field_path.last_key: rule.parameters["allowed_values"]})


@register_predicate(PredicateKind.FIELD_MUST_NOT_BE_NULL)
class FieldMustNotBeNullHandler(PredicateHandler):
    """Resolved values must not be null.

    Parameters:
        identifier_field: sibling key naming the offending element
            (e.g. a credential's ``name``). Without it, or when the
            sibling is missing, the concrete path is reported.
    """

    def validate(self, rule: Rule) -> None:
        identifier = rule.parameters.get("identifier_field")
        if identifier is not None and (not isinstance(identifier, str) or not identifier):
            raise _rule_error(rule, "'identifier_field' must be a non-empty string")

    def find_violating(self, rule: Rule, matches: List[ResolvedValue]) -> List[Any]:
        identifier_field = rule.parameters.get("identifier_field")
        violating = []
        for match in matches:
            if match.value is not None:
                continue
            identifier = match.sibling(identifier_field) if identifier_field else None
            if identifier is None or isinstance(identifier, (Mapping, tuple, list)):
                identifier = match.path_text()
            violating.append(identifier)
        return violating

    def render_violating(self, rule: Rule, violating: List[Any]) -> str:
        return ", ".join(item if isinstance(item, str) else _to_json(item) for item in violating)


def validate_rule(rule: Rule) -> None:
    """Check a rule's parameters against its predicate kind."""
    get_handler(rule.predicate_kind).validate(rule)


def evaluate(rule: Rule, context: Mapping) -> Optional[Violation]:
    """Evaluate one rule against a launch context.

    Args:
        rule: A compiled rule
        context: LaunchContext or JSON-like mapping

    Returns:
        A Violation if the rule fails, otherwise None. Absent fields never
        produce a violation.
    """
    handler = get_handler(rule.predicate_kind)
    matches = resolve(context, rule.field_path)
    violating = dedupe(handler.find_violating(rule, matches))

    if not violating:
        logger.debug(f"Rule {rule.rule_id} passed ({len(matches)} values checked)")
        return None

    message = render_message(
        rule.message_template,
        violating=handler.render_violating(rule, violating),
        allowed=handler.render_allowed(rule),
    )
    logger.debug(f"Rule {rule.rule_id} failed: {violating}")
    return Violation(
        rule_id=rule.rule_id,
        predicate_kind=rule.predicate_kind,
        message=message,
        violating=violating,
    )
