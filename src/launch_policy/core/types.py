"""Core types - the immutable data that flows through a policy evaluation."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, Tuple, Union

from launch_policy.common.exceptions import CompilationError


# Path segment selecting every element of a sequence
WILDCARD = "[*]"

Scalar = Union[str, int, float, bool, None]

_TOKEN_RE = re.compile(r"^(?P<key>[^.\[\]]+)(?P<wildcards>(?:\[\*\])*)$")


class PredicateKind(str, Enum):
    """Closed set of constraint kinds understood by the evaluator."""
    VALUE_ALLOW_LIST = "valueAllowList"
    FIELD_MUST_NOT_BE_NULL = "fieldMustNotBeNull"


def is_scalar(value: Any) -> bool:
    """Check whether a value is a JSON scalar (string, number, boolean or null)."""
    return value is None or isinstance(value, (str, int, float, bool))


def freeze(value: Any) -> Any:
    """Deep-freeze a JSON-like value.

    Mappings become read-only mappings and lists become tuples, so a
    frozen payload can be shared between threads without copying.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({str(k): freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of freeze(): plain dicts and lists, ready for json.dumps."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass(frozen=True)
class FieldPath:
    """Ordered path segments selecting values out of a launch context.

    Segments are non-empty key names or the WILDCARD marker. The textual
    form joins keys with dots and appends ``[*]`` for wildcards, e.g.
    ``credentials[*].organization``.
    """
    segments: Tuple[str, ...]

    def __post_init__(self):
        segments = tuple(self.segments)
        if not segments:
            raise CompilationError("Field path must have at least one segment")
        for segment in segments:
            if not isinstance(segment, str) or not segment:
                raise CompilationError(
                    f"Field path segments must be non-empty strings, got {segment!r}",
                    details={"segments": list(segments)},
                )
        if segments[0] == WILDCARD:
            raise CompilationError(
                "Field path cannot start with a wildcard",
                details={"segments": list(segments)},
            )
        object.__setattr__(self, "segments", segments)

    @classmethod
    def parse(cls, text: str) -> "FieldPath":
        """Parse the dotted textual form into a FieldPath.

        Raises:
            CompilationError: If the text is empty or malformed
        """
        if not isinstance(text, str) or not text.strip():
            raise CompilationError("Field path must be a non-empty string", details={"path": text})

        segments = []
        for token in text.strip().split("."):
            match = _TOKEN_RE.match(token)
            if match is None:
                raise CompilationError(
                    f"Malformed field path '{text}': bad segment '{token}'",
                    details={"path": text},
                )
            segments.append(match.group("key"))
            segments.extend([WILDCARD] * (len(match.group("wildcards")) // len(WILDCARD)))
        return cls(tuple(segments))

    @property
    def has_wildcard(self) -> bool:
        return WILDCARD in self.segments

    @property
    def last_key(self) -> str:
        """The last key segment (wildcards skipped)."""
        return [s for s in self.segments if s != WILDCARD][-1]

    def __str__(self) -> str:
        text = ""
        for segment in self.segments:
            if segment == WILDCARD:
                text += WILDCARD
            else:
                text += ("." if text else "") + segment
        return text


@dataclass(frozen=True, eq=False)
class LaunchContext(Mapping):
    """Immutable job-launch payload (``extra_vars``, ``credentials``, ...).

    Created once per evaluation request and never mutated afterwards.
    Use from_dict() to build one from a JSON-like dict.
    """
    payload: Mapping = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LaunchContext":
        if isinstance(data, LaunchContext):
            return data
        if not isinstance(data, Mapping):
            raise TypeError(f"Launch context must be a mapping, got {type(data).__name__}")
        return cls(payload=freeze(data))

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self.payload)

    def __len__(self) -> int:
        return len(self.payload)

    def to_dict(self) -> Dict[str, Any]:
        return thaw(self.payload)


@dataclass(frozen=True)
class Rule:
    """One normalized governance constraint.

    Immutable once compiled. ``parameters`` is predicate-specific and is
    stored as a read-only mapping.
    """
    rule_id: str
    field_path: FieldPath
    predicate_kind: PredicateKind
    parameters: Mapping = field(default_factory=lambda: MappingProxyType({}))
    message_template: str = ""

    def __post_init__(self):
        if not isinstance(self.rule_id, str) or not self.rule_id:
            raise CompilationError("Rule id must be a non-empty string")

        if isinstance(self.field_path, str):
            object.__setattr__(self, "field_path", FieldPath.parse(self.field_path))
        elif isinstance(self.field_path, Sequence):
            object.__setattr__(self, "field_path", FieldPath(tuple(self.field_path)))
        if not isinstance(self.field_path, FieldPath):
            raise CompilationError(
                f"Rule field path must be a FieldPath, text or segment list, got {type(self.field_path).__name__}",
                details={"rule_id": self.rule_id},
            )

        try:
            kind = PredicateKind(self.predicate_kind)
        except ValueError:
            raise CompilationError(
                f"Unknown predicate kind '{self.predicate_kind}'",
                details={"rule_id": self.rule_id},
            ) from None
        object.__setattr__(self, "predicate_kind", kind)
        object.__setattr__(self, "parameters", freeze(self.parameters or {}))

        # Parameter checks live with the predicate handlers
        from launch_policy.governance.policies.evaluator import validate_rule
        validate_rule(self)


@dataclass(frozen=True)
class RuleSet:
    """Ordered, reusable collection of rules.

    Rules are evaluated in declaration order. A RuleSet is read-only and
    can be shared across concurrent evaluations.
    """
    rules: Tuple[Rule, ...] = ()
    name: str = "default"
    version: str = "0"

    def __post_init__(self):
        rules = tuple(self.rules)
        seen = set()
        for rule in rules:
            if rule.rule_id in seen:
                raise CompilationError(
                    f"Duplicate rule id '{rule.rule_id}'",
                    details={"rule_id": rule.rule_id, "rule_set": self.name},
                )
            seen.add(rule.rule_id)
        object.__setattr__(self, "rules", rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)
