"""Context Resolver - selects values out of a launch context by field path.

Resolution is total: a missing segment or a segment of the wrong shape
yields no match instead of an error. A key that is present with a null
value still matches, so "missing" and "null" stay distinguishable.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from launch_policy.core.types import WILDCARD, FieldPath


@dataclass(frozen=True)
class ResolvedValue:
    """A single value selected by a field path.
    
    Attributes:
        value: The selected value (may be None)
        path: Concrete location, keys and element indexes,
            e.g. ("credentials", 0, "organization")
        parent: The mapping holding the value, used to read sibling fields
    """
    value: Any
    path: Tuple[Union[str, int], ...]
    parent: Optional[Mapping] = None

    @property
    def owner_key(self) -> Optional[str]:
        """Last key along the concrete path (element indexes skipped)."""
        for step in reversed(self.path):
            if isinstance(step, str):
                return step
        return None

    def sibling(self, key: str, default: Any = None) -> Any:
        """Read a field next to this value on the same parent mapping."""
        if self.parent is None:
            return default
        return self.parent.get(key, default)

    def path_text(self) -> str:
        """Render the concrete path, e.g. ``credentials[0].organization``."""
        text = ""
        for step in self.path:
            if isinstance(step, int):
                text += f"[{step}]"
            else:
                text += ("." if text else "") + step
        return text


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def resolve(context: Mapping, field_path: Union[FieldPath, str]) -> List[ResolvedValue]:
    """Resolve a field path against a launch context.
    
    Args:
        context: LaunchContext or any JSON-like mapping
        field_path: FieldPath or its textual form
        
    Returns:
        Matched values in document order. Empty when any segment is
        absent or does not fit the shape of the data.
    """
    if isinstance(field_path, str):
        field_path = FieldPath.parse(field_path)
    if not isinstance(context, Mapping):
        return []
    
    # Each frontier entry: (current value, concrete path, parent mapping)
    frontier: List[Tuple[Any, Tuple[Union[str, int], ...], Optional[Mapping]]] = [
        (context, (), None)
    ]
    
    for segment in field_path.segments:
        next_frontier = []
        for current, path, _ in frontier:
            if segment == WILDCARD:
                if not _is_sequence(current):
                    continue
                for index, element in enumerate(current):
                    next_frontier.append((element, path + (index,), None))
            else:
                if not isinstance(current, Mapping) or segment not in current:
                    continue
                next_frontier.append((current[segment], path + (segment,), current))
        frontier = next_frontier
        if not frontier:
            break
    
    return [
        ResolvedValue(value=value, path=path, parent=parent)
        for value, path, parent in frontier
    ]
