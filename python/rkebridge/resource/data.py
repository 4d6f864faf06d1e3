"""
rkebridge/resource/data.py

Interfaces onto the flat resource representation:

 - ResourceData: read accessor, get_ok(key) -> (value, present)
 - StateBuilder: write sink, set(key, value) and set_id(id)

plus in-memory dict-backed implementations of both.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from typing_extensions import Protocol

# A value in the flat representation. Nested blocks are lists of dicts.
FlatValue = Union[str, int, bool, Dict[str, Any], List[Any]]


class ResourceData(Protocol):
    """Read accessor over a flat resource representation."""

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Return (value, True) if key is present, else (None, False)."""
        ...


class StateBuilder(Protocol):
    """Write sink for a flat resource representation."""

    def set(self, key: str, value: Any) -> None:
        """Store value under key, raising on failure."""
        ...

    def set_id(self, resource_id: str) -> None:
        """Assign the resource identifier."""
        ...


class DictResourceData:
    """
    ResourceData over a plain mapping, e.g. the 'values' of a resource in
    'terraform show -json' output.
    """

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = values

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        if key in self._values:
            return self._values[key], True
        return None, False

    def keys(self) -> List[str]:
        """All keys present, in mapping order."""
        return list(self._values)


class DictStateBuilder:
    """
    StateBuilder collecting writes into a dict.

    Attributes:
        values: Every key written so far.
        id: The identifier passed to set_id, if any.
    """

    def __init__(self) -> None:
        self.values: Dict[str, Any] = {}
        self.id: Optional[str] = None

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def set_id(self, resource_id: str) -> None:
        self.id = resource_id

    def as_resource_data(self) -> DictResourceData:
        """Expose the collected writes for reading back."""
        return DictResourceData(self.values)
