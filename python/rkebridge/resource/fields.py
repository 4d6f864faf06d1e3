"""
rkebridge/resource/fields.py

Primitive field readers over a ResourceData accessor. Each reader is total:
an absent key (or an explicit null, as Terraform writes for unset attributes)
yields the zero value, and a present value of the wrong shape raises
FieldTypeError instead of leaking through.

Nested blocks are returned as DictResourceData so the same readers apply at
every level.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from rkebridge.errors import FieldTypeError
from rkebridge.models.validator import validate_field
from rkebridge.resource.data import DictResourceData, ResourceData


def _lookup(d: ResourceData, key: str) -> Tuple[Any, bool]:
    value, ok = d.get_ok(key)
    if not ok or value is None:
        return None, False
    return value, True


def read_str(d: ResourceData, key: str) -> str:
    value, ok = _lookup(d, key)
    return validate_field(value, str, key) if ok else ""


def read_bool(d: ResourceData, key: str) -> bool:
    value, ok = _lookup(d, key)
    return validate_field(value, bool, key) if ok else False


def read_port(d: ResourceData, key: str) -> str:
    """
    Read an integer port and return it in decimal string form.

    Returns:
        The port as a string, or "" if absent.

    Raises:
        FieldTypeError: If the value is not a non-negative int (bools are
            rejected).
    """
    value, ok = _lookup(d, key)
    if not ok:
        return ""
    port = validate_field(value, int, key)
    if port < 0:
        raise FieldTypeError(f"Invalid '{key}': negative port {port}", key=key)
    return str(port)


def read_str_list(d: ResourceData, key: str) -> List[str]:
    value, ok = _lookup(d, key)
    return list(validate_field(value, List[str], key)) if ok else []


def read_str_map(d: ResourceData, key: str) -> Dict[str, str]:
    value, ok = _lookup(d, key)
    return dict(validate_field(value, Dict[str, str], key)) if ok else {}


def _as_block(value: Any, key: str) -> DictResourceData:
    if not isinstance(value, dict):
        raise FieldTypeError(
            f"Invalid '{key}': expected a nested map, got {type(value).__name__}",
            key=key,
        )
    return DictResourceData(value)


def _block_items(d: ResourceData, key: str) -> List[Any]:
    value, ok = _lookup(d, key)
    if not ok:
        return []
    if not isinstance(value, list):
        raise FieldTypeError(
            f"Invalid '{key}': expected a list of nested maps, got {type(value).__name__}",
            key=key,
        )
    return value


def read_block(d: ResourceData, key: str) -> Optional[DictResourceData]:
    """
    Read a single-occurrence block, stored as a one-element list holding one map.

    Returns:
        The block's accessor, or None if the key is absent or the list is empty.

    Raises:
        FieldTypeError: If the value is not a list, or its first element not a map.
    """
    items = _block_items(d, key)
    return _as_block(items[0], key) if items else None


def read_block_list(d: ResourceData, key: str) -> List[DictResourceData]:
    """Read a repeatable block as an ordered list of accessors ([] if absent)."""
    return [_as_block(item, key) for item in _block_items(d, key)]
