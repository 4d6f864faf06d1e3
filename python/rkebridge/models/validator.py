"""
rkebridge/models/validator.py

Defines utility functions for validating Python objects against
a pydantic-based type using TypeAdapter.
"""

from typing import Any, Optional, Type, TypeVar
from pydantic import ValidationError, TypeAdapter

from rkebridge.errors import FieldTypeError

T = TypeVar("T")


def validate_type(obj: Any, expected_type: Type[T]) -> T:
    """
    Validates that a given Python object conforms to the expected pydantic-based type.

    Args:
        obj (Any): The object to validate.
        expected_type (Type[T]): The type (pydantic or otherwise) to validate against.

    Returns:
        T: The validated object, cast to the expected type.

    Raises:
        ValueError: If validation fails.
    """
    try:
        adapter = TypeAdapter(expected_type)
        return adapter.validate_python(obj)
    except ValidationError as e:
        raise ValueError(f"Validation failed for type {expected_type}: {e}") from e


def validate_field(obj: Any, expected_type: Type[T], key: Optional[str] = None) -> T:
    """
    Strictly validates a single flat-representation value.

    Unlike validate_type, no lax coercion is applied: an int is never accepted
    for a str, nor "true" for a bool.

    Args:
        obj (Any): The raw value read from the flat representation.
        expected_type (Type[T]): The type to validate against.
        key (Optional[str]): The flat key the value came from, for error messages.

    Returns:
        T: The validated value.

    Raises:
        FieldTypeError: If the value does not have the expected shape.
    """
    try:
        return TypeAdapter(expected_type).validate_python(obj, strict=True)
    except ValidationError as e:
        where = f"'{key}'" if key else "value"
        raise FieldTypeError(
            f"Invalid {where}: expected {expected_type}, got {type(obj).__name__}: {e}",
            key=key,
        ) from e
