"""Field schema and value coercion for record buffers.

A buffer is the loose field -> value mapping the CLI collects before a record
is persisted. Values usually arrive as raw strings; coerce_value() turns them
into the type the field's schema asks for.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldType(Enum):
    """Supported record field types."""

    STRING = "string"
    INT = "int"
    STRING_LIST = "string_list"


@dataclass(frozen=True)
class FieldDef:
    """Schema definition for a single record field."""

    field_type: FieldType
    description: str


def coerce_value(value: Any, field_def: FieldDef) -> Any:
    """Coerce a buffer value to the field's expected type.

    Args:
        value: Raw value from the buffer (usually a string).
        field_def: Schema definition for the target field.

    Returns:
        Coerced value. None passes through unchanged.

    Raises:
        ValueError: If the value cannot be coerced.
    """
    if value is None:
        return None

    ft = field_def.field_type

    if ft == FieldType.STRING:
        return value if isinstance(value, str) else str(value)

    if ft == FieldType.INT:
        if isinstance(value, bool):
            raise ValueError(f"Expected integer, got: {value!r}")
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError as e:
            raise ValueError(f"Expected integer, got: {value!r}") from e

    if ft == FieldType.STRING_LIST:
        if isinstance(value, (list, tuple)):
            return [str(item) for item in value]
        stripped = str(value).strip()
        # JSON array first, then comma-separated
        if stripped.startswith("["):
            try:
                parsed = json.loads(stripped)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except json.JSONDecodeError:
                pass
        return [item.strip() for item in stripped.split(",") if item.strip()]

    raise ValueError(f"Unknown field type: {ft}")
