"""Primitive values allowed in query parameters and form fields."""

from typing import Any

Primitive = str | bool | int | float
PrimitiveArray = Primitive | list[Primitive]


def is_primitive(value: Any) -> bool:
    return isinstance(value, (str, bool, int, float))


def primitive_to_str(value: Primitive) -> str:
    """Render a primitive the way it is spelled in TOML."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def array_to_str(value: PrimitiveArray) -> str:
    """Collapse a single value or a list into one string, joining lists with commas."""
    if isinstance(value, list):
        return ",".join(primitive_to_str(item) for item in value)
    return primitive_to_str(value)
