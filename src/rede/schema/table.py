"""Keyed tables of primitives and their conversion to the public request model."""

from rede.schema.types import PrimitiveArray, array_to_str

PrimitiveTable = dict[str, PrimitiveArray]


def table_to_pairs(table: PrimitiveTable) -> list[tuple[str, str]]:
    """Flatten a table into ordered (key, value) pairs, one pair per key.

    A list value is joined with commas, so each key appears exactly once.
    """
    return [(key, array_to_str(value)) for key, value in table.items()]


def table_to_map(table: PrimitiveTable) -> dict[str, str]:
    return {key: array_to_str(value) for key, value in table.items()}
