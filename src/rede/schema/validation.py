"""Type checks that run after a request file has been structurally parsed.

Query parameters and form fields are read as loosely typed TOML values.
Only strings, integers, floats, booleans and flat arrays of those are
accepted; anything else is rejected with the offending field and the TOML
name of its type.
"""

import datetime
from typing import TYPE_CHECKING, Any

from rede.errors import InvalidTypeError
from rede.schema.types import is_primitive

if TYPE_CHECKING:
    from rede.schema import Schema

QUERY_PARAMS_FIELD = "params of [query_params]"
FORM_URLENCODED_FIELD = "fields of [body.form_urlencoded]"
FORM_DATA_FIELD = "text of [body.form_data]"


def toml_type_name(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "float"
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return "datetime"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "table"
    return type(value).__name__


def check_primitive_array(value: Any, field: str) -> None:
    """Raise InvalidTypeError unless value is a primitive or a flat list of them."""
    items = value if isinstance(value, list) else [value]
    for item in items:
        if not is_primitive(item):
            raise InvalidTypeError(field=field, invalid_type=toml_type_name(item))


def validate_types(schema: "Schema") -> None:
    for value in (schema.query_params or {}).values():
        check_primitive_array(value, QUERY_PARAMS_FIELD)

    body = schema.body
    for value in (body.form_urlencoded or {}).values():
        check_primitive_array(value, FORM_URLENCODED_FIELD)
    for value in (body.form_data or {}).values():
        if value.text is not None:
            check_primitive_array(value.text, FORM_DATA_FIELD)
