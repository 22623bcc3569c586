"""Placeholder catalog and renderer."""

from rede.placeholders.catalog import Placeholders, find_names
from rede.placeholders.location import (
    BodyFormLocation,
    BodyLocation,
    HeaderLocation,
    Location,
    QueryParamLocation,
    UrlLocation,
)
from rede.placeholders.renderer import Renderer, render

__all__ = [
    "BodyFormLocation",
    "BodyLocation",
    "HeaderLocation",
    "Location",
    "Placeholders",
    "QueryParamLocation",
    "Renderer",
    "UrlLocation",
    "find_names",
    "render",
]
