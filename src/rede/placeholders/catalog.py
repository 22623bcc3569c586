"""Catalog of placeholder names and the locations they occur at."""

import re
from collections.abc import Iterable, Iterator

from rede.placeholders.location import (
    BodyFormLocation,
    BodyLocation,
    HeaderLocation,
    Location,
    QueryParamLocation,
    UrlLocation,
)
from rede.request import FormDataBody, FormText, FormUrlEncodedBody, RawBody, Request

PLACEHOLDER = re.compile(r"\{\{([^{}\s]+)\}\}")


def find_names(text: str) -> list[str]:
    """Return placeholder names in text, in order of first appearance."""
    return list(dict.fromkeys(PLACEHOLDER.findall(text)))


class Placeholders:
    """Maps each placeholder name to the ordered locations it appears at.

    Names iterate in the order they were first added, which is also the
    order the renderer substitutes them in.
    """

    def __init__(self):
        self._locations: dict[str, list[Location]] = {}

    def add(self, location: Location, name: str) -> None:
        locations = self._locations.setdefault(name, [])
        if location not in locations:
            locations.append(location)

    def add_all(self, location: Location, names: Iterable[str]) -> None:
        for name in names:
            self.add(location, name)

    def get(self, name: str) -> list[Location]:
        return list(self._locations.get(name, []))

    def items(self) -> Iterator[tuple[str, list[Location]]]:
        for name, locations in self._locations.items():
            yield name, list(locations)

    def __iter__(self) -> Iterator[str]:
        return iter(self._locations)

    def __len__(self) -> int:
        return len(self._locations)

    def __contains__(self, name: object) -> bool:
        return name in self._locations

    def __repr__(self) -> str:
        return f"Placeholders({self._locations!r})"

    @classmethod
    def from_request(cls, request: Request) -> "Placeholders":
        """Discover every ``{{name}}`` in a request.

        Scans the url, header values, query parameter values, form fields and
        raw body content, in that order.
        """
        placeholders = cls()
        placeholders.add_all(UrlLocation(), find_names(request.url))

        for name, value in request.headers.raw:
            header = name.decode("latin-1")
            placeholders.add_all(HeaderLocation(name=header), find_names(value.decode("latin-1")))

        for key, value in request.query_params:
            placeholders.add_all(QueryParamLocation(key=key), find_names(value))

        body = request.body
        if isinstance(body, FormDataBody):
            for key, field in body.fields.items():
                text = field.value if isinstance(field, FormText) else field.path
                placeholders.add_all(BodyFormLocation(key=key), find_names(text))
        elif isinstance(body, FormUrlEncodedBody):
            for key, value in body.fields.items():
                placeholders.add_all(BodyFormLocation(key=key), find_names(value))
        elif isinstance(body, RawBody):
            placeholders.add_all(BodyLocation(), find_names(body.content))

        return placeholders
