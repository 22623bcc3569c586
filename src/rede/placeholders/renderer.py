"""Substitutes placeholder values into a request.

Substitution is literal: every ``{{name}}`` at a catalogued location is
replaced with its value. Names without a value are left as they are.
Names are processed in catalog order, so a value that itself looks like
``{{other}}`` is only replaced again if ``other`` comes later in the catalog
and targets the same field.
"""

from collections.abc import Iterable, Mapping

import httpx

from rede.errors import CatalogMismatchError, RenderError
from rede.placeholders.catalog import Placeholders
from rede.placeholders.location import (
    BodyFormLocation,
    BodyLocation,
    HeaderLocation,
    QueryParamLocation,
    UrlLocation,
)
from rede.request import HEADER_VALUE, Body, FormDataBody, FormFile, FormText, FormUrlEncodedBody, Request

RawHeaders = list[tuple[bytes, bytes]]


class Renderer:
    """Renders requests against a fixed catalog and set of values."""

    def __init__(
        self,
        placeholders: Placeholders,
        values: Mapping[str, str] | Iterable[tuple[str, str]],
    ):
        self.placeholders = placeholders
        # later duplicates win
        self.values: dict[str, str] = dict(values)

    def render(self, request: Request) -> Request:
        """Return a copy of request with every known placeholder substituted.

        Raises RenderError if a header cannot be read as text before
        substitution or is not a valid header value after it. The input
        request is never modified.
        """
        url = request.url
        headers: RawHeaders = list(request.headers.raw)
        query_params = list(request.query_params)
        body = request.body

        for name, locations in self.placeholders.items():
            if name not in self.values:
                continue
            value = self.values[name]
            placeholder = "{{" + name + "}}"
            for location in locations:
                match location:
                    case UrlLocation():
                        url = url.replace(placeholder, value)
                    case HeaderLocation(name=header):
                        _render_header(headers, header, placeholder, value)
                    case QueryParamLocation(key=key):
                        _render_query_param(query_params, key, placeholder, value)
                    case BodyFormLocation(key=key):
                        body = _render_body_form(body, key, placeholder, value)
                    case BodyLocation():
                        pass

        return request.model_copy(
            update={
                "url": url,
                "metadata": dict(request.metadata),
                "variables": dict(request.variables),
                "headers": httpx.Headers(headers),
                "query_params": query_params,
                "body": body,
            }
        )


def render(
    request: Request,
    placeholders: Placeholders,
    values: Mapping[str, str] | Iterable[tuple[str, str]],
) -> Request:
    return Renderer(placeholders, values).render(request)


def _render_header(headers: RawHeaders, header: str, placeholder: str, value: str) -> None:
    """Replace inside the first header called ``header``, if there is one."""
    for index, (raw_name, raw_value) in enumerate(headers):
        if raw_name.decode("latin-1").lower() != header.lower():
            continue

        try:
            text = raw_value.decode("ascii")
        except UnicodeDecodeError:
            text = None
        if text is None or not HEADER_VALUE.fullmatch(text):
            raise RenderError(f"failed to convert header to string: {header} {raw_value!r}", header=header)

        rendered = text.replace(placeholder, value)
        if not HEADER_VALUE.fullmatch(rendered):
            raise RenderError(f"rendered header value is invalid: {header} {rendered!r}", header=header)

        headers[index] = (raw_name, rendered.encode("ascii"))
        return


def _render_query_param(query_params: list[tuple[str, str]], key: str, placeholder: str, value: str) -> None:
    for index, (param, current) in enumerate(query_params):
        if param == key:
            query_params[index] = (param, current.replace(placeholder, value))
            return


def _render_form_data(fields: dict, key: str, placeholder: str, value: str) -> dict:
    match fields.get(key):
        case FormText(value=text):
            rendered = FormText(value=text.replace(placeholder, value))
        case FormFile(path=path):
            rendered = FormFile(path=path.replace(placeholder, value))
        case _:
            return fields
    return {**fields, key: rendered}


def _render_form_urlencoded(fields: dict[str, str], key: str, placeholder: str, value: str) -> dict[str, str]:
    if key not in fields:
        return fields
    return {**fields, key: fields[key].replace(placeholder, value)}


def _render_body_form(body: Body, key: str, placeholder: str, value: str) -> Body:
    match body:
        case FormDataBody(fields=fields):
            return body.model_copy(update={"fields": _render_form_data(fields, key, placeholder, value)})
        case FormUrlEncodedBody(fields=fields):
            return body.model_copy(update={"fields": _render_form_urlencoded(fields, key, placeholder, value)})
        case _:
            raise CatalogMismatchError(f"form field {key!r} cannot be rendered into a {body.kind} body")
