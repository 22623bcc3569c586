"""TOML request file schema.

Parses a request file such as::

    [http]
    url = "https://example.org/api/{{id}}"
    method = "POST"

    [headers]
    Authorization = "Bearer {{token}}"

    [queryparams]
    page = 1
    tags = ["a", "b"]

    [body]
    raw = "content"

into a validated Schema, then into the public Request model.
"""

import tomllib
from pathlib import Path
from typing import Any, Literal

import httpx
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, ValidationError, field_validator

from rede.errors import ParseError
from rede.request import HEADER_NAME, HEADER_VALUE, Request
from rede.schema.body import Body, FormDataValue
from rede.schema.table import PrimitiveTable, table_to_pairs
from rede.schema.validation import validate_types

__all__ = ["Body", "FormDataValue", "Http", "Schema"]

HttpVersion = Literal["HTTP/0.9", "HTTP/1.0", "HTTP/1.1", "HTTP/2", "HTTP/3"]


class Http(BaseModel):
    """The ``[http]`` table."""

    model_config = ConfigDict(frozen=True)

    url: StrictStr
    method: StrictStr = "GET"
    version: HttpVersion = "HTTP/1.1"

    @field_validator("method")
    @classmethod
    def _method_token(cls, value: str) -> str:
        if not HEADER_NAME.fullmatch(value):
            raise ValueError(f"invalid HTTP method {value!r}")
        return value.upper()


class Schema(BaseModel):
    """A whole request file."""

    model_config = ConfigDict(frozen=True)

    http: Http
    query_params: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("query_params", "queryparams", "query-params"),
    )
    headers: dict[str, StrictStr] = {}
    metadata: dict[str, Any] = {}
    variables: dict[str, Any] = {}
    body: Body = Field(default_factory=Body)

    @field_validator("headers")
    @classmethod
    def _valid_headers(cls, headers: dict[str, str]) -> dict[str, str]:
        for name, value in headers.items():
            if not HEADER_NAME.fullmatch(name):
                raise ValueError(f"invalid header name {name!r}")
            if not HEADER_VALUE.fullmatch(value):
                raise ValueError(f"invalid value for header {name}: {value!r}")
        return headers

    @classmethod
    def from_str(cls, text: str) -> "Schema":
        """Parse and validate a TOML request document.

        Raises ParseError (or its InvalidTypeError subclass) on any failure.
        """
        try:
            document = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ParseError(f"invalid TOML: {e}") from e

        try:
            schema = cls.model_validate(document)
        except ValidationError as e:
            raise ParseError.from_validation_error(e) from e

        validate_types(schema)
        return schema

    @classmethod
    def from_path(cls, file_path: Path) -> "Schema":
        try:
            text = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"request file is not valid UTF-8: {e}") from e
        except OSError as e:
            raise ParseError(f"cannot read request file: {e}") from e
        return cls.from_str(text)

    def to_request(self) -> Request:
        query_params: PrimitiveTable = self.query_params or {}
        return Request(
            method=self.http.method,
            url=self.http.url,
            http_version=self.http.version,
            metadata=dict(self.metadata),
            headers=httpx.Headers(self.headers),
            query_params=table_to_pairs(query_params),
            variables=dict(self.variables),
            body=self.body.to_public(),
        )
