"""Public request model.

A fully parsed request as handed to whatever executes it. The placeholder
renderer consumes and produces this same model.
"""

import re
from typing import Annotated, Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

TEXT_PLAIN_UTF_8 = "text/plain; charset=utf-8"
APPLICATION_OCTET_STREAM = "application/octet-stream"

HEADER_NAME = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
HEADER_VALUE = re.compile(r"[\t\x20-\x7e]*")


class FormText(BaseModel):
    """Text field of a multipart form."""

    model_config = ConfigDict(frozen=True)

    value: str


class FormFile(BaseModel):
    """File field of a multipart form, referenced by path."""

    model_config = ConfigDict(frozen=True)

    path: str


FormDataValue = FormText | FormFile


class NoBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class RawBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["raw"] = "raw"
    content: str
    mime: str = TEXT_PLAIN_UTF_8


class BinaryBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["binary"] = "binary"
    path: str
    mime: str = APPLICATION_OCTET_STREAM


class FormDataBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["form_data"] = "form_data"
    fields: dict[str, FormDataValue]


class FormUrlEncodedBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["form_urlencoded"] = "form_urlencoded"
    fields: dict[str, str]


Body = Annotated[
    NoBody | RawBody | BinaryBody | FormDataBody | FormUrlEncodedBody,
    Field(discriminator="kind"),
]


class Request(BaseModel):
    """A request ready to be sent, or to have its placeholders rendered."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str
    url: str
    http_version: str = "HTTP/1.1"
    metadata: dict[str, Any] = {}
    headers: httpx.Headers = Field(default_factory=httpx.Headers)
    query_params: list[tuple[str, str]] = []  # order is significant
    variables: dict[str, Any] = {}
    body: Body = Field(default_factory=NoBody)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> httpx.Headers:
        if isinstance(value, httpx.Headers):
            return value
        return httpx.Headers(value)

    @field_serializer("headers")
    def _dump_headers(self, headers: httpx.Headers) -> list[list[str]]:
        return [[name.decode("latin-1"), value.decode("latin-1")] for name, value in headers.raw]
