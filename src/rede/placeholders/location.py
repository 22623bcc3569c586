"""Places inside a request where a placeholder can occur."""

from pydantic import BaseModel, ConfigDict


class UrlLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "url"


class HeaderLocation(BaseModel):
    """A header value, looked up by case-insensitive name."""

    model_config = ConfigDict(frozen=True)

    name: str

    def __str__(self) -> str:
        return f"headers[{self.name}]"


class QueryParamLocation(BaseModel):
    """The value of the first query parameter with this key."""

    model_config = ConfigDict(frozen=True)

    key: str

    def __str__(self) -> str:
        return f"query_params[{self.key}]"


class BodyFormLocation(BaseModel):
    """A field of a multipart or url-encoded form body."""

    model_config = ConfigDict(frozen=True)

    key: str

    def __str__(self) -> str:
        return f"body[{self.key}]"


class BodyLocation(BaseModel):
    """The body as a whole. Rendering leaves it untouched for now."""

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "body"


Location = UrlLocation | HeaderLocation | QueryParamLocation | BodyFormLocation | BodyLocation
