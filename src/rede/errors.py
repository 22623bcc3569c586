"""Errors raised while parsing request files and rendering placeholders."""

from pydantic import ValidationError


class RedeError(Exception):
    """Base class for every recoverable error raised by rede."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(RedeError):
    """The request document is malformed or incomplete."""

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> "ParseError":
        """Flatten a pydantic ValidationError into a single readable message."""
        messages = []
        for error in exc.errors():
            loc = [str(part) for part in error["loc"]]
            if error["type"] == "missing":
                message = f"missing field `{loc[-1]}`"
                if len(loc) > 1:
                    message += f" in [{'.'.join(loc[:-1])}]"
            else:
                detail = error["msg"]
                if error["type"] == "value_error":
                    detail = str(error["ctx"]["error"])
                message = f"{'.'.join(loc)}: {detail}" if loc else detail
            messages.append(message)
        return cls("; ".join(messages))


class InvalidTypeError(ParseError):
    """A value's TOML type is outside the allowed primitive set."""

    def __init__(self, field: str, invalid_type: str):
        super().__init__(f"invalid type `{invalid_type}` in {field}")
        self.field = field
        self.invalid_type = invalid_type

    def __eq__(self, other):
        if not isinstance(other, InvalidTypeError):
            return NotImplemented
        return (self.field, self.invalid_type) == (other.field, other.invalid_type)

    def __hash__(self):
        return hash((self.field, self.invalid_type))


class RenderError(RedeError):
    """A placeholder could not be rendered into a header."""

    def __init__(self, message: str, header: str):
        super().__init__(message)
        self.header = header


class CatalogMismatchError(RuntimeError):
    """A placeholder location does not fit the request it is applied to.

    The catalog must be built from the same request it renders, so this
    signals a programming error rather than bad input.
    """
