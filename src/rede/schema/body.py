"""Request body section of a request file.

The ``[body]`` table holds at most one of several optional keys. Each model
here accepts all of them, then insists that exactly one is present before it
is converted into the matching public body variant.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, model_validator

from rede import request as public
from rede.schema.table import PrimitiveTable, table_to_map
from rede.schema.types import array_to_str

BODY_TYPES = ("raw", "binary", "form_data", "form_urlencoded")


class FormDataValue(BaseModel):
    """One field of a multipart form: either ``text`` or ``file``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: Any = None
    file: StrictStr | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "FormDataValue":
        if (self.text is None) == (self.file is None):
            raise ValueError("wanted exactly one of text, file")
        return self

    def to_public(self) -> public.FormDataValue:
        if self.file is not None:
            return public.FormFile(path=self.file)
        return public.FormText(value=array_to_str(self.text))


FormDataTable = dict[str, FormDataValue]


class Body(BaseModel):
    """The ``[body]`` table. An absent or empty table means no body."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    raw: StrictStr | None = Field(default=None, validation_alias=AliasChoices("raw", "text"))
    binary: StrictStr | None = Field(default=None, validation_alias=AliasChoices("binary", "file"))
    form_data: FormDataTable | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "form_data", "form-data", "multipart_form_data", "multipart-form-data"
        ),
    )
    form_urlencoded: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "form_urlencoded", "form-urlencoded", "x-www-form-urlencoded"
        ),
    )

    @model_validator(mode="after")
    def _at_most_one(self) -> "Body":
        present = self.present()
        if len(present) > 1:
            raise ValueError(
                f"more than one body type given ({', '.join(present)}); "
                f"wanted exactly one of {', '.join(BODY_TYPES)}"
            )
        return self

    def present(self) -> list[str]:
        """Names of the body types set in the source document."""
        return [name for name in BODY_TYPES if getattr(self, name) is not None]

    def to_public(self) -> public.Body:
        if self.raw is not None:
            return public.RawBody(content=self.raw)
        if self.binary is not None:
            return public.BinaryBody(path=self.binary)
        if self.form_data is not None:
            return public.FormDataBody(
                fields={key: value.to_public() for key, value in self.form_data.items()}
            )
        if self.form_urlencoded is not None:
            table: PrimitiveTable = self.form_urlencoded
            return public.FormUrlEncodedBody(fields=table_to_map(table))
        return public.NoBody()
