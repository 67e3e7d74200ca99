"""
Polymorphic content part model.

A part is a closed variant set: text, inline binary data, a file reference,
or a function call. On the wire there is no explicit tag; the variant is the
single JSON property the object carries (``{"text": ...}``,
``{"inlineData": {...}}``, ``{"fileData": {...}}``, ``{"functionCall": {...}}``).

``ContentPart`` is a pydantic discriminated union whose discriminator reads
that property name. A part carrying zero or several variant properties is
rejected, both through the union and when a variant is built directly.
Consumers match on the variant classes and end with ``assert_never`` so a new
part kind surfaces at every call site under a type checker.
"""
from __future__ import annotations

from typing import Annotated, Any, ClassVar, Dict, Optional, Union

from pydantic import Discriminator, Field, Tag, model_validator

from .wire_model import WireModel

# JSON property name (either casing) -> variant tag.
_VARIANT_KEYS: Dict[str, str] = {
    "text": "text",
    "inlineData": "inline_data",
    "inline_data": "inline_data",
    "fileData": "file_data",
    "file_data": "file_data",
    "functionCall": "function_call",
    "function_call": "function_call",
}


def part_kind(value: Any) -> Optional[str]:
    """Return the variant tag of a raw part mapping or a part instance.

    Returns ``None`` when the value carries no variant property or more than
    one, which makes the union fail validation.
    """
    if isinstance(value, _PartBase):
        return value.kind
    if not isinstance(value, dict):
        return None
    kinds = {_VARIANT_KEYS[k] for k in value if k in _VARIANT_KEYS}
    return kinds.pop() if len(kinds) == 1 else None


class _PartBase(WireModel):
    kind: ClassVar[str]

    @model_validator(mode="before")
    @classmethod
    def _single_variant(cls, data: Any) -> Any:
        if isinstance(data, dict) and part_kind(data) != cls.kind:
            raise ValueError(
                f"{cls.__name__} must carry exactly one variant property ({cls.kind!r})"
            )
        return data


class Blob(WireModel):
    """Inline binary payload (base64 ``data``)."""

    mime_type: str
    data: str


class FileData(WireModel):
    """Reference to an uploaded file."""

    mime_type: str
    file_uri: str


class FunctionCall(WireModel):
    """A function invocation predicted by the model."""

    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class TextPart(_PartBase):
    kind: ClassVar[str] = "text"

    text: str


class InlineDataPart(_PartBase):
    kind: ClassVar[str] = "inline_data"

    inline_data: Blob


class FileDataPart(_PartBase):
    kind: ClassVar[str] = "file_data"

    file_data: FileData


class FunctionCallPart(_PartBase):
    kind: ClassVar[str] = "function_call"

    function_call: FunctionCall


ContentPart = Annotated[
    Union[
        Annotated[TextPart, Tag("text")],
        Annotated[InlineDataPart, Tag("inline_data")],
        Annotated[FileDataPart, Tag("file_data")],
        Annotated[FunctionCallPart, Tag("function_call")],
    ],
    Discriminator(
        part_kind,
        custom_error_type="invalid_content_part",
        custom_error_message="content part must carry exactly one of text, inlineData, fileData, functionCall",
    ),
]


__all__ = [
    "Blob",
    "FileData",
    "FunctionCall",
    "TextPart",
    "InlineDataPart",
    "FileDataPart",
    "FunctionCallPart",
    "ContentPart",
    "part_kind",
]
