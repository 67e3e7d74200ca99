"""
Shared pydantic base for Gemini wire objects.

Fields are declared in snake_case and (de)serialized with camelCase aliases.
Unknown keys are retained so a decoded element re-serializes without silently
dropping fields this package does not model (``index``, ``promptFeedback``
details, future additions).
"""
from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model for every JSON object exchanged with the service."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> Dict[str, Any]:
        """Return the camelCase JSON form, limited to keys that were set."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


__all__ = ["WireModel"]
