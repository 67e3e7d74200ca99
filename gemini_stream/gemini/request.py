"""Request wire models for the Gemini REST endpoints.

Serialized with ``to_wire()`` (camelCase, unset fields omitted), so an
absent ``generationConfig`` or ``tools`` never reaches the wire.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from ..base.models import ContentPart, TextPart, WireModel


class RequestContent(WireModel):
    """One conversational turn in a request. ``role`` may be omitted."""

    role: Optional[str] = None
    parts: List[ContentPart]

    @classmethod
    def from_text(cls, text: str, role: Optional[str] = None) -> "RequestContent":
        if role is None:
            return cls(parts=[TextPart(text=text)])
        return cls(role=role, parts=[TextPart(text=text)])


class GenerationConfig(WireModel):
    max_output_tokens: Optional[int] = None
    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    stop_sequences: Optional[List[str]] = None
    candidate_count: Optional[int] = None


class FunctionParametersProperty(WireModel):
    type: str
    description: str


class FunctionParameters(WireModel):
    type: str = "object"
    properties: Dict[str, FunctionParametersProperty] = Field(default_factory=dict)
    required: List[str] = Field(default_factory=list)


class FunctionDeclaration(WireModel):
    """A function the model may call, declared with a JSON-schema-like shape."""

    name: str
    description: str
    parameters: FunctionParameters


class Tools(WireModel):
    function_declarations: Optional[List[FunctionDeclaration]] = None


class GenerateContentRequest(WireModel):
    contents: List[RequestContent]
    generation_config: Optional[GenerationConfig] = None
    tools: Optional[List[Tools]] = None

    @classmethod
    def from_prompt(
        cls,
        prompt: str,
        *,
        generation_config: Optional[GenerationConfig] = None,
        tools: Optional[List[Tools]] = None,
    ) -> "GenerateContentRequest":
        """Build a single-turn request carrying ``prompt`` as one text part."""
        fields: Dict[str, Any] = {"contents": [RequestContent.from_text(prompt)]}
        if generation_config is not None:
            fields["generation_config"] = generation_config
        if tools:
            fields["tools"] = tools
        return cls(**fields)


class CountTokensRequest(WireModel):
    contents: List[RequestContent]


class CountTokensResponse(WireModel):
    total_tokens: int


__all__ = [
    "RequestContent",
    "GenerationConfig",
    "FunctionParametersProperty",
    "FunctionParameters",
    "FunctionDeclaration",
    "Tools",
    "GenerateContentRequest",
    "CountTokensRequest",
    "CountTokensResponse",
]
