"""
Gemini REST package.

Exports:
- GeminiStreamClient: streaming client for ``streamGenerateContent``
- Request wire models (``GenerateContentRequest`` and friends)
"""

from .client import GeminiStreamClient
from .request import (
    CountTokensRequest,
    CountTokensResponse,
    FunctionDeclaration,
    FunctionParameters,
    FunctionParametersProperty,
    GenerateContentRequest,
    GenerationConfig,
    RequestContent,
    Tools,
)

__all__ = [
    "GeminiStreamClient",
    "CountTokensRequest",
    "CountTokensResponse",
    "FunctionDeclaration",
    "FunctionParameters",
    "FunctionParametersProperty",
    "GenerateContentRequest",
    "GenerationConfig",
    "RequestContent",
    "Tools",
]
