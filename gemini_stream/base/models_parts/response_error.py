"""
ResponseError: a terminal failure reported in-band by the service.

Decoded from the ``error`` member of a stream element, e.g.
``{"error": {"code": 503, "message": "...", "status": "UNAVAILABLE"}}``.
"""
from __future__ import annotations

from .wire_model import WireModel


class ResponseError(WireModel):
    code: int
    message: str
    status: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.code} {self.status}: {self.message}"


__all__ = ["ResponseError"]
