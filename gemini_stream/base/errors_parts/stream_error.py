"""
Structured stream error exception type.

Carries a normalized `ErrorKind` plus the diagnostics each kind needs: raw
offending bytes for decode/schema failures, the in-band `ResponseError` for
service failures, and whatever text was generated before the failure.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .error_kind import ErrorKind

if TYPE_CHECKING:
    from ..models_parts.response_error import ResponseError

# Raw payloads above this size are clipped in ``__str__`` output only.
_RAW_PREVIEW_BYTES = 200


@dataclass
class StreamError(Exception):
    """Represents a terminal failure of a streamed generation.

    Attributes:
        kind: Normalized :class:`ErrorKind` classification for the failure.
        message: Human-readable error message suitable for logging.
        raw: Offending raw bytes (decode/schema failures) for diagnostics.
        service_error: The in-band service error (``kind == SERVICE`` only).
        partial_text: Text aggregated before the failure was observed.
        cause: Optional original exception for diagnostics.
    """

    kind: ErrorKind
    message: str
    raw: Optional[bytes] = None
    service_error: Optional["ResponseError"] = None
    partial_text: str = ""
    cause: Optional[BaseException] = None

    @property
    def code(self) -> Optional[int]:
        """Service error code, when this failure came from the service."""
        return self.service_error.code if self.service_error is not None else None

    @property
    def status(self) -> Optional[str]:
        """Service error status string (e.g. ``UNAVAILABLE``)."""
        return self.service_error.status if self.service_error is not None else None

    def raw_preview(self) -> Optional[str]:
        """Return a short, printable preview of ``raw``."""
        if self.raw is None:
            return None
        preview = self.raw[:_RAW_PREVIEW_BYTES].decode("utf-8", errors="replace")
        return preview + "..." if len(self.raw) > _RAW_PREVIEW_BYTES else preview

    def to_dict(self) -> dict:
        """Return a JSON-serializable summary (used by logging and ``--json``)."""
        data = {"kind": self.kind.value, "message": self.message}
        if self.service_error is not None:
            data["code"] = self.service_error.code
            data["status"] = self.service_error.status
        if self.raw is not None:
            data["raw"] = self.raw_preview()
        return data

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.service_error is not None:
            return f"{self.kind.value}: {self.code} {self.status}: {self.message}"
        return f"{self.kind.value}: {self.message}"


__all__ = ["StreamError"]
