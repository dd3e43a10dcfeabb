"""Custom exceptions for ShapeDiff."""

from __future__ import annotations

from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import MismatchRecord


class ErrorKind(Enum):
    TRANSPORT = "TRANSPORT_ERROR"
    SERIALIZATION = "SERIALIZATION_ERROR"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"


class ShapeDiffError(Exception):
    """Base exception for ShapeDiff errors."""

    kind: ErrorKind

    def __init__(self, message: str, endpoint: str):
        super().__init__(message)
        self.message = message
        self.endpoint = endpoint

    @property
    def details(self) -> dict:
        return {"endpoint": self.endpoint}

    def to_dict(self) -> dict:
        return {
            "code": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class TransportError(ShapeDiffError):
    """Raised when the HTTP call fails or the response body is not JSON."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, method: str, endpoint: str, url: str, reason: str):
        super().__init__(
            f"Transport failure on {method} {endpoint} ({url}): {reason}",
            endpoint,
        )
        self.method = method
        self.url = url
        self.reason = reason

    @property
    def details(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "method": self.method,
            "url": self.url,
            "reason": self.reason,
        }


class SerializationError(ShapeDiffError):
    """Raised when a request body cannot be encoded for sending."""

    kind = ErrorKind.SERIALIZATION

    def __init__(self, method: str, endpoint: str, reason: str):
        super().__init__(
            f"Cannot encode request body for {method} {endpoint}: {reason}",
            endpoint,
        )
        self.method = method
        self.reason = reason

    @property
    def details(self) -> dict:
        return {
            "endpoint": self.endpoint,
            "method": self.method,
            "reason": self.reason,
        }


class ShapeMismatchError(ShapeDiffError):
    """Raised when candidate and reference responses diverge in shape."""

    kind = ErrorKind.SHAPE_MISMATCH

    def __init__(self, mismatch: MismatchRecord, context: Optional[dict] = None):
        super().__init__(mismatch.message, mismatch.endpoint)
        self.mismatch = mismatch
        self.context = context or {}

    @property
    def details(self) -> dict:
        details = self.mismatch.to_dict()
        if self.context:
            details["context"] = self.context
        return details
