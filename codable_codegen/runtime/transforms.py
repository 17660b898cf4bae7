"""
Value transformers used by fields declared with a ``transform=`` reference.

A transformer converts between a field's in-memory value and a primitive wire
value. Generated code instantiates the transformer and calls ``decode`` after
reading the wire value and ``encode`` before writing it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, TypeVar
from urllib.parse import SplitResult, urlsplit
from uuid import UUID

from .errors import (
    InvalidBoolIntError,
    InvalidISO8601DateError,
    InvalidURLError,
    InvalidUUIDError,
    TransformError,
)

V = TypeVar("V")
W = TypeVar("W")


class CodingTransform(ABC, Generic[V, W]):
    """Bidirectional converter between a value type ``V`` and a wire type ``W``."""

    wire_type: ClassVar[type] = str

    @abstractmethod
    def encode(self, value: V) -> W:
        pass

    @abstractmethod
    def decode(self, value: W) -> V:
        pass


class URLTransform(CodingTransform[SplitResult, str]):
    wire_type = str

    def encode(self, value: SplitResult) -> str:
        return value.geturl()

    def decode(self, value: str) -> SplitResult:
        if not isinstance(value, str) or not value.strip() or any(c.isspace() for c in value):
            raise InvalidURLError(value)
        try:
            result = urlsplit(value)
        except ValueError as e:
            raise InvalidURLError(value) from e
        if not (result.scheme or result.netloc or result.path):
            raise InvalidURLError(value)
        return result


class UUIDTransform(CodingTransform[UUID, str]):
    wire_type = str

    def encode(self, value: UUID) -> str:
        return str(value)

    def decode(self, value: str) -> UUID:
        try:
            return UUID(value)
        except (ValueError, TypeError, AttributeError) as e:
            raise InvalidUUIDError(value) from e


class ISO8601DateTransform(CodingTransform[datetime, str]):
    """Internet date-time strings such as ``2024-01-15T10:30:00Z``.

    Naive datetimes are treated as UTC when encoding; decoding requires an
    explicit offset and returns a UTC datetime.
    """

    wire_type = str

    def encode(self, value: datetime) -> str:
        return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")

    def decode(self, value: str) -> datetime:
        if not isinstance(value, str) or "T" not in value:
            raise InvalidISO8601DateError(value)
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as e:
            raise InvalidISO8601DateError(value) from e
        if parsed.tzinfo is None:
            raise InvalidISO8601DateError(value)
        return parsed.astimezone(timezone.utc)


class TimestampDateTransform(CodingTransform[datetime, float]):
    """Seconds since the Unix epoch as a float."""

    wire_type = float

    def encode(self, value: datetime) -> float:
        return _as_utc(value).timestamp()

    def decode(self, value: float) -> datetime:
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError, TypeError) as e:
            raise TransformError(f"Invalid timestamp: {value}") from e


class BoolIntTransform(CodingTransform[bool, int]):
    """Booleans carried on the wire as ``0`` / ``1``."""

    wire_type = int

    def encode(self, value: bool) -> int:
        return 1 if value else 0

    def decode(self, value: int) -> bool:
        if isinstance(value, bool) or value not in (0, 1):
            raise InvalidBoolIntError(value)
        return value == 1


def _as_utc(value: Any) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
