"""
Base class for types whose coding routines are generated.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Self

if TYPE_CHECKING:
    from .containers import Decoder, Encoder


class Codable:
    """Marks a type as encodable and decodable.

    Generated classes override ``from_decoder`` and ``encode``. The defaults
    produce an empty instance and write nothing, which lets reference-type
    records chain to a codable base class through ``super()``.
    """

    __slots__ = ()

    @classmethod
    def from_decoder(cls, decoder: Decoder) -> Self:
        return cls.__new__(cls)

    def encode(self, encoder: Encoder) -> None:
        pass


class _UnsetType:
    """Type of ``UNSET``."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


# Default of an optional initializer parameter whose declared default is built
# per instance. None stays a value the caller can pass.
UNSET: Any = _UnsetType()
