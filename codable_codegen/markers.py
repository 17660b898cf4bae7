"""
Markers used in declaration sources.

These are read statically by the generator from the module's syntax tree.
At runtime they are inert, so a declaration module can be imported before
it has been expanded.

Example::

    from typing import Annotated, Final

    from codable_codegen import CodingTransformer, codable, coding_ignored, coding_key

    @codable
    class User:
        id: Final[str]
        name: Annotated[str, coding_key("user_name")]
        avatar: Annotated[SplitResult | None, coding_key("avatar_url", transform=CodingTransformer.url)]
        cache: Annotated[str, coding_ignored()] = ""
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TypeVar

T = TypeVar("T")


def codable(cls: T) -> T:
    """Mark a class for expansion. Returns the class unchanged."""
    return cls


@dataclass(frozen=True)
class CodingTransformer:
    """Reference to a value transformer.

    Built-in transformers are available as class attributes
    (``CodingTransformer.url``); custom ones are named by type:
    ``CodingTransformer("ColorHexTransform", wire_type="int")``.
    """

    type_name: str
    wire_type: str | None = None

    url: ClassVar[CodingTransformer]
    uuid: ClassVar[CodingTransformer]
    iso8601_date: ClassVar[CodingTransformer]
    timestamp_date: ClassVar[CodingTransformer]
    bool_int: ClassVar[CodingTransformer]


CodingTransformer.url = CodingTransformer("URLTransform")
CodingTransformer.uuid = CodingTransformer("UUIDTransform")
CodingTransformer.iso8601_date = CodingTransformer("ISO8601DateTransform")
CodingTransformer.timestamp_date = CodingTransformer("TimestampDateTransform")
CodingTransformer.bool_int = CodingTransformer("BoolIntTransform")


@dataclass(frozen=True)
class CodingKeyMarker:
    key: str | None = None
    transform: CodingTransformer | None = None


@dataclass(frozen=True)
class CodingIgnoredMarker:
    pass


def coding_key(key: str | None = None, transform: CodingTransformer | None = None) -> CodingKeyMarker:
    """Override a field's wire name (dots denote a nested path) and/or attach a transformer."""
    return CodingKeyMarker(key, transform)


def coding_ignored() -> CodingIgnoredMarker:
    """Exclude a field from encoding and decoding."""
    return CodingIgnoredMarker()
