"""
Byte-level JSON encoder and decoder pair used by map bridging.
"""

from __future__ import annotations

import json
from typing import Any

from .containers import decode_value, encode_value
from .errors import DataCorruptedError


class JSONEncoder:
    """Encodes codable values to UTF-8 JSON bytes."""

    def __init__(self, sort_keys: bool = False, indent: int | None = None):
        self.sort_keys = sort_keys
        self.indent = indent

    def encode(self, value: Any) -> bytes:
        payload = encode_value(value)
        return json.dumps(payload, ensure_ascii=False, sort_keys=self.sort_keys, indent=self.indent).encode("utf-8")


class JSONDecoder:
    """Decodes UTF-8 JSON bytes (or text) into values of a requested type."""

    def decode(self, type_: Any, data: bytes | str) -> Any:
        try:
            payload = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataCorruptedError("The given data was not valid JSON.") from e
        return decode_value(type_, payload)
