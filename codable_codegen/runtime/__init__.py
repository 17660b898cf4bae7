"""
Runtime support imported by generated code.
"""

from .codable import UNSET, Codable
from .containers import (
    Decoder,
    Encoder,
    KeyedDecodingContainer,
    KeyedEncodingContainer,
    SingleValueDecodingContainer,
    SingleValueEncodingContainer,
    decode_value,
    encode_value,
)
from .errors import (
    AmbiguousOrMissingVariantError,
    DataCorruptedError,
    DecodingError,
    DictConversionError,
    EncodingError,
    InvalidBoolIntError,
    InvalidISO8601DateError,
    InvalidMapShapeError,
    InvalidURLError,
    InvalidUUIDError,
    InvalidValueError,
    KeyNotFoundError,
    TransformError,
    TypeMismatchError,
    UnrecognizedCaseTagError,
    ValueNotFoundError,
)
from .json_coding import JSONDecoder, JSONEncoder
from .keys import CodingKey, DynamicKey
from .transforms import (
    BoolIntTransform,
    CodingTransform,
    ISO8601DateTransform,
    TimestampDateTransform,
    URLTransform,
    UUIDTransform,
)
from .variants import Case, Variant

__all__ = [
    "AmbiguousOrMissingVariantError",
    "BoolIntTransform",
    "Case",
    "Codable",
    "CodingKey",
    "CodingTransform",
    "DataCorruptedError",
    "Decoder",
    "DecodingError",
    "DictConversionError",
    "DynamicKey",
    "Encoder",
    "EncodingError",
    "ISO8601DateTransform",
    "InvalidBoolIntError",
    "InvalidISO8601DateError",
    "InvalidMapShapeError",
    "InvalidURLError",
    "InvalidUUIDError",
    "InvalidValueError",
    "JSONDecoder",
    "JSONEncoder",
    "KeyNotFoundError",
    "KeyedDecodingContainer",
    "KeyedEncodingContainer",
    "SingleValueDecodingContainer",
    "SingleValueEncodingContainer",
    "TimestampDateTransform",
    "TransformError",
    "TypeMismatchError",
    "UNSET",
    "URLTransform",
    "UUIDTransform",
    "UnrecognizedCaseTagError",
    "ValueNotFoundError",
    "Variant",
    "decode_value",
    "encode_value",
]
