from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Literal, Optional
from uuid import UUID

import pytest

from codable_codegen.runtime import (
    BoolIntTransform,
    Case,
    CodingKey,
    DataCorruptedError,
    Decoder,
    DynamicKey,
    Encoder,
    EncodingError,
    ISO8601DateTransform,
    InvalidBoolIntError,
    InvalidISO8601DateError,
    InvalidURLError,
    InvalidUUIDError,
    InvalidValueError,
    KeyNotFoundError,
    TimestampDateTransform,
    TransformError,
    TypeMismatchError,
    URLTransform,
    UUIDTransform,
    ValueNotFoundError,
    Variant,
    decode_value,
    encode_value,
)
from codable_codegen.runtime.keys import format_coding_path, key_string


class Keys(CodingKey):
    name = "user_name"
    age = "age"


class Color(Enum):
    red = "r"
    green = "g"


class TestKeys:
    def test_key_string(self):
        assert key_string(Keys.name) == "user_name"
        assert Keys.name.string_value == "user_name"
        assert key_string(DynamicKey("x")) == "x"
        assert key_string(3) == "[3]"

    def test_dynamic_key_equality(self):
        assert DynamicKey("a") == DynamicKey("a")
        assert len({DynamicKey("a"), DynamicKey("a")}) == 1
        assert repr(DynamicKey("a")) == "DynamicKey('a')"

    def test_format_coding_path(self):
        assert format_coding_path(()) == "<root>"
        assert format_coding_path((DynamicKey("users"), 2, Keys.name)) == "users[2].user_name"


class TestKeyedContainers:
    """Keyed encoding and decoding over plain dictionaries."""

    def test_encoding_containers_share_storage(self):
        encoder = Encoder()
        encoder.container(Keys).encode("Ann", Keys.name)
        nested = encoder.container(DynamicKey).nested_container(DynamicKey, DynamicKey("meta"))
        nested.encode(1, DynamicKey("version"))
        again = encoder.container(DynamicKey).nested_container(DynamicKey, DynamicKey("meta"))
        again.encode(2, DynamicKey("rev"))

        assert encoder.value == {"user_name": "Ann", "meta": {"version": 1, "rev": 2}}

    def test_encode_if_present_and_nil(self):
        encoder = Encoder()
        container = encoder.container(Keys)
        container.encode_if_present(None, Keys.name)
        container.encode_nil(Keys.age)

        assert encoder.value == {"age": None}

    def test_foreign_key_is_rejected(self):
        container = Encoder().container(Keys)

        with pytest.raises(EncodingError):
            container.encode(1, DynamicKey("age"))

    def test_empty_encoder(self):
        with pytest.raises(InvalidValueError):
            Encoder().value

    def test_decode(self):
        container = Decoder({"user_name": "Ann", "age": None, "extra": 1}).container(Keys)

        assert container.decode(str, Keys.name) == "Ann"
        assert container.decode_if_present(int, Keys.age) is None
        assert container.decode(Optional[int], Keys.age) is None
        assert container.decode_nil(Keys.age)
        assert container.contains(Keys.name)
        assert container.all_keys == [Keys.name, Keys.age]

    def test_decode_errors(self):
        container = Decoder({"age": None}).container(Keys)

        with pytest.raises(KeyNotFoundError):
            container.decode(str, Keys.name)
        with pytest.raises(ValueNotFoundError):
            container.decode(int, Keys.age)
        with pytest.raises(KeyNotFoundError):
            container.nested_container(DynamicKey, DynamicKey("missing"))

    def test_keyed_container_requires_object(self):
        with pytest.raises(TypeMismatchError):
            Decoder([1, 2]).container(Keys)
        with pytest.raises(ValueNotFoundError):
            Decoder(None).container(Keys)

    def test_dynamic_all_keys(self):
        container = Decoder({"a": 1, "b": 2}).container(DynamicKey)

        assert container.all_keys == [DynamicKey("a"), DynamicKey("b")]

    def test_single_value(self):
        encoder = Encoder()
        encoder.single_value_container().encode(Color.red)

        assert encoder.value == "r"
        assert Decoder("r").single_value_container().decode(Color) is Color.red
        assert Decoder(None).single_value_container().decode_nil()


class TestValueCoding:
    """Conversion of Python values to and from their JSON-compatible form."""

    def test_encode_collections(self):
        value = {"ids": (1, 2), "tags": {"b", "a"}, "color": Color.green, 7: None}

        assert encode_value(value) == {"ids": [1, 2], "tags": ["a", "b"], "color": "g", "7": None}

    def test_encode_unsupported(self):
        with pytest.raises(InvalidValueError):
            encode_value(object())
        with pytest.raises(InvalidValueError):
            encode_value({(1, 2): "x"})

    @pytest.mark.parametrize(
        "type_, raw, expected",
        [
            (int, 3, 3),
            (int, 3.0, 3),
            (float, 2, 2.0),
            (bool, True, True),
            (list[int], [1, 2], [1, 2]),
            (set[str], ["a", "a"], {"a"}),
            (tuple[int, str], [1, "x"], (1, "x")),
            (tuple[int, ...], [1, 2, 3], (1, 2, 3)),
            (dict[str, int], {"a": 1}, {"a": 1}),
            (dict[int, str], {"1": "a"}, {1: "a"}),
            (int | str, "x", "x"),
            (Optional[int], None, None),
            (Literal["a", "b"], "b", "b"),
            (UUID, "3f2504e0-4f89-11d3-9a0c-0305e82c3301", UUID("3f2504e0-4f89-11d3-9a0c-0305e82c3301")),
            (Color, "g", Color.green),
        ],
    )
    def test_decode_value(self, type_, raw, expected):
        assert decode_value(type_, raw) == expected

    @pytest.mark.parametrize(
        "type_, raw, error",
        [
            (int, True, TypeMismatchError),
            (int, 1.5, TypeMismatchError),
            (str, 1, TypeMismatchError),
            (bool, 0, TypeMismatchError),
            (list[int], {"a": 1}, TypeMismatchError),
            (tuple[int, int], [1], DataCorruptedError),
            (dict[int, str], {"x": "a"}, DataCorruptedError),
            (int | str, [1], TypeMismatchError),
            (Literal["a"], "c", DataCorruptedError),
            (UUID, "nope", DataCorruptedError),
            (Color, "blue", DataCorruptedError),
            (int, None, ValueNotFoundError),
        ],
    )
    def test_decode_value_errors(self, type_, raw, error):
        with pytest.raises(error):
            decode_value(type_, raw)

    def test_error_path_in_collections(self):
        with pytest.raises(TypeMismatchError) as exc_info:
            decode_value(dict[str, list[int]], {"scores": [1, "two"]})

        assert exc_info.value.coding_path == (DynamicKey("scores"), 1)
        assert str(exc_info.value).endswith("(at scores[1])")

    def test_unsupported_type(self):
        with pytest.raises(TypeError, match="Unsupported type"):
            decode_value(complex, 1)


class TestTransforms:
    """Built-in value transformers."""

    def test_url(self):
        transform = URLTransform()
        url = transform.decode("https://example.com/a?b=1")

        assert url.scheme == "https"
        assert transform.encode(url) == "https://example.com/a?b=1"

    @pytest.mark.parametrize("value", ["", "   ", "not a url", "http://[::1"])
    def test_invalid_url(self, value):
        with pytest.raises(InvalidURLError) as exc_info:
            URLTransform().decode(value)

        assert exc_info.value.value == value
        assert str(exc_info.value) == f"Invalid URL string: {value}"

    def test_uuid(self):
        transform = UUIDTransform()
        value = transform.decode("3F2504E0-4F89-11D3-9A0C-0305E82C3301")

        assert transform.encode(value) == "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
        with pytest.raises(InvalidUUIDError, match="Invalid UUID string: nope"):
            transform.decode("nope")

    def test_iso8601(self):
        transform = ISO8601DateTransform()
        value = transform.decode("2024-01-15T12:30:00+02:00")

        assert value == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert transform.encode(value) == "2024-01-15T10:30:00Z"
        assert transform.encode(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00Z"

    @pytest.mark.parametrize("value", ["2024-01-15", "2024-01-15T10:30:00", "yesterday"])
    def test_invalid_iso8601(self, value):
        with pytest.raises(InvalidISO8601DateError):
            ISO8601DateTransform().decode(value)

    def test_timestamp(self):
        transform = TimestampDateTransform()
        value = transform.decode(86400.5)

        assert value == datetime(1970, 1, 2, tzinfo=timezone.utc) + timedelta(milliseconds=500)
        assert transform.encode(value) == 86400.5
        with pytest.raises(TransformError, match="Invalid timestamp"):
            transform.decode(1e20)

    def test_bool_int(self):
        transform = BoolIntTransform()

        assert transform.decode(1) is True
        assert transform.decode(0) is False
        assert transform.encode(True) == 1
        assert transform.encode(False) == 0

    @pytest.mark.parametrize("value", [2, -1, True])
    def test_invalid_bool_int(self, value):
        with pytest.raises(InvalidBoolIntError, match="expected 0 or 1"):
            BoolIntTransform().decode(value)

    def test_wire_types(self):
        assert URLTransform.wire_type is str
        assert TimestampDateTransform.wire_type is float
        assert BoolIntTransform.wire_type is int


class Shape(Variant):
    circle = Case(radius=float)
    pair = Case(int, str)
    point = Case()


class TestVariant:
    def test_construction(self):
        circle = Shape.circle(radius=2.0)

        assert circle.case == "circle"
        assert circle.values == (2.0,)
        assert circle.radius == 2.0
        assert repr(circle) == "Shape.circle(radius=2.0)"
        assert repr(Shape.pair(1, "a")) == "Shape.pair(1, 'a')"

    def test_singletons(self):
        assert Shape.point is Shape.point
        assert repr(Shape.point) == "Shape.point"

    def test_equality(self):
        assert Shape.circle(radius=1.0) == Shape.circle(1.0)
        assert Shape.circle(radius=1.0) != Shape.circle(radius=2.0)
        assert len({Shape.pair(1, "a"), Shape.pair(1, "a")}) == 1

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Shape.circle(radius=1.0).radius = 3.0

    def test_binding_errors(self):
        with pytest.raises(TypeError):
            Shape.pair(1)
        with pytest.raises(TypeError):
            Shape.circle(radius=1.0, extra=2)
        with pytest.raises(TypeError):
            Shape.circle(1.0, 2.0)

    def test_cases(self):
        assert list(Shape.cases()) == ["circle", "pair", "point"]


if __name__ == "__main__":
    pytest.main([__file__])
