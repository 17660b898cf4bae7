"""
Round trips through expanded declaration modules.

Each test expands a declaration source, imports the result and exercises the
generated coding routines through the JSON and dictionary bridges.
"""

from datetime import datetime, timezone
from urllib.parse import SplitResult
from uuid import UUID

import pytest

from codable_codegen.runtime import (
    AmbiguousOrMissingVariantError,
    DataCorruptedError,
    DynamicKey,
    InvalidBoolIntError,
    InvalidISO8601DateError,
    InvalidMapShapeError,
    InvalidUUIDError,
    JSONDecoder,
    JSONEncoder,
    KeyNotFoundError,
    TypeMismatchError,
    UnrecognizedCaseTagError,
    ValueNotFoundError,
)

USER_SOURCE = """
from typing import Annotated, Final
from codable_codegen import codable, coding_key

@codable
class User:
    id: Final[str]
    name: Annotated[str, coding_key("user_name")]
    email: str | None
    timeout: int = 30

    def greeting(self) -> str:
        return f"Hello {self.name}"
"""

RESULT_SOURCE = """
from codable_codegen import Case, Variant, codable

@codable
class NetworkResponse(Variant):
    success = Case(data=str, status_code=int)
    failure = Case(str)
    empty = Case()
"""

DIRECTION_SOURCE = """
from enum import Enum
from codable_codegen import codable

@codable
class Direction(Enum):
    north = "N"
    south = "S"
"""


class TestRecordRoundTrip:
    """Plain records with custom keys, optionals and defaults."""

    def test_encode_uses_custom_keys_and_omits_absent_optionals(self, load_module):
        module = load_module(USER_SOURCE)
        user = module.User(id="u1", name="Ann")

        assert user.to_dict() == {"id": "u1", "user_name": "Ann", "timeout": 30}

    def test_decode_applies_defaults(self, load_module):
        module = load_module(USER_SOURCE)
        user = module.User.from_dict({"id": "u1", "user_name": "Ann", "email": "ann@example.com"})

        assert user.id == "u1"
        assert user.name == "Ann"
        assert user.email == "ann@example.com"
        assert user.timeout == 30
        assert user.greeting() == "Hello Ann"

    def test_null_optional_decodes_as_none(self, load_module):
        module = load_module(USER_SOURCE)
        user = module.User.from_dict({"id": "u1", "user_name": "Ann", "email": None, "timeout": 5})

        assert user.email is None
        assert user.timeout == 5

    def test_json_bytes_round_trip(self, load_module):
        module = load_module(USER_SOURCE)
        user = module.User(id="u1", name="Ann", email="ann@example.com", timeout=10)

        data = JSONEncoder(sort_keys=True).encode(user)
        assert data == b'{"email": "ann@example.com", "id": "u1", "timeout": 10, "user_name": "Ann"}'

        decoded = JSONDecoder().decode(module.User, data)
        assert decoded.to_dict() == user.to_dict()

    def test_missing_required_key(self, load_module):
        module = load_module(USER_SOURCE)

        with pytest.raises(KeyNotFoundError) as exc_info:
            module.User.from_dict({"user_name": "Ann"})

        assert exc_info.value.key is module.User.CodingKeys.id
        assert "No value associated with key 'id'" in str(exc_info.value)

    def test_null_required_value(self, load_module):
        module = load_module(USER_SOURCE)

        with pytest.raises(ValueNotFoundError):
            module.User.from_dict({"id": None, "user_name": "Ann"})

    def test_type_mismatch_reports_path(self, load_module):
        module = load_module(USER_SOURCE)

        with pytest.raises(TypeMismatchError) as exc_info:
            module.User.from_dict({"id": "u1", "user_name": 42})

        assert exc_info.value.coding_path == (module.User.CodingKeys.name,)
        assert "(at user_name)" in str(exc_info.value)

    def test_invalid_json(self, load_module):
        module = load_module(USER_SOURCE)

        with pytest.raises(DataCorruptedError, match="not valid JSON"):
            JSONDecoder().decode(module.User, b"{not json")

    def test_list_bridging(self, load_module):
        module = load_module(USER_SOURCE)
        items = [{"id": "a", "user_name": "A"}, {"id": "b", "user_name": "B", "timeout": 1}]

        users = module.User.from_dict_list(items)

        assert [u.id for u in users] == ["a", "b"]
        assert module.User.to_dict_list(users) == [
            {"id": "a", "user_name": "A", "timeout": 30},
            {"id": "b", "user_name": "B", "timeout": 1},
        ]


class TestDefaults:
    """Defaults for absent keys and immutable fields."""

    def test_absent_collection_takes_default(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Profile:
                tags: list[str] = []
            """
        )

        assert module.Profile.from_dict({}).tags == []
        assert module.Profile.from_dict({"tags": ["a", "b"]}).tags == ["a", "b"]

    def test_initializer_default_is_not_shared(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Profile:
                tags: list[str] = []
            """
        )
        first = module.Profile()
        second = module.Profile()
        first.tags.append("x")

        assert second.tags == []

    def test_optional_collection_accepts_explicit_none(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Profile:
                tags: list[str] | None = []
            """
        )

        assert module.Profile().tags == []
        assert module.Profile(tags=None).tags is None
        assert module.Profile(tags=["a"]).tags == ["a"]
        assert module.Profile(tags=None).to_dict() == {}

    def test_fixed_field_ignores_wire_value(self, load_module):
        module = load_module(
            """
            from typing import Final
            from codable_codegen import codable

            @codable
            class Settings:
                version: Final[int] = 1
                theme: str = "light"
            """
        )
        settings = module.Settings.from_dict({"version": 5, "theme": "dark"})

        assert settings.version == 1
        assert settings.to_dict() == {"version": 1, "theme": "dark"}

    def test_ignored_field_is_neither_read_nor_written(self, load_module):
        module = load_module(
            """
            from typing import Annotated
            from codable_codegen import codable, coding_ignored

            @codable
            class Document:
                title: str
                cache: Annotated[dict[str, str], coding_ignored()] = {}
            """
        )
        document = module.Document.from_dict({"title": "Notes", "cache": {"a": "b"}})

        assert document.cache == {}
        document.cache["k"] = "v"
        assert document.to_dict() == {"title": "Notes"}


class TestNestedKeyPaths:
    """Dotted keys read and write nested objects."""

    SOURCE = """
        from typing import Annotated
        from codable_codegen import codable, coding_key

        @codable
        class Account:
            id: int
            name: Annotated[str, coding_key("user.name")]
            city: Annotated[str, coding_key("user.address.city")]
            bio: Annotated[str | None, coding_key("user.bio")]
        """

    def test_decode_nested(self, load_module):
        module = load_module(self.SOURCE)
        account = module.Account.from_dict({"id": 1, "user": {"name": "Ann", "address": {"city": "Paris"}}})

        assert account.name == "Ann"
        assert account.city == "Paris"
        assert account.bio is None

    def test_encode_rebuilds_structure(self, load_module):
        module = load_module(self.SOURCE)
        data = {"id": 1, "user": {"name": "Ann", "address": {"city": "Paris"}, "bio": "Hi"}}

        assert module.Account.from_dict(data).to_dict() == data

    def test_missing_intermediate_object(self, load_module):
        module = load_module(self.SOURCE)

        with pytest.raises(KeyNotFoundError) as exc_info:
            module.Account.from_dict({"id": 1})

        assert exc_info.value.key == DynamicKey("user")


class TestTransforms:
    """Fields converted through value transformers."""

    SOURCE = """
        from datetime import datetime
        from typing import Annotated
        from urllib.parse import SplitResult
        from uuid import UUID
        from codable_codegen import CodingTransformer, codable, coding_key

        @codable
        class Event:
            id: Annotated[UUID, coding_key(transform=CodingTransformer.uuid)]
            at: Annotated[datetime, coding_key("timestamp", transform=CodingTransformer.iso8601_date)]
            homepage: Annotated[SplitResult | None, coding_key(transform=CodingTransformer.url)]
            active: Annotated[bool, coding_key("is_active", transform=CodingTransformer.bool_int)]
        """

    WIRE = {
        "id": "3f2504e0-4f89-11d3-9a0c-0305e82c3301",
        "timestamp": "2024-01-15T10:30:00Z",
        "is_active": 1,
    }

    def test_decode_transformed_values(self, load_module):
        module = load_module(self.SOURCE)
        event = module.Event.from_dict(self.WIRE)

        assert event.id == UUID("3f2504e0-4f89-11d3-9a0c-0305e82c3301")
        assert event.at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert event.homepage is None
        assert event.active is True

    def test_round_trip(self, load_module):
        module = load_module(self.SOURCE)
        wire = dict(self.WIRE, homepage="https://example.com/docs")
        event = module.Event.from_dict(wire)

        assert isinstance(event.homepage, SplitResult)
        assert event.homepage.netloc == "example.com"
        assert event.to_dict() == wire

    @pytest.mark.parametrize(
        "override, error",
        [
            ({"id": "not-a-uuid"}, InvalidUUIDError),
            ({"timestamp": "15/01/2024"}, InvalidISO8601DateError),
            ({"is_active": 2}, InvalidBoolIntError),
        ],
    )
    def test_transform_errors_propagate(self, load_module, override, error):
        module = load_module(self.SOURCE)

        with pytest.raises(error) as exc_info:
            module.Event.from_dict(dict(self.WIRE, **override))

        assert exc_info.value.value == next(iter(override.values()))

    def test_custom_transformer_from_declaration_module(self, load_module):
        module = load_module(
            """
            from typing import Annotated
            from codable_codegen import CodingTransformer, codable, coding_key

            class UpperTransform:
                def encode(self, value):
                    return value.lower()

                def decode(self, value):
                    return value.upper()

            @codable
            class Code:
                code: Annotated[str, coding_key(transform=CodingTransformer("UpperTransform"))]
            """
        )
        code = module.Code.from_dict({"code": "abc"})

        assert code.code == "ABC"
        assert code.to_dict() == {"code": "abc"}


class TestNestedTransforms:
    """Transformers applied to values stored under dotted keys."""

    SOURCE = """
        from typing import Annotated
        from uuid import UUID
        from codable_codegen import CodingTransformer, codable, coding_key

        @codable
        class Asset:
            id: Annotated[UUID, coding_key("meta.id", transform=CodingTransformer.uuid)]
            owner: Annotated[UUID | None, coding_key("meta.owner", transform=CodingTransformer.uuid)]
        """

    ASSET_ID = "3f2504e0-4f89-11d3-9a0c-0305e82c3301"
    OWNER_ID = "9b2e1d4c-0a7f-4c1e-8d3b-5f6a7b8c9d0e"

    def test_decode_nested_transformed_values(self, load_module):
        module = load_module(self.SOURCE)
        asset = module.Asset.from_dict({"meta": {"id": self.ASSET_ID, "owner": self.OWNER_ID}})

        assert asset.id == UUID(self.ASSET_ID)
        assert asset.owner == UUID(self.OWNER_ID)

    def test_absent_optional_leaf(self, load_module):
        module = load_module(self.SOURCE)
        asset = module.Asset.from_dict({"meta": {"id": self.ASSET_ID}})

        assert asset.owner is None
        assert asset.to_dict() == {"meta": {"id": self.ASSET_ID}}

    def test_round_trip(self, load_module):
        module = load_module(self.SOURCE)
        data = {"meta": {"id": self.ASSET_ID, "owner": self.OWNER_ID}}

        assert module.Asset.from_dict(data).to_dict() == data

    def test_invalid_leaf_value(self, load_module):
        module = load_module(self.SOURCE)

        with pytest.raises(InvalidUUIDError) as exc_info:
            module.Asset.from_dict({"meta": {"id": self.ASSET_ID, "owner": "nobody"}})

        assert exc_info.value.value == "nobody"

    def test_missing_required_leaf(self, load_module):
        module = load_module(self.SOURCE)

        with pytest.raises(KeyNotFoundError) as exc_info:
            module.Asset.from_dict({"meta": {}})

        assert exc_info.value.key == DynamicKey("id")


class TestComposition:
    """Codable values nested inside other codable values."""

    def test_forward_referenced_list_member(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Team:
                name: str
                members: list["Member"] = []

            @codable
            class Member:
                handle: str
            """
        )
        team = module.Team.from_dict({"name": "core", "members": [{"handle": "a"}, {"handle": "b"}]})

        assert [m.handle for m in team.members] == ["a", "b"]
        assert team.to_dict() == {"name": "core", "members": [{"handle": "a"}, {"handle": "b"}]}

    def test_nested_error_path(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Member:
                handle: str

            @codable
            class Team:
                members: list[Member]
            """
        )

        with pytest.raises(KeyNotFoundError) as exc_info:
            module.Team.from_dict({"members": [{"handle": "a"}, {}]})

        assert "(at members[1])" in str(exc_info.value)

    def test_reference_type_chains_to_base(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            @codable
            class Vehicle:
                wheels: int

            @codable
            class Car(Vehicle):
                brand: str
            """
        )
        car = module.Car.from_dict({"wheels": 4, "brand": "Volvo"})

        assert isinstance(car, module.Car)
        assert car.wheels == 4
        assert car.brand == "Volvo"
        assert car.to_dict() == {"wheels": 4, "brand": "Volvo"}


class TestSimpleSumType:
    """Enums coded as their bare case name."""

    def test_encode_case_name(self, load_module):
        module = load_module(DIRECTION_SOURCE)

        assert JSONEncoder().encode(module.Direction.north) == b'"north"'

    def test_decode_case_name(self, load_module):
        module = load_module(DIRECTION_SOURCE)

        assert JSONDecoder().decode(module.Direction, b'"south"') is module.Direction.south

    def test_unknown_case(self, load_module):
        module = load_module(DIRECTION_SOURCE)

        with pytest.raises(UnrecognizedCaseTagError) as exc_info:
            JSONDecoder().decode(module.Direction, b'"west"')

        assert exc_info.value.value == "west"
        assert "Invalid enum case: west" in str(exc_info.value)

    def test_dict_bridging_rejects_scalar(self, load_module):
        module = load_module(DIRECTION_SOURCE)

        with pytest.raises(InvalidMapShapeError):
            module.Direction.north.to_dict()

    def test_raw_value_enum_keeps_its_values(self, load_module):
        module = load_module(
            """
            from enum import Enum
            from codable_codegen import codable

            @codable
            class Level(str, Enum):
                low = "L"
                high = "H"

            @codable
            class Alarm:
                level: Level
            """
        )
        alarm = module.Alarm.from_dict({"level": "H"})

        assert alarm.level is module.Level.high
        assert alarm.to_dict() == {"level": "H"}


class TestPayloadSumType:
    """Case-based sum types coded as single-key objects."""

    @pytest.mark.parametrize(
        "build, wire",
        [
            (
                lambda r: r.success(data="ok", status_code=200),
                {"success": {"data": "ok", "status_code": 200}},
            ),
            (lambda r: r.failure("boom"), {"failure": {"_0": "boom"}}),
            (lambda r: r.empty, {"empty": {}}),
        ],
    )
    def test_round_trip(self, load_module, build, wire):
        module = load_module(RESULT_SOURCE)
        value = build(module.NetworkResponse)

        assert value.to_dict() == wire
        assert module.NetworkResponse.from_dict(wire) == value

    def test_labeled_values_are_attributes(self, load_module):
        module = load_module(RESULT_SOURCE)
        response = module.NetworkResponse.from_dict({"success": {"data": "ok", "status_code": 201}})

        assert response.case == "success"
        assert response.status_code == 201

    @pytest.mark.parametrize(
        "wire, count",
        [
            ({"success": {"data": "ok", "status_code": 200}, "failure": {"_0": "boom"}}, 2),
            ({}, 0),
            ({"unknown": {}}, 0),
        ],
    )
    def test_requires_exactly_one_case_key(self, load_module, wire, count):
        module = load_module(RESULT_SOURCE)

        with pytest.raises(AmbiguousOrMissingVariantError) as exc_info:
            module.NetworkResponse.from_dict(wire)

        assert len(exc_info.value.keys) == count

    def test_missing_parameter(self, load_module):
        module = load_module(RESULT_SOURCE)

        with pytest.raises(KeyNotFoundError) as exc_info:
            module.NetworkResponse.from_dict({"success": {"data": "ok"}})

        assert "(at success)" in str(exc_info.value)


class TestPublicDeclarations:
    def test_generated_members_are_documented(self, load_module):
        module = load_module(
            """
            from codable_codegen import codable

            __all__ = ["Account"]

            @codable
            class Account:
                owner: str
            """
        )

        assert module.Account.from_decoder.__doc__ == "Decode a Account from a keyed source."
        assert module.Account.CodingKeys.__doc__ == "Wire keys of Account."


if __name__ == "__main__":
    pytest.main([__file__])
