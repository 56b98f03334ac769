"""Tests for native-key / sequence-id resolution."""

import pytest
from bson import ObjectId

from src.catalog.core.exceptions import InvalidIdentifier, UnknownCollection
from src.catalog.services.identifier_resolver import (
    IdentifierResolver,
    is_native_key,
    parse_sequence_id,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def resolver(database, registry) -> IdentifierResolver:  # type: ignore[no-untyped-def]
    return IdentifierResolver(database, registry)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (5, 5),
        ("5", 5),
        (" 42 ", 42),
        ("-3", -3),
        ("5.0", None),
        ("abc", None),
        ("", None),
        (True, None),
        (None, None),
        (4.0, None),
        ("\u0661\u0662", None),
        ("\uff11\uff12", None),
        (str(2**63 - 1), 2**63 - 1),
        (str(-(2**63)), -(2**63)),
        (str(2**63), None),
        ("99999999999999999999", None),
        (2**63, None),
    ],
)
def test_parse_sequence_id(raw, expected) -> None:  # type: ignore[no-untyped-def]
    assert parse_sequence_id(raw) == expected


def test_is_native_key() -> None:
    assert is_native_key("65a1f0c2e4b0a1b2c3d4e5f6")
    assert is_native_key("123456789012345678901234")
    assert not is_native_key("65a1f0c2e4b0a1b2c3d4e5f")
    assert not is_native_key("zza1f0c2e4b0a1b2c3d4e5f6")


class TestSelector:
    def test_native_key(self, resolver) -> None:  # type: ignore[no-untyped-def]
        raw = "65a1f0c2e4b0a1b2c3d4e5f6"
        assert resolver.selector("supplier", raw) == {"_id": ObjectId(raw)}

    def test_sequence_id(self, resolver) -> None:  # type: ignore[no-untyped-def]
        assert resolver.selector("supplier", "12") == {"Supplier_id": 12}

    def test_24_digit_string_is_a_native_key(self, resolver) -> None:  # type: ignore[no-untyped-def]
        raw = "123456789012345678901234"
        assert resolver.selector("supplier", raw) == {"_id": ObjectId(raw)}

    def test_garbage_is_invalid(self, resolver) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(InvalidIdentifier) as exc_info:
            resolver.selector("supplier", "abc")
        assert exc_info.value.status_code == 400

    @pytest.mark.parametrize("raw", ["99999999999999999999", "\u0661\u0662"])
    def test_out_of_range_or_non_ascii_is_invalid(self, resolver, raw) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(InvalidIdentifier):
            resolver.selector("supplier", raw)

    def test_unknown_collection(self, resolver) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(UnknownCollection):
            resolver.selector("nope", "1")


class TestResolve:
    async def test_by_sequence_id(self, resolver, seed) -> None:  # type: ignore[no-untyped-def]
        supplier = await seed("supplier", Name="Acme")
        found = await resolver.resolve("supplier", str(supplier["Supplier_id"]))
        assert found["Name"] == "Acme"

    async def test_by_native_key(self, resolver, seed) -> None:  # type: ignore[no-untyped-def]
        supplier = await seed("supplier", Name="Acme")
        found = await resolver.resolve("supplier", str(supplier["_id"]))
        assert found["Supplier_id"] == supplier["Supplier_id"]

    async def test_native_key_wins_over_matching_sequence_id(self, resolver, seed) -> None:  # type: ignore[no-untyped-def]
        supplier = await seed("supplier", Name="Acme")
        assert supplier["Supplier_id"] == 1
        # 24 digits that would parse to sequence id 1
        assert await resolver.resolve("supplier", "000000000000000000000001") is None

    async def test_missing_returns_none(self, resolver) -> None:  # type: ignore[no-untyped-def]
        assert await resolver.resolve("supplier", "999999") is None
        assert await resolver.resolve("supplier", "65a1f0c2e4b0a1b2c3d4e5f6") is None

    async def test_malformed_raises_before_lookup(self, resolver) -> None:  # type: ignore[no-untyped-def]
        with pytest.raises(InvalidIdentifier):
            await resolver.resolve("supplier", "12abc")
