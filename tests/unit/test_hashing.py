"""
Hashing Unit Tests
Tests for hashtree/crypto/hashing.py and hashtree/crypto/providers.py

Tests:
- Provider digests match hashlib / known values
- Provider registry lookups
- Salt rule in hash_leaf
- to_hex/from_hex round trip and validation
- Power-of-two helpers
"""
import hashlib

import pytest

from hashtree.crypto.hashing import (
    ensure_bytes,
    from_hex,
    hash_concat,
    next_power_of_two,
    parse_hex,
    to_hex,
)
from hashtree.crypto.providers import (
    DEFAULT_PROVIDER,
    Blake2bProvider,
    HashProvider,
    Keccak256Provider,
    Sha256Provider,
    Sha3_256Provider,
    available_providers,
    get_provider,
    hash_leaf,
    register_provider,
)
from hashtree.schemas.errors import InvalidInputError, UnsupportedHashError


class TestProviders:
    """Tests for the concrete hash providers."""

    def test_blake2b_matches_hashlib(self):
        """Blake2bProvider is unkeyed BLAKE2b with a 32-byte digest."""
        expected = hashlib.blake2b(b"hello", digest_size=32).digest()
        assert Blake2bProvider().hash(b"hello") == expected

    def test_blake2b_known_value(self):
        """BLAKE2b-256("Foo") is the root of the one-item reference tree."""
        result = Blake2bProvider().hash(b"Foo")
        assert result.hex() == "7b506db718d5cce819ca4d33d2348065a5408cc89aa8b3f7ac70a0c186a2c81f"

    def test_keccak256_empty_known_value(self):
        """Legacy Keccak-256 of empty input (differs from SHA3-256)."""
        result = Keccak256Provider().hash(b"")
        assert result.hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        assert result != hashlib.sha3_256(b"").digest()

    def test_sha256_matches_hashlib(self):
        """Sha256Provider is plain SHA-256."""
        assert Sha256Provider().hash(b"hello") == hashlib.sha256(b"hello").digest()

    def test_sha3_256_matches_hashlib(self):
        """Sha3_256Provider is NIST SHA3-256."""
        assert Sha3_256Provider().hash(b"hello") == hashlib.sha3_256(b"hello").digest()

    @pytest.mark.parametrize("provider_cls", [
        Blake2bProvider, Keccak256Provider, Sha256Provider, Sha3_256Provider,
    ])
    def test_digest_size_is_fixed(self, provider_cls):
        """Every provider returns exactly digest_size bytes."""
        provider = provider_cls()
        for data in (b"", b"x", b"x" * 10_000):
            assert len(provider.hash(data)) == provider.digest_size

    @pytest.mark.parametrize("provider_cls", [
        Blake2bProvider, Keccak256Provider, Sha256Provider, Sha3_256Provider,
    ])
    def test_providers_satisfy_protocol(self, provider_cls):
        """Concrete providers are HashProvider instances."""
        assert isinstance(provider_cls(), HashProvider)

    def test_default_provider_is_blake2b(self):
        """The documented default is BLAKE2b-256."""
        assert DEFAULT_PROVIDER.name == "blake2b"


class TestRegistry:
    """Tests for provider lookup by name."""

    def test_available_providers(self):
        """All built-in providers are registered."""
        names = available_providers()
        for name in ("blake2b", "keccak256", "sha256", "sha3_256"):
            assert name in names

    def test_get_provider_case_insensitive(self):
        """Lookup ignores case and accepts '-' for '_'."""
        assert isinstance(get_provider("KECCAK256"), Keccak256Provider)
        assert isinstance(get_provider("sha3-256"), Sha3_256Provider)

    def test_get_provider_unknown_raises(self):
        """Unknown names raise UnsupportedHashError listing the alternatives."""
        with pytest.raises(UnsupportedHashError) as exc_info:
            get_provider("md5")

        assert exc_info.value.code == "UNSUPPORTED_HASH"
        assert "blake2b" in exc_info.value.details["available"]

    def test_register_provider(self):
        """Custom providers can be registered and looked up."""
        register_provider("custom_sha256", Sha256Provider)
        try:
            assert isinstance(get_provider("custom_sha256"), Sha256Provider)
        finally:
            from hashtree.crypto import providers
            providers._REGISTRY.pop("custom_sha256", None)


class TestHashLeaf:
    """Tests for the leaf salt rule."""

    def test_unsalted_leaf_is_plain_hash(self, blake2b):
        """Without a salt the leaf is H(item)."""
        assert hash_leaf(blake2b, b"Foo") == blake2b.hash(b"Foo")

    def test_salted_leaf_appends_salt(self, blake2b):
        """With a salt the leaf is H(item || salt)."""
        assert hash_leaf(blake2b, b"Foo", b"salt") == blake2b.hash(b"Foosalt")

    def test_different_salts_differ(self, blake2b):
        """Different salts give different leaves."""
        assert hash_leaf(blake2b, b"Foo", b"a") != hash_leaf(blake2b, b"Foo", b"b")


class TestHexHelpers:
    """Tests for to_hex() / from_hex() / parse_hex()."""

    def test_to_hex_prefix(self):
        """to_hex adds the 0x prefix."""
        assert to_hex(bytes.fromhex("deadbeef")) == "0xdeadbeef"

    def test_round_trip(self):
        """from_hex(to_hex(x)) == x."""
        data = hashlib.sha256(b"round trip").digest()
        assert from_hex(to_hex(data)) == data

    def test_from_hex_requires_prefix(self):
        """from_hex rejects strings without 0x."""
        with pytest.raises(ValueError, match="0x"):
            from_hex("deadbeef")

    def test_from_hex_odd_length(self):
        """from_hex rejects odd-length hex."""
        with pytest.raises(ValueError, match="even length"):
            from_hex("0xabc")

    def test_from_hex_invalid_chars(self):
        """from_hex rejects non-hex characters."""
        with pytest.raises(ValueError, match="Invalid hex"):
            from_hex("0xzz")

    def test_parse_hex_prefix_optional(self):
        """parse_hex accepts input with or without 0x."""
        assert parse_hex("deadbeef") == parse_hex("0xdeadbeef") == bytes.fromhex("deadbeef")


class TestByteHelpers:
    """Tests for ensure_bytes(), hash_concat() and next_power_of_two()."""

    def test_ensure_bytes_accepts_bytes_like(self):
        """bytes, bytearray and memoryview are accepted."""
        assert ensure_bytes(b"abc") == b"abc"
        assert ensure_bytes(bytearray(b"abc")) == b"abc"
        assert ensure_bytes(memoryview(b"abc")) == b"abc"
        assert type(ensure_bytes(bytearray(b"abc"))) is bytes

    def test_ensure_bytes_rejects_str(self):
        """Text must be encoded by the caller."""
        with pytest.raises(InvalidInputError) as exc_info:
            ensure_bytes("abc", position=3)

        assert exc_info.value.details["position"] == 3

    def test_hash_concat(self):
        """hash_concat is plain concatenation, left first."""
        assert hash_concat(b"left", b"right") == b"leftright"

    @pytest.mark.parametrize("n,expected", [
        (1, 1), (2, 2), (3, 4), (4, 4), (5, 8), (8, 8), (9, 16), (1000, 1024),
    ])
    def test_next_power_of_two(self, n, expected):
        """Smallest power of two >= n."""
        assert next_power_of_two(n) == expected

    def test_next_power_of_two_rejects_zero(self):
        """There is no branch width for zero items."""
        with pytest.raises(ValueError):
            next_power_of_two(0)

