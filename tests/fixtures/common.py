"""
Common test fixtures shared by all modules.

Provides factory functions for item sequences and the reference roots
the tree must reproduce. Every factory builds fresh data per call;
nothing here is shared mutable state.
"""

import hashlib
from typing import Optional

from hashtree.crypto.providers import Blake2bProvider, HashProvider, Keccak256Provider


FOO_BAR = (b"Foo", b"Bar")

SIX_ITEMS = (b"Foo", b"Bar", b"Baz", b"Qux", b"Quux", b"Quuz")

NINE_ITEMS = SIX_ITEMS + (b"FooBar", b"FooBaz", b"BarBaz")


# (provider factory, items, salt, expected root hex)
REFERENCE_VECTORS = [
    (
        Blake2bProvider,
        FOO_BAR,
        None,
        "e9e0083e456539e9f6336164cd98700e668178f98af147ef750eb90afcf2f637",
    ),
    (
        Blake2bProvider,
        FOO_BAR,
        b"salt",
        "420ba02ad7ce2077a2f82f4ac3752eeaf1285779a210391e9378337af0ed3539",
    ),
    (
        Keccak256Provider,
        FOO_BAR,
        None,
        "fb6c3a47aacb11c3f7ee3717cfbd43e4ad08da66d2cb049358db7e056baaaeed",
    ),
    (
        Keccak256Provider,
        FOO_BAR,
        b"salt",
        "5d3112070164037e104b3cc42ef5242e35616fdc6d2b34e3605154a3e5f9d594",
    ),
    (
        Blake2bProvider,
        (b"Foo",),
        None,
        "7b506db718d5cce819ca4d33d2348065a5408cc89aa8b3f7ac70a0c186a2c81f",
    ),
    (
        Blake2bProvider,
        (b"Foo", b"Bar", b"Baz"),
        None,
        "635ca493fe20a7b8485d2e4c650e33444664b4ce0773c36d2a9da79176f6889c",
    ),
    (
        Blake2bProvider,
        SIX_ITEMS,
        None,
        "4e6bdbaa326a760c45b5805898d7e9e788d65ffe7e27e690cd6999f1a5d64400",
    ),
    (
        Blake2bProvider,
        NINE_ITEMS,
        None,
        "e15d86728d4a31c5880bc0d2d184637bb6672a72313af378141ea789f4b3929a",
    ),
]


def make_items(count: int, prefix: str = "item") -> list[bytes]:
    """Build count distinct items: b"item0", b"item1", ..."""
    return [f"{prefix}{i}".encode() for i in range(count)]


def make_repeated_items(count: int, value: bytes = b"foo") -> list[bytes]:
    """Build count identical items (the shape of a large benchmark dataset)."""
    return [value] * count


def flip_byte(data: bytes, position: int = 0) -> bytes:
    """Return data with every bit of one byte inverted."""
    buf = bytearray(data)
    buf[position] ^= 0xFF
    return bytes(buf)


class CountingProvider:
    """Provider wrapper that counts hash calls (thread-unsafe counter, tests only)."""

    def __init__(self, inner: Optional[HashProvider] = None):
        self.inner = inner or Blake2bProvider()
        self.name = f"counting-{self.inner.name}"
        self.digest_size = self.inner.digest_size
        self.calls = 0

    def hash(self, data: bytes) -> bytes:
        self.calls += 1
        return self.inner.hash(data)


class TruncatedProvider:
    """A provider with a 16-byte digest, to exercise provider mismatches."""

    name = "blake2b-128"
    digest_size = 16

    def hash(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=16).digest()
