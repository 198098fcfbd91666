"""
Byte and hex helpers shared by the tree, proof and CLI layers.

This module provides:
- Hex encoding/decoding with 0x prefix
- Bytes-like coercion for leaf items and salts
- Power-of-two arithmetic for the array-backed tree layout

Security/Determinism Notes:
- Always hash raw bytes exactly as supplied
- No auto-stripping or re-encoding of item bytes
"""
from __future__ import annotations

from typing import Any

from hashtree.schemas.errors import InvalidInputError


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Args:
        data: Raw bytes

    Returns:
        Hex string with 0x prefix (e.g., "0x1234abcd")

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Args:
        hex_string: Hex string with 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters

    Example:
        >>> from_hex("0xdeadbeef").hex()
        'deadbeef'
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def parse_hex(hex_string: str) -> bytes:
    """Like from_hex(), but the 0x prefix is optional. Used for user input."""
    if not hex_string.startswith("0x"):
        hex_string = "0x" + hex_string
    return from_hex(hex_string)


def hash_concat(left: bytes, right: bytes) -> bytes:
    """Concatenate two child values into a parent preimage."""
    return left + right


def ensure_bytes(value: Any, position: int | None = None) -> bytes:
    """
    Coerce a bytes-like value to immutable bytes.

    bytes, bytearray and memoryview are accepted. Anything else
    (notably str) is rejected rather than silently encoded, so the
    caller decides the encoding of their data.

    Raises:
        InvalidInputError: If value is not bytes-like
    """
    if isinstance(value, bytes):
        return value
    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)
    raise InvalidInputError(
        f"Expected bytes-like value, got {type(value).__name__}",
        position=position,
    )


def next_power_of_two(n: int) -> int:
    """
    Smallest power of two >= n (n >= 1).

    >>> [next_power_of_two(n) for n in (1, 2, 3, 5, 8, 9)]
    [1, 2, 4, 8, 8, 16]
    """
    if n < 1:
        raise ValueError(f"n must be positive, got {n}")
    return 1 << (n - 1).bit_length()


__all__ = [
    "to_hex",
    "from_hex",
    "parse_hex",
    "hash_concat",
    "ensure_bytes",
    "next_power_of_two",
]
