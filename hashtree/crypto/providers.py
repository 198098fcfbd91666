"""
Hash providers.

A hash provider is a stateless capability exposing a single
``hash(data) -> bytes`` operation with a fixed output length. Tree
construction, proof generation and verification only ever talk to this
interface, so algorithms are interchangeable without touching tree logic.

This module provides:
- HashProvider: the runtime-checkable protocol
- Blake2bProvider (default), Keccak256Provider, Sha256Provider,
  Sha3_256Provider
- A name registry used by configuration and the CLI
- hash_leaf(): the single place the salt rule lives

Salt Rule:
    leaf = hash(item)          when no salt is given
    leaf = hash(item || salt)  when a salt is given
    Branch nodes are never salted.
"""
from __future__ import annotations

import hashlib
from typing import Callable, Optional, Protocol, runtime_checkable

from Crypto.Hash import keccak

from hashtree.schemas.errors import UnsupportedHashError


@runtime_checkable
class HashProvider(Protocol):
    """Capability interface for one-way hashing."""

    name: str
    digest_size: int

    def hash(self, data: bytes) -> bytes:
        """Hash raw bytes to a digest of exactly digest_size bytes."""
        ...


class Blake2bProvider:
    """
    BLAKE2b with a 32-byte digest (unkeyed).

    This is the default provider; the reference roots in the test suite
    are computed with it.

    Example:
        >>> Blake2bProvider().hash(b"Foo").hex()[:8]
        '7b506db7'
    """

    name = "blake2b"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=self.digest_size).digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Keccak256Provider:
    """Legacy Keccak-256 (the pre-NIST padding used by Ethereum)."""

    name = "keccak256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        k = keccak.new(digest_bits=256)
        k.update(data)
        return k.digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha256Provider:
    """SHA-256."""

    name = "sha256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha256(data).digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Sha3_256Provider:
    """NIST SHA3-256."""

    name = "sha3_256"
    digest_size = 32

    def hash(self, data: bytes) -> bytes:
        return hashlib.sha3_256(data).digest()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


DEFAULT_PROVIDER: HashProvider = Blake2bProvider()


# =============================================================================
# Registry
# =============================================================================

_REGISTRY: dict[str, Callable[[], HashProvider]] = {
    Blake2bProvider.name: Blake2bProvider,
    Keccak256Provider.name: Keccak256Provider,
    Sha256Provider.name: Sha256Provider,
    Sha3_256Provider.name: Sha3_256Provider,
}


def register_provider(name: str, factory: Callable[[], HashProvider]) -> None:
    """
    Register a provider factory under a name.

    Re-registering an existing name replaces it.
    """
    _REGISTRY[name.lower()] = factory


def available_providers() -> list[str]:
    """Names of all registered providers, sorted."""
    return sorted(_REGISTRY)


def get_provider(name: str) -> HashProvider:
    """
    Look up a provider by name (case-insensitive, '-' treated as '_').

    Raises:
        UnsupportedHashError: If no provider is registered under name
    """
    key = name.strip().lower().replace("-", "_")
    factory = _REGISTRY.get(key)
    if factory is None:
        raise UnsupportedHashError(name, available=available_providers())
    return factory()


def hash_leaf(provider: HashProvider, data: bytes, salt: Optional[bytes] = None) -> bytes:
    """
    Hash a leaf item, appending the salt when one is given.

    An empty salt (b"") is still a salt: hash(item || b"") == hash(item),
    so it yields the same leaf as no salt at all.
    """
    if salt is None:
        return provider.hash(data)
    return provider.hash(data + salt)


__all__ = [
    "HashProvider",
    "Blake2bProvider",
    "Keccak256Provider",
    "Sha256Provider",
    "Sha3_256Provider",
    "DEFAULT_PROVIDER",
    "register_provider",
    "available_providers",
    "get_provider",
    "hash_leaf",
]
