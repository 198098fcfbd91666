"""
Core cryptographic utilities.

Hash providers (the pluggable hashing capability) and the byte/hex
helpers used around them.
"""
from .hashing import (
    to_hex,
    from_hex,
    parse_hex,
    hash_concat,
    ensure_bytes,
    next_power_of_two,
)
from .providers import (
    HashProvider,
    Blake2bProvider,
    Keccak256Provider,
    Sha256Provider,
    Sha3_256Provider,
    DEFAULT_PROVIDER,
    register_provider,
    available_providers,
    get_provider,
    hash_leaf,
)

__all__ = [
    "to_hex",
    "from_hex",
    "parse_hex",
    "hash_concat",
    "ensure_bytes",
    "next_power_of_two",
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
