"""
Merkle Tree Implementation
Array-backed Merkle tree construction and proof generation.

This module provides:
- Tree: immutable, array-backed complete binary tree over raw items
- Proof: membership proof value (sibling hashes + leaf index)
- Stateless root and proof generation that never materializes a Tree

Layout Rules (Hard Contracts):
1. nodes is 1-indexed breadth-first: nodes[1] is the root, the children
   of nodes[i] are nodes[2i] and nodes[2i+1]. nodes[0] is unused.
2. branch_len is the smallest power of two >= len(items), and
   len(nodes) == 2 * branch_len.
3. Leaf i lives at nodes[branch_len + i]:
   leaf = H(item) or H(item || salt) when salted.
4. Padding: slots past the last leaf hold PADDING_LEAF (b"", the empty
   byte string). A branch over padding is therefore H(left || b"").
5. Branch hashing: nodes[i] = H(nodes[2i] || nodes[2i+1]), never salted.
6. Empty input is an error (there is no root for zero leaves).
7. Single item: root is the leaf hash itself.

Determinism Notes:
- Leaf ordering is defined by the caller; this module never sorts
- The padding rule is shared with proof generation and verification,
  so roots are reproducible across construction paths
"""
from __future__ import annotations

import json
import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hashtree.config.runtime import get_default_config
from hashtree.crypto.hashing import (
    ensure_bytes,
    from_hex,
    hash_concat,
    next_power_of_two,
    to_hex,
)
from hashtree.crypto.providers import DEFAULT_PROVIDER, HashProvider, hash_leaf
from hashtree.schemas.errors import (
    DataNotFoundError,
    EmptyInputError,
    InvalidInputError,
    InvalidProofError,
    LeafIndexError,
)


logger = logging.getLogger(__name__)


# Placeholder stored in every padding slot of the leaf layer.
PADDING_LEAF: bytes = b""

# Canonical JSON separators - no whitespace
_JSON_SEPARATORS: tuple[str, str] = (",", ":")


# =============================================================================
# Proof
# =============================================================================

class Proof(BaseModel):
    """
    A membership proof for a single leaf.

    The proof allows verification that an item is included in a tree
    with a known root, without the tree itself.

    Attributes:
        index: 0-based position of the leaf in the original item list
        hashes: Sibling hashes from the leaf level up to (not including)
            the root, bottom to top

    Every hash is digest_size bytes, except that the first sibling of
    the last leaf in an odd-sized layer is the padding placeholder
    PADDING_LEAF (serialized as "0x").

    Serialized form (stable):
        {"index": 3, "hashes": ["0x...", "0x..."]}
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    index: int = Field(..., ge=0, description="Leaf position in the padded leaf layer")
    hashes: tuple[bytes, ...] = Field(
        default=(),
        description="Sibling hashes, bottom to top",
    )

    @field_validator("index", mode="before")
    @classmethod
    def _reject_bool_index(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("index must be an integer, not a bool")
        return value

    @field_validator("hashes", mode="before")
    @classmethod
    def _coerce_hashes(cls, value: Any) -> tuple[bytes, ...]:
        if isinstance(value, (bytes, bytearray, str)):
            raise ValueError("hashes must be a sequence of byte strings")
        result = []
        for position, item in enumerate(value):
            if not isinstance(item, (bytes, bytearray, memoryview)):
                raise ValueError(
                    f"hashes[{position}] must be bytes, got {type(item).__name__}"
                )
            result.append(bytes(item))
        return tuple(result)

    @property
    def depth(self) -> int:
        """Number of levels between the leaf and the root."""
        return len(self.hashes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stable {index, hashes} form with 0x-hex hashes."""
        return {
            "index": self.index,
            "hashes": [to_hex(h) for h in self.hashes],
        }

    def to_json(self) -> str:
        """Serialize to compact, key-sorted JSON."""
        return json.dumps(self.to_dict(), separators=_JSON_SEPARATORS, sort_keys=True)

    @classmethod
    def from_dict(cls, data: Any) -> "Proof":
        """
        Parse the serialized {index, hashes} form.

        Raises:
            InvalidProofError: If the structure, the index or any hash is malformed
        """
        if not isinstance(data, dict):
            raise InvalidProofError(
                f"Serialized proof must be an object, got {type(data).__name__}"
            )
        unknown = set(data) - {"index", "hashes"}
        if unknown:
            raise InvalidProofError(
                f"Unknown fields in serialized proof: {sorted(unknown)}"
            )
        if "index" not in data or "hashes" not in data:
            raise InvalidProofError("Serialized proof requires 'index' and 'hashes'")

        raw_hashes = data["hashes"]
        if not isinstance(raw_hashes, list):
            raise InvalidProofError("Serialized proof 'hashes' must be a list")

        hashes = []
        for position, raw in enumerate(raw_hashes):
            if not isinstance(raw, str):
                raise InvalidProofError(
                    f"hashes[{position}] must be a hex string, got {type(raw).__name__}"
                )
            try:
                hashes.append(from_hex(raw))
            except ValueError as e:
                raise InvalidProofError(
                    f"hashes[{position}] is not valid hex: {e}",
                    details={"position": position},
                ) from e

        try:
            return cls(index=data["index"], hashes=hashes)
        except ValidationError as e:
            raise InvalidProofError(
                f"Invalid proof: {e.errors()[0]['msg']}",
                details={"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @classmethod
    def from_json(cls, text: str | bytes) -> "Proof":
        """Parse a proof serialized with to_json()."""
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidProofError(f"Serialized proof is not valid JSON: {e}") from e
        return cls.from_dict(data)


# =============================================================================
# Level Hashing Helpers
# =============================================================================

def _chunks(items: Sequence[Any], count: int) -> list[Sequence[Any]]:
    """Split items into at most count contiguous, order-preserving chunks."""
    size = max(1, -(-len(items) // count))
    return [items[i:i + size] for i in range(0, len(items), size)]


def _hash_leaves(
    items: Sequence[bytes],
    provider: HashProvider,
    salt: Optional[bytes],
    executor: Optional[Executor] = None,
    workers: int = 1,
) -> list[bytes]:
    """Hash every item into a leaf. Fans out over executor when given."""
    if executor is None:
        return [hash_leaf(provider, item, salt) for item in items]

    def hash_batch(batch: Sequence[bytes]) -> list[bytes]:
        return [hash_leaf(provider, item, salt) for item in batch]

    leaves: list[bytes] = []
    for batch_result in executor.map(hash_batch, _chunks(items, workers * 4)):
        leaves.extend(batch_result)
    return leaves


def _hash_level(
    level: Sequence[bytes],
    provider: HashProvider,
    executor: Optional[Executor] = None,
    workers: int = 1,
) -> list[bytes]:
    """
    Hash an even-length level into its parent level.

    When an executor is given, pairs are hashed in parallel; the map()
    is fully consumed before returning, which is the barrier between
    levels.
    """
    pairs = range(0, len(level), 2)
    if executor is None:
        return [provider.hash(hash_concat(level[i], level[i + 1])) for i in pairs]

    def hash_pairs(offsets: Sequence[int]) -> list[bytes]:
        return [provider.hash(hash_concat(level[i], level[i + 1])) for i in offsets]

    parents: list[bytes] = []
    for batch_result in executor.map(hash_pairs, _chunks(pairs, workers * 4)):
        parents.extend(batch_result)
    return parents


def _prepare_items(items: Iterable[Any]) -> tuple[bytes, ...]:
    """Snapshot caller items as an immutable tuple of bytes."""
    data = tuple(ensure_bytes(item, position=i) for i, item in enumerate(items))
    if not data:
        raise EmptyInputError()
    return data


def _prepare_salt(salt: Any) -> Optional[bytes]:
    if salt is None:
        return None
    return ensure_bytes(salt)


def _padded_leaf_layer(
    data: Sequence[bytes],
    provider: HashProvider,
    salt: Optional[bytes],
) -> list[bytes]:
    """Leaf layer padded with PADDING_LEAF up to the branch width."""
    branch_len = next_power_of_two(len(data))
    leaves = _hash_leaves(data, provider, salt)
    leaves.extend([PADDING_LEAF] * (branch_len - len(data)))
    return leaves


def _resolve_parallel(
    leaf_count: int,
    parallel: Optional[bool],
    max_workers: Optional[int],
) -> tuple[bool, int]:
    """
    Decide whether to build in parallel.

    The runtime config is only consulted for what the caller left open,
    so parallel=False never touches it.
    """
    if parallel is False:
        return False, 1
    if parallel is None or max_workers is None:
        merkle_config = get_default_config().merkle
        if parallel is None:
            parallel = leaf_count >= merkle_config.parallel_threshold
        if max_workers is None:
            max_workers = merkle_config.max_workers
    if not parallel:
        return False, 1
    if max_workers is None:
        # Same default as ThreadPoolExecutor
        max_workers = min(32, (os.cpu_count() or 1) + 4)
    return parallel, max_workers


# =============================================================================
# Tree
# =============================================================================

class Tree:
    """
    Immutable array-backed Merkle tree.

    The tree keeps its items, so it can look up an item's position and
    produce proofs. Once built nothing about it changes; a single Tree
    may be shared read-only across any number of threads.

    Example:
        >>> from hashtree import Blake2bProvider, verify_proof
        >>> tree = Tree([b"Foo", b"Bar"], Blake2bProvider())
        >>> proof = tree.generate_proof(b"Bar")
        >>> verify_proof(tree.root(), b"Bar", proof)
        True
    """

    __slots__ = ("_data", "_salt", "_provider", "_nodes", "_branch_len")

    def __init__(
        self,
        items: Iterable[bytes],
        provider: HashProvider,
        salt: Optional[bytes] = None,
        *,
        parallel: Optional[bool] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """
        Build a tree from raw items.

        Args:
            items: Ordered, non-empty sequence of bytes-like items
            provider: Hash provider used for leaves and branches
            salt: Optional salt appended to every item before leaf hashing
            parallel: Force (True) or forbid (False) threaded construction;
                None decides from the configured parallel_threshold
            max_workers: Thread pool size when building in parallel

        Raises:
            EmptyInputError: If items is empty
            InvalidInputError: If an item or the salt is not bytes-like,
                or provider is not a HashProvider
        """
        if not isinstance(provider, HashProvider):
            raise InvalidInputError(
                f"provider must implement HashProvider, got {type(provider).__name__}"
            )
        data = _prepare_items(items)
        salt = _prepare_salt(salt)
        branch_len = next_power_of_two(len(data))
        parallel, max_workers = _resolve_parallel(len(data), parallel, max_workers)

        if parallel and len(data) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                nodes = self._build_nodes(
                    data, provider, salt, branch_len, executor, max_workers
                )
        else:
            nodes = self._build_nodes(data, provider, salt, branch_len)

        self._data = data
        self._salt = salt
        self._provider = provider
        self._nodes = tuple(nodes)
        self._branch_len = branch_len

        logger.debug(
            f"Built tree: {len(data)} leaves, branch width {branch_len}, "
            f"provider {provider.name}, "
            f"salted={salt is not None}, parallel={bool(parallel)}"
        )

    @staticmethod
    def _build_nodes(
        data: Sequence[bytes],
        provider: HashProvider,
        salt: Optional[bytes],
        branch_len: int,
        executor: Optional[Executor] = None,
        workers: int = 1,
    ) -> list[bytes]:
        nodes: list[bytes] = [PADDING_LEAF] * (2 * branch_len)

        # Leaves (padding slots keep PADDING_LEAF)
        leaves = _hash_leaves(data, provider, salt, executor, workers)
        nodes[branch_len:branch_len + len(leaves)] = leaves

        # Branches, one level at a time from the bottom
        start = branch_len // 2
        while start >= 1:
            children = nodes[2 * start:4 * start]
            nodes[start:2 * start] = _hash_level(children, provider, executor, workers)
            start //= 2

        return nodes

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def data(self) -> tuple[bytes, ...]:
        """The items the tree was built from, in order."""
        return self._data

    @property
    def salt(self) -> Optional[bytes]:
        return self._salt

    @property
    def provider(self) -> HashProvider:
        return self._provider

    @property
    def nodes(self) -> tuple[bytes, ...]:
        """Breadth-first node array (index 0 unused)."""
        return self._nodes

    @property
    def branch_len(self) -> int:
        """Width of the padded leaf layer."""
        return self._branch_len

    @property
    def depth(self) -> int:
        """Number of sibling hashes in every proof from this tree."""
        return self._branch_len.bit_length() - 1

    def leaves(self) -> tuple[bytes, ...]:
        """Leaf hashes of the real items (padding excluded)."""
        return self._nodes[self._branch_len:self._branch_len + len(self._data)]

    def root(self) -> bytes:
        """Merkle root (hash of the root node)."""
        return self._nodes[1]

    def root_hex(self) -> str:
        """Merkle root as 0x-prefixed hex."""
        return to_hex(self._nodes[1])

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def index_of(self, item: bytes) -> int:
        """
        Position of the first item exactly equal to item.

        Raises:
            DataNotFoundError: If no item matches byte-for-byte
        """
        item = ensure_bytes(item)
        for i, candidate in enumerate(self._data):
            if candidate == item:
                return i
        raise DataNotFoundError(details={"leaf_count": len(self._data)})

    def generate_proof(self, item: bytes) -> Proof:
        """
        Generate the membership proof for an item.

        Duplicate items resolve to the first occurrence.

        Raises:
            DataNotFoundError: If the item is not in the tree
        """
        return self.generate_proof_at(self.index_of(item))

    def generate_proof_at(self, index: int) -> Proof:
        """
        Generate the membership proof for the leaf at index.

        Raises:
            LeafIndexError: If index is outside [0, len(tree))
        """
        if index < 0 or index >= len(self._data):
            raise LeafIndexError(index, len(self._data))

        hashes: list[bytes] = []
        i = self._branch_len + index
        while i > 1:
            # XOR with 1 flips to the sibling
            hashes.append(self._nodes[i ^ 1])
            i //= 2

        logger.debug(f"Generated proof for leaf {index} ({len(hashes)} hashes)")
        return Proof(index=index, hashes=hashes)

    # -------------------------------------------------------------------------
    # Dunder
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, (bytes, bytearray, memoryview)):
            return False
        return bytes(item) in self._data

    def __str__(self) -> str:
        return self._nodes[1].hex()

    def __repr__(self) -> str:
        return (
            f"Tree(leaves={len(self._data)}, branch_len={self._branch_len}, "
            f"root={self.root_hex()})"
        )


# =============================================================================
# Construction API
# =============================================================================

def build_tree(
    items: Iterable[bytes],
    provider: HashProvider,
    salt: Optional[bytes] = None,
    *,
    parallel: Optional[bool] = None,
    max_workers: Optional[int] = None,
) -> Tree:
    """
    Build a tree with an explicit provider and optional salt.

    Raises:
        EmptyInputError: If items is empty
    """
    return Tree(items, provider, salt, parallel=parallel, max_workers=max_workers)


def new_tree(items: Iterable[bytes]) -> Tree:
    """Build a tree with the default provider (BLAKE2b-256) and no salt."""
    return Tree(items, DEFAULT_PROVIDER)


def new_tree_with(
    items: Iterable[bytes],
    provider: HashProvider,
    salt: Optional[bytes] = None,
) -> Tree:
    """Build a tree with an explicit provider and optional salt."""
    return Tree(items, provider, salt)


# =============================================================================
# Stateless API
# =============================================================================

def generate_root(
    items: Iterable[bytes],
    provider: Optional[HashProvider] = None,
    salt: Optional[bytes] = None,
) -> bytes:
    """
    Compute the root without keeping a Tree.

    Only the current level is held in memory. The result equals
    Tree(items, provider, salt).root().

    Raises:
        EmptyInputError: If items is empty
    """
    provider = provider or DEFAULT_PROVIDER
    data = _prepare_items(items)
    level = _padded_leaf_layer(data, provider, _prepare_salt(salt))

    while len(level) > 1:
        level = _hash_level(level, provider)

    return level[0]


def generate_proof(
    items: Iterable[bytes],
    index: int,
    provider: Optional[HashProvider] = None,
    salt: Optional[bytes] = None,
) -> Proof:
    """
    Generate the proof for the item at index without keeping a Tree.

    Walks up level by level, recording the sibling of the current
    position before collapsing the level. The result equals
    Tree(items, provider, salt).generate_proof_at(index).

    Raises:
        EmptyInputError: If items is empty
        LeafIndexError: If index is outside [0, len(items))
    """
    provider = provider or DEFAULT_PROVIDER
    data = _prepare_items(items)
    if index < 0 or index >= len(data):
        raise LeafIndexError(index, len(data))

    level = _padded_leaf_layer(data, provider, _prepare_salt(salt))
    hashes: list[bytes] = []
    current = index

    while len(level) > 1:
        hashes.append(level[current ^ 1])
        level = _hash_level(level, provider)
        current //= 2

    return Proof(index=index, hashes=hashes)


__all__ = [
    "PADDING_LEAF",
    "Proof",
    "Tree",
    "build_tree",
    "new_tree",
    "new_tree_with",
    "generate_root",
    "generate_proof",
]
