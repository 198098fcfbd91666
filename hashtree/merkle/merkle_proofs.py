"""
Merkle Proof Verification
Recompute a root from (leaf, proof) and compare it with a claimed root.

Verification never needs the tree, only its root, so proofs can be
checked against roots recorded at some earlier point in time.

This module provides:
- validate_proof_shape: structural checks (InvalidProofError)
- verify_proof_with: explicit provider/salt; malformed proofs raise
- verify_proof: default provider; malformed proofs are simply rejected
- MerkleProver / MerkleVerifier: class-based convenience wrappers
"""
from __future__ import annotations

import hmac
import logging
from typing import Any, Iterable, Optional

from hashtree.crypto.hashing import ensure_bytes, hash_concat
from hashtree.crypto.providers import DEFAULT_PROVIDER, HashProvider, hash_leaf
from hashtree.merkle.merkle_tree import (
    PADDING_LEAF,
    Proof,
    Tree,
    generate_proof,
    generate_root,
)
from hashtree.schemas.errors import InvalidProofError


logger = logging.getLogger(__name__)


def validate_proof_shape(
    proof: Proof,
    provider: HashProvider,
    root: Optional[bytes] = None,
) -> None:
    """
    Check that a proof can be verified with provider at all.

    A proof of depth d addresses a leaf layer of width 2**d, so its
    index must be below 2**d. Every sibling, and the root when given,
    must have the provider's digest size. The one exception is the
    level-0 sibling of an even (left) leaf: it may be PADDING_LEAF,
    since padding slots only ever sit to the right of the real leaves.

    Raises:
        InvalidProofError: If any check fails
    """
    if not isinstance(proof, Proof):
        raise InvalidProofError(
            f"Expected a Proof, got {type(proof).__name__}"
        )

    index = proof.index
    depth = len(proof.hashes)

    if index < 0:
        raise InvalidProofError(
            f"Leaf index must be non-negative, got {index}",
            leaf_index=index,
        )
    if index >= 1 << depth:
        raise InvalidProofError(
            f"Leaf index {index} cannot be addressed by a proof with {depth} hashes",
            leaf_index=index,
            details={"depth": depth},
        )

    for level, sibling in enumerate(proof.hashes):
        if level == 0 and index % 2 == 0 and sibling == PADDING_LEAF:
            continue
        if len(sibling) != provider.digest_size:
            raise InvalidProofError(
                f"Sibling at level {level} is {len(sibling)} bytes, "
                f"{provider.name} digests are {provider.digest_size}",
                leaf_index=index,
                details={"level": level},
            )

    if root is not None and len(root) != provider.digest_size:
        raise InvalidProofError(
            f"Root is {len(root)} bytes, {provider.name} digests are "
            f"{provider.digest_size}",
            leaf_index=index,
        )


def verify_proof_with(
    root: bytes,
    leaf: bytes,
    proof: Proof,
    provider: HashProvider,
    salt: Optional[bytes] = None,
) -> bool:
    """
    Verify a membership proof with an explicit provider and salt.

    Algorithm:
    1. current = H(leaf) or H(leaf || salt)
    2. For each sibling (bottom-up):
       - If index is even: current = H(current || sibling)
       - If index is odd:  current = H(sibling || current)
       - index = index // 2
    3. Compare current with root

    Args:
        root: Claimed Merkle root
        leaf: Raw item (not its hash)
        proof: Proof as produced by Tree.generate_proof() or generate_proof()
        provider: Hash provider the tree was built with
        salt: Salt the tree was built with, if any

    Returns:
        True if the recomputed root equals root, False otherwise

    Raises:
        InvalidProofError: If the proof is structurally malformed
        InvalidInputError: If root, leaf or salt is not bytes-like
    """
    root = ensure_bytes(root)
    leaf = ensure_bytes(leaf)
    if salt is not None:
        salt = ensure_bytes(salt)
    validate_proof_shape(proof, provider, root)

    current = hash_leaf(provider, leaf, salt)
    index = proof.index

    for sibling in proof.hashes:
        if index % 2 == 0:
            # Current node is left child
            current = provider.hash(hash_concat(current, sibling))
        else:
            # Current node is right child
            current = provider.hash(hash_concat(sibling, current))
        index //= 2

    return hmac.compare_digest(current, root)


def verify_proof(root: bytes, leaf: bytes, proof: Proof) -> bool:
    """
    Verify a membership proof using the default provider and no salt.

    A structurally malformed proof is rejected (False) rather than raised;
    use verify_proof_with() to tell the two apart.
    """
    try:
        return verify_proof_with(root, leaf, proof, DEFAULT_PROVIDER)
    except InvalidProofError as e:
        logger.debug(f"Rejected malformed proof: {e.message}")
        return False


class MerkleProver:
    """
    Convenience class for generating roots and proofs.

    Example:
        >>> proof = MerkleProver.prove([b"a", b"b", b"c"], index=1)
        >>> proof.index
        1
    """

    @staticmethod
    def prove(
        items: Iterable[bytes],
        index: int,
        provider: Optional[HashProvider] = None,
        salt: Optional[bytes] = None,
    ) -> Proof:
        """
        Generate a proof for the item at index without building a Tree.

        Raises:
            EmptyInputError: If items is empty
            LeafIndexError: If index is out of range
        """
        return generate_proof(items, index, provider, salt)

    @staticmethod
    def prove_item(tree: Tree, item: bytes) -> Proof:
        """
        Generate a proof for an item of an existing tree.

        Raises:
            DataNotFoundError: If the item is not in the tree
        """
        return tree.generate_proof(item)

    @staticmethod
    def compute_root(
        items: Iterable[bytes],
        provider: Optional[HashProvider] = None,
        salt: Optional[bytes] = None,
    ) -> bytes:
        """Compute the root without building a Tree."""
        return generate_root(items, provider, salt)


class MerkleVerifier:
    """Convenience class for verifying proofs, including serialized ones."""

    @staticmethod
    def verify(
        root: bytes,
        leaf: bytes,
        proof: Proof,
        provider: Optional[HashProvider] = None,
        salt: Optional[bytes] = None,
    ) -> bool:
        """
        Verify a proof. Malformed proofs raise InvalidProofError.
        """
        return verify_proof_with(root, leaf, proof, provider or DEFAULT_PROVIDER, salt)

    @staticmethod
    def verify_serialized(
        root: bytes,
        leaf: bytes,
        serialized: Any,
        provider: Optional[HashProvider] = None,
        salt: Optional[bytes] = None,
    ) -> bool:
        """
        Verify a proof given in serialized form (JSON text or parsed dict).

        Raises:
            InvalidProofError: If the serialized proof cannot be parsed
                or is structurally malformed
        """
        if isinstance(serialized, (str, bytes)):
            proof = Proof.from_json(serialized)
        else:
            proof = Proof.from_dict(serialized)
        return MerkleVerifier.verify(root, leaf, proof, provider, salt)


__all__ = [
    "validate_proof_shape",
    "verify_proof_with",
    "verify_proof",
    "MerkleProver",
    "MerkleVerifier",
]
