"""
Merkle Tree and Proofs
Array-backed Merkle tree construction + proof generation/verification.

This module provides:
- Tree: immutable tree over raw items (root, proofs by item or index)
- Proof: membership proof value with a stable serialized form
- new_tree / new_tree_with / build_tree: construction
- generate_root / generate_proof: stateless variants
- verify_proof / verify_proof_with: verification against a root

Canonical Commitment Rules:
1. Leaf hashing: H(item), or H(item || salt) when salted
2. Parent hashing: H(left || right)
3. Padding: leaf layer padded to a power of two with b""
4. Empty input: EmptyInputError
5. Single leaf: root = leaf

Usage:
    from hashtree.merkle import new_tree, verify_proof

    tree = new_tree([b"Foo", b"Bar", b"Baz"])
    proof = tree.generate_proof(b"Baz")
    assert verify_proof(tree.root(), b"Baz", proof)
"""
from .merkle_tree import (
    PADDING_LEAF,
    Proof,
    Tree,
    build_tree,
    new_tree,
    new_tree_with,
    generate_root,
    generate_proof,
)

from .merkle_proofs import (
    validate_proof_shape,
    verify_proof,
    verify_proof_with,
    MerkleProver,
    MerkleVerifier,
)


__all__ = [
    # Core types
    "PADDING_LEAF",
    "Proof",
    "Tree",
    # Construction
    "build_tree",
    "new_tree",
    "new_tree_with",
    # Stateless
    "generate_root",
    "generate_proof",
    # Verification
    "validate_proof_shape",
    "verify_proof",
    "verify_proof_with",
    # Convenience classes
    "MerkleProver",
    "MerkleVerifier",
]
