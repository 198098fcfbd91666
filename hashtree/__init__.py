"""
hashtree - array-backed Merkle trees with pluggable hashing.

    from hashtree import new_tree, verify_proof

    tree = new_tree([b"Foo", b"Bar"])
    proof = tree.generate_proof(b"Foo")
    verify_proof(tree.root(), b"Foo", proof)  # True
"""
from hashtree.crypto.providers import (
    HashProvider,
    Blake2bProvider,
    Keccak256Provider,
    Sha256Provider,
    Sha3_256Provider,
    DEFAULT_PROVIDER,
    available_providers,
    get_provider,
    register_provider,
)
from hashtree.merkle import (
    PADDING_LEAF,
    Proof,
    Tree,
    build_tree,
    new_tree,
    new_tree_with,
    generate_root,
    generate_proof,
    verify_proof,
    verify_proof_with,
    MerkleProver,
    MerkleVerifier,
)
from hashtree.schemas.errors import (
    HashTreeException,
    EmptyInputError,
    InvalidInputError,
    DataNotFoundError,
    LeafIndexError,
    InvalidProofError,
    UnsupportedHashError,
    ConfigurationError,
)

__version__ = "0.1.0"

__all__ = [
    "HashProvider",
    "Blake2bProvider",
    "Keccak256Provider",
    "Sha256Provider",
    "Sha3_256Provider",
    "DEFAULT_PROVIDER",
    "available_providers",
    "get_provider",
    "register_provider",
    "PADDING_LEAF",
    "Proof",
    "Tree",
    "build_tree",
    "new_tree",
    "new_tree_with",
    "generate_root",
    "generate_proof",
    "verify_proof",
    "verify_proof_with",
    "MerkleProver",
    "MerkleVerifier",
    "HashTreeException",
    "EmptyInputError",
    "InvalidInputError",
    "DataNotFoundError",
    "LeafIndexError",
    "InvalidProofError",
    "UnsupportedHashError",
    "ConfigurationError",
]
