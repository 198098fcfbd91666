"""
CLI Verify Command

Verify a membership proof offline, against a root only.

Usage:
    hashtree verify --proof proof.json --item Bar [--root 0x...] [--json]

The proof file is either the document written by `hashtree prove`
({"root", "hash_algorithm", "proof"}) or a bare serialized proof
({"index", "hashes"}), in which case --root is required.
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from hashtree.crypto.hashing import parse_hex
from hashtree.crypto.providers import get_provider
from hashtree.merkle.merkle_proofs import MerkleVerifier
from hashtree.schemas.errors import InvalidProofError

from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    decode_item,
    resolve_provider,
    resolve_salt,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    root: str = ""
    hash_algorithm: str = ""
    index: int | None = None
    ok: bool = False
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.proof_path}")
    print(f"root: {summary.root}")
    print(f"hash_algorithm: {summary.hash_algorithm}")
    if summary.index is not None:
        print(f"index: {summary.index}")
    print(f"ok: {str(summary.ok).lower()}")
    for err in summary.errors:
        print(f"  ✗ {err}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify command.

    Returns:
        0 if the proof verifies, 2 if it does not (or is malformed),
        1 on runtime errors
    """
    config = args.runtime_config
    proof_path = Path(args.proof)

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        document = json.loads(proof_path.read_text(encoding="utf-8"))
    except ValueError as e:
        print(f"Error: Proof file is not valid JSON: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if isinstance(document, dict) and "proof" in document:
        serialized = document["proof"]
        document_root = document.get("root")
        document_hash = document.get("hash_algorithm")
    else:
        serialized = document
        document_root = None
        document_hash = None

    root_hex = args.root or document_root
    if not root_hex:
        print("Error: --root is required for a bare proof", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    if args.hash is None and document_hash:
        provider = get_provider(document_hash)
    else:
        provider = resolve_provider(args, config)
    salt = resolve_salt(args, config)

    summary = VerifySummary(
        proof_path=str(proof_path),
        root=root_hex,
        hash_algorithm=provider.name,
    )

    try:
        root = parse_hex(root_hex)
    except ValueError as e:
        print(f"Error: Invalid root: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    try:
        summary.ok = MerkleVerifier.verify_serialized(
            root,
            decode_item(args.item, args.hex),
            serialized,
            provider,
            salt,
        )
        if isinstance(serialized, dict):
            summary.index = serialized.get("index")
        if not summary.ok:
            summary.errors.append("Recomputed root does not match")
    except InvalidProofError as e:
        logger.info(f"Malformed proof: {e.message}")
        summary.errors.append(f"Malformed proof: {e.message}")

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if summary.ok else EXIT_VERIFICATION_FAILED
