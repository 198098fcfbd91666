"""
CLI Prove Command

Generate a membership proof for one item, by value or by index.

Usage:
    hashtree prove items.txt --item Bar [--out proof.json]
    hashtree prove items.txt --index 1
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from pathlib import Path

from hashtree.merkle.merkle_tree import build_tree

from hashtree_cli.commands.common import (
    EXIT_SUCCESS,
    decode_item,
    load_items,
    resolve_provider,
    resolve_salt,
)


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """
    Execute the prove command.

    The proof is written in its serialized {index, hashes} form, together
    with the root it proves against.

    Returns:
        Exit code
    """
    config = args.runtime_config
    provider = resolve_provider(args, config)
    salt = resolve_salt(args, config)

    items = load_items(args.items_file, hex_items=args.hex)
    tree = build_tree(
        items,
        provider,
        salt,
        parallel=len(items) >= config.merkle.parallel_threshold,
        max_workers=config.merkle.max_workers,
    )

    if args.item is not None:
        proof = tree.generate_proof(decode_item(args.item, args.hex))
    else:
        proof = tree.generate_proof_at(args.index)

    logger.info(f"Generated proof for leaf {proof.index} ({proof.depth} hashes)")

    document = {
        "root": tree.root_hex(),
        "hash_algorithm": provider.name,
        "proof": proof.to_dict(),
    }
    text = json.dumps(document, indent=2)

    if args.out:
        Path(args.out).write_text(text + "\n", encoding="utf-8")
        logger.info(f"Wrote proof to {args.out}")
        if not args.json:
            print(f"proof written to {args.out}")
    else:
        print(text)

    return EXIT_SUCCESS
