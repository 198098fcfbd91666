"""
CLI Root Command

Build a tree over the items in a file and print its root.

Usage:
    hashtree root items.txt [--hash keccak256] [--salt S] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace
from dataclasses import asdict, dataclass
from typing import Any

from hashtree.merkle.merkle_tree import build_tree

from hashtree_cli.commands.common import (
    EXIT_SUCCESS,
    load_items,
    resolve_provider,
    resolve_salt,
)


logger = logging.getLogger(__name__)


@dataclass
class RootSummary:
    """Summary of a root computation for CLI output."""
    items_path: str = ""
    hash_algorithm: str = ""
    salted: bool = False
    leaf_count: int = 0
    branch_len: int = 0
    root: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def root_cmd(args: Namespace) -> int:
    """
    Execute the root command.

    Returns:
        Exit code
    """
    config = args.runtime_config
    provider = resolve_provider(args, config)
    salt = resolve_salt(args, config)

    items = load_items(args.items_file, hex_items=args.hex)
    logger.info(f"Building tree over {len(items)} items with {provider.name}")

    tree = build_tree(
        items,
        provider,
        salt,
        parallel=len(items) >= config.merkle.parallel_threshold,
        max_workers=config.merkle.max_workers,
    )

    summary = RootSummary(
        items_path=args.items_file,
        hash_algorithm=provider.name,
        salted=salt is not None,
        leaf_count=len(tree),
        branch_len=tree.branch_len,
        root=tree.root_hex(),
    )

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(summary.root)

    return EXIT_SUCCESS
