"""
Helpers shared by the CLI commands: item loading and provider/salt
resolution from arguments layered over the runtime config.
"""

from __future__ import annotations

import sys
from argparse import Namespace
from pathlib import Path
from typing import Optional

from hashtree.config.runtime import RuntimeConfig
from hashtree.crypto.hashing import parse_hex
from hashtree.crypto.providers import HashProvider, get_provider


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2


def decode_item(text: str, hex_items: bool) -> bytes:
    """Turn one item as written on the command line or in a file into bytes."""
    if hex_items:
        return parse_hex(text.strip())
    return text.encode("utf-8")


def load_items(path: str, hex_items: bool = False) -> list[bytes]:
    """
    Load items, one per line, from a file ('-' reads stdin).

    Line terminators are stripped; empty lines are items too, except a
    single trailing newline at end of file.
    """
    if path == "-":
        text = sys.stdin.read()
    else:
        text = Path(path).read_text(encoding="utf-8")

    lines = text.splitlines()
    return [decode_item(line, hex_items) for line in lines]


def resolve_provider(args: Namespace, config: RuntimeConfig) -> HashProvider:
    """--hash beats the configured provider."""
    name = getattr(args, "hash", None) or config.merkle.hash_algorithm
    return get_provider(name)


def resolve_salt(args: Namespace, config: RuntimeConfig) -> Optional[bytes]:
    """--salt / --salt-hex beat the configured salt."""
    salt_hex = getattr(args, "salt_hex", None)
    if salt_hex is not None:
        return parse_hex(salt_hex)
    salt = getattr(args, "salt", None)
    if salt is not None:
        return salt.encode("utf-8")
    return config.merkle.salt_bytes
