"""
CLI command modules.
"""

from hashtree_cli.commands import root, prove, verify

__all__ = ["root", "prove", "verify"]
