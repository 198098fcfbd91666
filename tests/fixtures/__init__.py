"""
Test fixtures package.

Factory functions and reference data for hashtree tests.

Usage:
    from fixtures import make_items, REFERENCE_VECTORS

    def test_something():
        tree = new_tree(make_items(5))
"""

from .common import (
    FOO_BAR,
    SIX_ITEMS,
    NINE_ITEMS,
    REFERENCE_VECTORS,
    make_items,
    make_repeated_items,
    flip_byte,
    CountingProvider,
    TruncatedProvider,
)

__all__ = [
    "FOO_BAR",
    "SIX_ITEMS",
    "NINE_ITEMS",
    "REFERENCE_VECTORS",
    "make_items",
    "make_repeated_items",
    "flip_byte",
    "CountingProvider",
    "TruncatedProvider",
]
