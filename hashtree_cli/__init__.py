"""
hashtree CLI

Command-line interface for building Merkle roots and proofs.

Usage:
    python -m hashtree_cli root items.txt
    python -m hashtree_cli prove items.txt --item Bar --out proof.json
    python -m hashtree_cli verify --proof proof.json --item Bar
"""

__version__ = "0.1.0"
