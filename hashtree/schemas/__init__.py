"""
Shared schemas for the hash tree engine.

Currently the error taxonomy (structured models + exceptions).
"""
from .errors import (
    ErrorCodes,
    HashTreeError,
    HashTreeException,
    EmptyInputError,
    InvalidInputError,
    DataNotFoundError,
    LeafIndexError,
    InvalidProofError,
    UnsupportedHashError,
    ConfigurationError,
)

__all__ = [
    "ErrorCodes",
    "HashTreeError",
    "HashTreeException",
    "EmptyInputError",
    "InvalidInputError",
    "DataNotFoundError",
    "LeafIndexError",
    "InvalidProofError",
    "UnsupportedHashError",
    "ConfigurationError",
]
