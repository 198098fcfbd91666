"""
Error taxonomy for the hash tree engine.

Defines both Pydantic models for structured error communication
and Python exceptions for control flow.

None of these errors are retryable: every one of them is caused by the
input the caller supplied, and the engine never retries internally.
A proof that is well-formed but does not match a root is NOT an error;
verification simply returns False.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    INVALID_INPUT = "INVALID_INPUT"

    # Proof Generation Errors
    DATA_NOT_FOUND = "DATA_NOT_FOUND"
    LEAF_INDEX_OUT_OF_RANGE = "LEAF_INDEX_OUT_OF_RANGE"

    # Verification Errors
    INVALID_PROOF = "INVALID_PROOF"

    # Hash Provider Errors
    UNSUPPORTED_HASH = "UNSUPPORTED_HASH"

    # Configuration Errors
    INVALID_CONFIG = "INVALID_CONFIG"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class HashTreeError(BaseModel):
    """
    Structured error model.

    Used for passing errors across boundaries (CLI JSON output, logs)
    without exceptions.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.EMPTY_INPUT],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "HashTreeException":
        """Convert this error model to a raisable exception."""
        return HashTreeException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hash tree errors.

    Carries structured error information and can be converted
    to a HashTreeError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> HashTreeError:
        """Convert this exception to a HashTreeError model."""
        return HashTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputError(HashTreeException):
    """Raised when a tree (or root, or proof) is requested over zero items."""

    def __init__(
        self,
        message: str = "tree must have at least 1 piece of data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
            retryable=False,
        )


class InvalidInputError(HashTreeException):
    """Raised when an item or salt is not a bytes-like value."""

    def __init__(
        self,
        message: str,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_INPUT,
            details=full_details,
            retryable=False,
        )


class DataNotFoundError(HashTreeException):
    """Raised when a proof is requested for an item absent from the tree."""

    def __init__(
        self,
        message: str = "data not found",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.DATA_NOT_FOUND,
            details=details,
            retryable=False,
        )


class LeafIndexError(HashTreeException, IndexError):
    """Raised when a leaf index falls outside [0, leaf_count)."""

    def __init__(
        self,
        index: int,
        leaf_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details["index"] = index
        full_details["leaf_count"] = leaf_count
        super().__init__(
            message=f"Leaf index {index} out of range for {leaf_count} leaves",
            code=ErrorCodes.LEAF_INDEX_OUT_OF_RANGE,
            details=full_details,
            retryable=False,
        )


class InvalidProofError(HashTreeException):
    """
    Raised when a proof is structurally malformed.

    Covers a negative index, an index that cannot be addressed by the
    number of sibling hashes, sibling or root lengths that disagree with
    the hash provider's digest size, and unparseable serialized proofs.
    """

    def __init__(
        self,
        message: str,
        leaf_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if leaf_index is not None:
            full_details["leaf_index"] = leaf_index
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF,
            details=full_details,
            retryable=False,
        )


class UnsupportedHashError(HashTreeException):
    """Raised when a hash provider is requested by an unknown name."""

    def __init__(
        self,
        name: str,
        available: list[str] | None = None,
    ) -> None:
        details: dict[str, Any] = {"name": name}
        if available is not None:
            details["available"] = available
        super().__init__(
            message=f"Unsupported hash algorithm: {name}",
            code=ErrorCodes.UNSUPPORTED_HASH,
            details=details,
            retryable=False,
        )


class ConfigurationError(HashTreeException, ValueError):
    """Raised when a configuration value (env var, YAML key) is invalid."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if setting is not None:
            full_details["setting"] = setting
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_CONFIG,
            details=full_details,
            retryable=False,
        )
