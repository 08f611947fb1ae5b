"""
Error Hierarchy for the Stream Bucketizer

Design Principles:
- Configuration and restore failures raise immediately; nothing retries
- A missing partitioning value is NOT an error (fallback routing handles it)
- Never swallow errors; carry full context for debugging

Each error type includes:
- Unique error code for programmatic handling
- Human-readable message for logging
- Optional cause chain for root cause analysis
- Timestamp for correlation across process restarts

Usage:
    try:
        bucketizer = SubstringBucketizer.build(config, state)
    except MalformedState as e:
        logger.warning(f"Discarding checkpoint: {e}")
        bucketizer = SubstringBucketizer.build(config)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional
from uuid import uuid4


# =============================================================================
# ERROR CODE ENUMERATION
# =============================================================================
class ErrorCode(Enum):
    """
    Unique error codes for programmatic error handling.

    Codes are grouped by subsystem:
    - 1xxx: Configuration errors
    - 2xxx: State (snapshot) errors
    - 3xxx: Checkpoint storage errors
    - 9xxx: Internal/unknown errors
    """

    # Configuration errors (1xxx)
    CONFIG_MISSING_OPTION = 1001
    CONFIG_INVALID_OPTION = 1002
    CONFIG_INVALID_PROPERTY_PATH = 1003
    CONFIG_UNKNOWN_STRATEGY = 1004

    # State errors (2xxx)
    STATE_MISSING_FIELD = 2001
    STATE_INVALID_FIELD = 2002

    # Checkpoint errors (3xxx)
    CHECKPOINT_IO_FAILED = 3001
    CHECKPOINT_CORRUPTED = 3002

    # Internal errors (9xxx)
    INTERNAL_ERROR = 9001


# =============================================================================
# BASE ERROR CLASS
# =============================================================================
@dataclass
class BucketizerError(Exception):
    """
    Base class for all bucketizer errors.

    Provides common infrastructure for error handling:
    - Unique error ID for log correlation
    - Error code for programmatic handling
    - Cause chain for root cause analysis
    """

    code: ErrorCode
    message: str
    error_id: str = field(default_factory=lambda: str(uuid4()))
    timestamp_nanos: int = field(default_factory=time.time_ns)
    cause: Optional[Exception] = None
    context: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Initialize Exception base class with message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize error to dictionary for structured logging."""
        return {
            "error_id": self.error_id,
            "code": self.code.name,
            "code_value": self.code.value,
            "message": self.message,
            "timestamp_nanos": self.timestamp_nanos,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (id={self.error_id[:8]})"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code.name}, "
            f"message={self.message!r}, "
            f"error_id={self.error_id!r})"
        )


# =============================================================================
# CONFIGURATION ERRORS (BUILD TIME)
# =============================================================================
@dataclass
class ConfigurationError(BucketizerError):
    """
    Raised synchronously while building a bucketizer.

    Fatal: the caller must fix the configuration and rebuild.
    """

    @classmethod
    def missing_option(cls, option: str, strategy: str) -> ConfigurationError:
        """Strategy-mandatory option absent."""
        return cls(
            code=ErrorCode.CONFIG_MISSING_OPTION,
            message=f"Option '{option}' is required by the '{strategy}' strategy",
            context={"option": option, "strategy": strategy},
        )

    @classmethod
    def invalid_option(cls, option: str, value: Any, reason: str) -> ConfigurationError:
        """Option present but unusable."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_OPTION,
            message=f"Invalid value for option '{option}': {reason}",
            context={"option": option, "value": str(value)[:100], "reason": reason},
        )

    @classmethod
    def invalid_property_path(
        cls,
        path: str,
        reason: str,
    ) -> ConfigurationError:
        """Property path expression could not be parsed."""
        return cls(
            code=ErrorCode.CONFIG_INVALID_PROPERTY_PATH,
            message=f"Cannot parse property path {path!r}: {reason}",
            context={"path": path, "reason": reason},
        )

    @classmethod
    def unknown_strategy(cls, name: str, known: list[str]) -> ConfigurationError:
        """No strategy registered under this name."""
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_STRATEGY,
            message=f"Unknown bucketizer strategy '{name}'",
            context={"strategy": name, "known": known},
        )


# =============================================================================
# STATE ERRORS (RESTORE)
# =============================================================================
@dataclass
class MalformedState(BucketizerError):
    """
    Raised by import_state when a snapshot does not match the strategy.

    Fatal for that restore attempt; callers fall back to a cold start
    or abort.
    """

    @classmethod
    def missing_field(cls, field_name: str, strategy: str) -> MalformedState:
        """Required snapshot field absent."""
        return cls(
            code=ErrorCode.STATE_MISSING_FIELD,
            message=f"Snapshot for '{strategy}' lacks required field '{field_name}'",
            context={"field": field_name, "strategy": strategy},
        )

    @classmethod
    def invalid_field(
        cls,
        field_name: str,
        reason: str,
        cause: Optional[Exception] = None,
    ) -> MalformedState:
        """Snapshot field present but of the wrong shape."""
        return cls(
            code=ErrorCode.STATE_INVALID_FIELD,
            message=f"Snapshot field '{field_name}' is malformed: {reason}",
            cause=cause,
            context={"field": field_name, "reason": reason},
        )


# =============================================================================
# CHECKPOINT ERRORS (PERSISTENCE)
# =============================================================================
@dataclass
class CheckpointError(BucketizerError):
    """Errors reading or writing persisted snapshots."""

    @classmethod
    def io_failed(
        cls,
        path: str,
        operation: str,
        cause: Optional[Exception] = None,
    ) -> CheckpointError:
        """Filesystem operation failed."""
        return cls(
            code=ErrorCode.CHECKPOINT_IO_FAILED,
            message=f"Checkpoint {operation} failed for {path}",
            cause=cause,
            context={"path": path, "operation": operation},
        )

    @classmethod
    def corrupted(
        cls,
        path: str,
        description: str,
        cause: Optional[Exception] = None,
    ) -> CheckpointError:
        """Checkpoint bytes could not be decoded."""
        return cls(
            code=ErrorCode.CHECKPOINT_CORRUPTED,
            message=f"Checkpoint at {path} is corrupted: {description}",
            cause=cause,
            context={"path": path},
        )
