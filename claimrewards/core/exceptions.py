"""
Infrastructure exceptions for Claim Player Rewards.

Purpose
-------
Define the structured exception hierarchy for infrastructure-level concerns:
configuration errors and persistence failures on the JSON backing files.
Game-rule errors live in `claimrewards.modules.shared.exceptions`.

Design Notes
------------
- All infrastructure exceptions inherit from `ClaimsInfrastructureException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the operation can be retried
  - `error_code`: short, stable identifier for programmatic use
- Persistence exceptions are only raised under the fail_closed policy; the
  default fail_open policy logs and continues.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"  # Expected, not concerning
    INFO = "info"  # Normal operation (e.g., validation failures)
    WARNING = "warning"  # Concerning but handled (e.g., retryable errors)
    ERROR = "error"  # Unexpected errors requiring attention
    CRITICAL = "critical"  # System-level failures requiring immediate action


class ClaimsInfrastructureException(Exception):
    """
    Base exception for all infrastructure-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise ClaimsInfrastructureException(
        ...     "Ledger write failed",
        ...     {"path": "data/ClaimedRewards.json"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class ConfigurationError(ClaimsInfrastructureException):
    """
    Raised when a configuration key is invalid or missing.

    Args:
        config_key: The configuration key that has issues
        message: Description of the configuration problem
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL
    DEFAULT_RETRYABLE = False

    def __init__(self, config_key: str, message: str) -> None:
        self.config_key = config_key
        error_message = f"Configuration error for {config_key}: {message}"
        super().__init__(
            error_message,
            details={
                "config_key": config_key,
                "message": message,
            },
            error_code="CONFIG_ERROR",
        )


class PersistenceError(ClaimsInfrastructureException):
    """
    Raised when writing a backing file fails under the fail_closed policy.

    The in-memory state has already been mutated when this is raised; the
    caller decides whether to keep serving from it.

    Args:
        operation: Description of the persistence operation that failed
        path: File that could not be written
        original_error: The underlying OS error
    """

    DEFAULT_SEVERITY = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE = True

    def __init__(
        self,
        operation: str,
        path: Union[str, Path],
        original_error: Exception,
    ) -> None:
        self.operation = operation
        self.path = str(path)
        self.original_error = original_error
        message = f"Persistence error during {operation} ({self.path}): {original_error}"
        super().__init__(
            message,
            details={
                "operation": operation,
                "path": self.path,
                "error": str(original_error),
                "error_type": type(original_error).__name__,
            },
            error_code="PERSISTENCE_ERROR",
        )


class ClaimNotSavedError(PersistenceError):
    """
    Raised when a claim was granted and recorded in memory but a save failed.

    Only raised under fail_closed. The allocation is already consumed and the
    item already handed out, so `outcome` carries what the player received.

    Args:
        error: The PersistenceError raised by the store
        outcome: The claim outcome that could not be persisted
    """

    def __init__(self, error: PersistenceError, outcome: Any) -> None:
        super().__init__(error.operation, error.path, error.original_error)
        self.outcome = outcome
        self.error_code = "CLAIM_NOT_SAVED"


class CorruptDataError(ClaimsInfrastructureException):
    """
    Raised when a backing file cannot be parsed under the fail_closed policy.

    Args:
        path: File that could not be parsed
        reason: What was wrong with it
    """

    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL
    DEFAULT_RETRYABLE = False

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(
            f"Corrupt data file {self.path}: {reason}",
            details={"path": self.path, "reason": reason},
            error_code="CORRUPT_DATA",
        )
