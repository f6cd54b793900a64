"""
Domain exceptions for Claim Player Rewards.

Purpose
-------
Define the domain-specific exception hierarchy for reward claiming. These
are raised by the rewards module for rule violations (an allocation that
does not exist, a value that breaks the allocation invariant). Cogs
translate them into user-facing embeds.

A player with nothing to claim, or without permission, is not an error: those
are normal `ClaimOutcome` values.

Design Notes
------------
- All domain exceptions inherit from `ClaimsDomainException`.
- They share `ErrorSeverity` and the structured fields (`message`, `details`,
  `severity`, `is_retryable`, `error_code`) with the infrastructure hierarchy.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from claimrewards.core.exceptions import ErrorSeverity


class ClaimsDomainException(Exception):
    """
    Base exception for all domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling
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


class ValidationError(ClaimsDomainException):
    """
    Raised when a value fails domain validation.

    Args:
        field: Name of the field that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    DEFAULT_RETRYABLE = False

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.validation_message = message
        super().__init__(
            f"Validation error for {field}: {message}",
            details={
                "field": field,
                "validation_message": message,
            },
            error_code=f"VALIDATION_{field.upper()}",
        )


class AllocationNotFoundError(ClaimsDomainException):
    """
    Raised when consuming an allocation the store does not hold.

    The store is left untouched. Callers avoid this by looking the player up
    first inside the same locked region.

    Args:
        player_id: Player whose allocation was requested
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = False

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id
        super().__init__(
            f"No pending allocation for player {player_id}",
            details={"player_id": player_id},
            error_code="ALLOCATION_NOT_FOUND",
        )
