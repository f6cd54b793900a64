"""
Core infrastructure layer for Claim Player Rewards.

Purpose
-------
Single import surface for the infrastructure subsystems:

- Configuration (Config, PersistencePolicy)
- Logging (structured logging, logger factory)
- Infrastructure exceptions

Design Decisions
----------------
- Thin: no logic, no I/O, only re-exports.
- Feature modules still import from their own domains.
"""

from claimrewards.core.config import Config, Environment, PersistencePolicy
from claimrewards.core.exceptions import (
    ClaimNotSavedError,
    ClaimsInfrastructureException,
    ConfigurationError,
    CorruptDataError,
    ErrorSeverity,
    PersistenceError,
)
from claimrewards.core.logging import LogContext, get_logger

__all__ = [
    # Config
    "Config",
    "Environment",
    "PersistencePolicy",
    # Logging
    "get_logger",
    "LogContext",
    # Exceptions
    "ErrorSeverity",
    "ClaimsInfrastructureException",
    "ConfigurationError",
    "PersistenceError",
    "ClaimNotSavedError",
    "CorruptDataError",
]
