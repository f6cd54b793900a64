from claimrewards.modules.shared.exceptions import (
    AllocationNotFoundError,
    ClaimsDomainException,
    ValidationError,
)

__all__ = [
    "AllocationNotFoundError",
    "ClaimsDomainException",
    "ValidationError",
]
