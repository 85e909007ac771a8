"""
Custom exceptions module.

Raised only for invariant violations; missing configuration degrades instead.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,

    # Capacity allocation
    InvalidCapacityError,
    BacklogInvariantError,

    # Band configuration
    InvalidBandConfigError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",

    # Capacity allocation
    "InvalidCapacityError",
    "BacklogInvariantError",

    # Band configuration
    "InvalidBandConfigError",
]
