"""
Custom exception classes for the engine.

The engine prefers defaulting over raising. These errors are reserved for
corrupted upstream state the caller has to fix.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all engine errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "BACKLOG_INVARIANT_VIOLATED")
        message: Human-readable message
        status_code: HTTP status code a wrapping API should use
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Validation failed (422)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=422,
            details=details
        )


# ===================
# CAPACITY ALLOCATION
# ===================

class InvalidCapacityError(ValidationError):
    """Daily, extra or per-worker capacity is out of range."""

    def __init__(self, field: str, value: int, requirement: str = "must not be negative"):
        super().__init__(
            code="CAPACITY_INVALID",
            message=f"{field} {requirement}",
            details={"field": field, "provided": value}
        )


class BacklogInvariantError(ValidationError):
    """Backlog entry carries impossible quantities (corrupted upstream state)."""

    def __init__(
        self,
        product_id: str,
        reason: str,
        qty_ordered: int,
        qty_fulfilled: int
    ):
        super().__init__(
            code="BACKLOG_INVARIANT_VIOLATED",
            message=f"Backlog entry for product {product_id} is invalid: {reason}",
            details={
                "product_id": product_id,
                "qty_ordered": qty_ordered,
                "qty_fulfilled": qty_fulfilled,
            }
        )


# ===================
# BAND CONFIGURATION
# ===================

class InvalidBandConfigError(ValidationError):
    """Band configuration row violates its tier or daily range."""

    def __init__(self, category_key: str, quality_tier: str, reason: str):
        super().__init__(
            code="BAND_CONFIG_INVALID",
            message=f"Band config {category_key}/{quality_tier} is invalid: {reason}",
            details={"category_key": category_key, "quality_tier": quality_tier}
        )
