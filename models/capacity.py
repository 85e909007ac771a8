"""
Capacity models: backlog entries and daily fulfillment allocation.

Backlog entries are snapshots owned by the caller. The allocator reads
them and returns new copies; persisting the copies is the caller's job.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import Field

from models.base import BaseSchema


class CapacityConfig(BaseSchema):
    """Daily shipping capacity resolved from the warehouse level."""

    units_per_day: int = Field(..., description="Units the warehouse can ship per day")


class BacklogEntry(BaseSchema):
    """One order line and how much of it has shipped.

    Quantities are left unconstrained here; the allocator rejects
    corrupted rows with BacklogInvariantError.
    """

    product_id: str = Field(..., description="Product the line is for")
    order_date: date = Field(..., description="Day the order was placed")
    qty_ordered: int = Field(..., description="Units ordered")
    qty_fulfilled: int = Field(default=0, description="Units already shipped")
    entry_id: Optional[str] = Field(None, description="Order item id, passed through untouched")

    @property
    def qty_remaining(self) -> int:
        return max(0, self.qty_ordered - self.qty_fulfilled)

    @property
    def is_resolved(self) -> bool:
        return self.qty_fulfilled >= self.qty_ordered


class AllocationLine(BaseSchema):
    """Units shipped from one entry today."""

    product_id: str
    order_date: date
    entry_id: Optional[str] = None
    qty: int = Field(..., gt=0)
    from_backlog: bool = Field(..., description="False when the line was ordered today")


class AllocationResult(BaseSchema):
    """Outcome of one day's fulfillment pass for one warehouse."""

    capacity_total: int = Field(..., ge=0, description="Daily plus extra capacity")
    capacity_used: int = Field(default=0, ge=0)
    shipped_from_backlog: int = Field(default=0, ge=0)
    shipped_from_today: int = Field(default=0, ge=0)

    lines: List[AllocationLine] = Field(default_factory=list)
    updated_backlog: List[BacklogEntry] = Field(
        default_factory=list, description="Unresolved entries after today, oldest first"
    )
    backlog_by_product: Dict[str, int] = Field(
        default_factory=dict, description="Units still owed per product"
    )

    @property
    def shipped_total(self) -> int:
        return self.shipped_from_backlog + self.shipped_from_today

    @property
    def shipped_lines(self) -> int:
        return len(self.lines)

    @property
    def backlog_units(self) -> int:
        return sum(self.backlog_by_product.values())

    @property
    def was_idempotent(self) -> bool:
        """True when the pass shipped nothing (re-running it changes nothing)."""
        return not self.lines


class TemporaryStaffQuote(BaseSchema):
    """Priced one-day capacity boost from part-time workers."""

    requested_staff_count: int
    staff_count: int = Field(..., ge=0, description="Requested count clamped to what the backlog needs")
    capacity_per_worker: int = Field(..., gt=0)
    extra_capacity: int = Field(..., ge=0)
    backlog_units_total: int = Field(..., ge=0)
    will_clear: int = Field(..., ge=0)
    salary_multiplier: Decimal = Field(default=Decimal("1"), ge=0)
    cost: Decimal = Field(..., ge=0)
