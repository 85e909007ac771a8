"""
Capacity allocation service: ships a day's orders within warehouse capacity.

Key principle: FIFO by order date. Older backlog ships before newer
backlog, and today's orders ship only after every older line is cleared
or capacity runs out.

Algorithm:
1. VALIDATE capacity and every entry (corrupted rows raise)
2. DROP entries that are already resolved (idempotent re-entry)
3. ORDER backlog by order date (input order breaks ties), then today's orders
4. SHIP entry by entry, partial fills allowed, until capacity is spent
5. RETURN new entry copies for whatever is still owed

The service never mutates its inputs and holds no state between calls.
Callers must run one pass per warehouse per day and persist the
returned backlog themselves.
"""

from decimal import ROUND_HALF_UP, Decimal
from math import ceil
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import structlog

from config import settings
from exceptions.errors import BacklogInvariantError, InvalidCapacityError
from models.capacity import (
    AllocationLine,
    AllocationResult,
    BacklogEntry,
    TemporaryStaffQuote,
)

logger = structlog.get_logger(__name__)

CENTS = Decimal("0.01")


def validate_entries(entries: Sequence[BacklogEntry]) -> None:
    """
    Reject entries that no valid order history can produce.

    Raises:
        BacklogInvariantError: Negative quantities, or more fulfilled than ordered
    """
    for entry in entries:
        if entry.qty_ordered < 0:
            raise BacklogInvariantError(
                entry.product_id, "qty_ordered is negative",
                entry.qty_ordered, entry.qty_fulfilled,
            )
        if entry.qty_fulfilled < 0:
            raise BacklogInvariantError(
                entry.product_id, "qty_fulfilled is negative",
                entry.qty_ordered, entry.qty_fulfilled,
            )
        if entry.qty_fulfilled > entry.qty_ordered:
            raise BacklogInvariantError(
                entry.product_id, "qty_fulfilled exceeds qty_ordered",
                entry.qty_ordered, entry.qty_fulfilled,
            )


def backlog_units(entries: Sequence[BacklogEntry]) -> int:
    """Total units still owed across entries."""
    return sum(entry.qty_remaining for entry in entries)


def backlog_by_product(entries: Sequence[BacklogEntry]) -> Dict[str, int]:
    """Units still owed per product, in first-seen order; resolved products omitted."""
    totals: Dict[str, int] = {}
    for entry in entries:
        if entry.qty_remaining > 0:
            totals[entry.product_id] = totals.get(entry.product_id, 0) + entry.qty_remaining
    return totals


def fifo_queue(
    backlog: Sequence[BacklogEntry],
    todays_orders: Sequence[BacklogEntry]
) -> List[Tuple[BacklogEntry, bool]]:
    """
    Open entries in fulfillment order, tagged with whether they are backlog.

    Backlog is sorted by order date; Python's sort is stable so entries
    sharing a date keep their input order. Today's orders always come last.
    """
    open_backlog = sorted(
        (entry for entry in backlog if not entry.is_resolved),
        key=lambda entry: entry.order_date,
    )
    open_today = sorted(
        (entry for entry in todays_orders if not entry.is_resolved),
        key=lambda entry: entry.order_date,
    )
    return [(entry, True) for entry in open_backlog] + [(entry, False) for entry in open_today]


class CapacityAllocationService:
    """Allocates daily fulfillment capacity across backlog and new orders."""

    def __init__(
        self,
        capacity_per_worker: Optional[int] = None,
        base_cost_per_worker: Optional[float] = None,
        staff_count_max: Optional[int] = None,
    ):
        self.capacity_per_worker = (
            settings.capacity_per_worker if capacity_per_worker is None else capacity_per_worker
        )
        self.base_cost_per_worker = (
            settings.base_cost_per_worker if base_cost_per_worker is None else base_cost_per_worker
        )
        self.staff_count_max = (
            settings.staff_count_max if staff_count_max is None else staff_count_max
        )

    def allocate(
        self,
        daily_capacity: int,
        backlog: Sequence[BacklogEntry],
        todays_orders: Sequence[BacklogEntry],
        extra_capacity: int = 0,
        available_stock: Optional[Mapping[str, int]] = None,
    ) -> AllocationResult:
        """
        Run one day's fulfillment pass.

        Args:
            daily_capacity: Units the warehouse ships per day (0 is valid)
            backlog: Unresolved order lines from earlier days
            todays_orders: Order lines placed today
            extra_capacity: One-day boost from temporary staff
            available_stock: Optional on-hand units per product; when given,
                a line never ships more than its product has left

        Returns:
            AllocationResult with shipped totals, lines and the new backlog

        Raises:
            InvalidCapacityError: Negative daily or extra capacity
            BacklogInvariantError: Corrupted entry in backlog or today's orders
        """
        if daily_capacity < 0:
            raise InvalidCapacityError("daily_capacity", daily_capacity)
        if extra_capacity < 0:
            raise InvalidCapacityError("extra_capacity", extra_capacity)
        validate_entries(backlog)
        validate_entries(todays_orders)

        capacity_total = daily_capacity + extra_capacity
        remaining_capacity = capacity_total
        stock_left = dict(available_stock) if available_stock is not None else None

        logger.info(
            "allocating_capacity",
            capacity_total=capacity_total,
            extra_capacity=extra_capacity,
            backlog_entries=len(backlog),
            todays_entries=len(todays_orders),
        )

        lines: List[AllocationLine] = []
        updated_backlog: List[BacklogEntry] = []
        shipped_from_backlog = 0
        shipped_from_today = 0

        for entry, from_backlog in fifo_queue(backlog, todays_orders):
            ship = min(entry.qty_remaining, remaining_capacity)
            if stock_left is not None:
                ship = min(ship, max(0, stock_left.get(entry.product_id, 0)))

            if ship > 0:
                remaining_capacity -= ship
                if stock_left is not None:
                    stock_left[entry.product_id] = stock_left.get(entry.product_id, 0) - ship
                if from_backlog:
                    shipped_from_backlog += ship
                else:
                    shipped_from_today += ship
                lines.append(AllocationLine(
                    product_id=entry.product_id,
                    order_date=entry.order_date,
                    entry_id=entry.entry_id,
                    qty=ship,
                    from_backlog=from_backlog,
                ))

            updated = entry.model_copy(update={"qty_fulfilled": entry.qty_fulfilled + ship})
            if not updated.is_resolved:
                updated_backlog.append(updated)

        result = AllocationResult(
            capacity_total=capacity_total,
            capacity_used=capacity_total - remaining_capacity,
            shipped_from_backlog=shipped_from_backlog,
            shipped_from_today=shipped_from_today,
            lines=lines,
            updated_backlog=updated_backlog,
            backlog_by_product=backlog_by_product(updated_backlog),
        )

        logger.info(
            "allocation_complete",
            shipped_from_backlog=shipped_from_backlog,
            shipped_from_today=shipped_from_today,
            capacity_used=result.capacity_used,
            backlog_units=result.backlog_units,
        )

        return result

    # ===================
    # TEMPORARY STAFF
    # ===================

    def quote_temporary_staff(
        self,
        staff_count: int,
        backlog: Sequence[BacklogEntry],
        salary_multiplier: float = 1.0,
    ) -> TemporaryStaffQuote:
        """
        Price a one-day capacity boost from part-time workers.

        The staff count is clamped to 0..ceil(backlog units / capacity per worker)
        (and the configured maximum), so a caller cannot buy more clearing
        power than there is backlog to clear.

        Args:
            staff_count: Workers requested
            backlog: Current backlog snapshot
            salary_multiplier: Regional salary multiplier of the warehouse country

        Returns:
            TemporaryStaffQuote with the clamped count, extra capacity and cost
        """
        if self.capacity_per_worker <= 0:
            raise InvalidCapacityError(
                "capacity_per_worker", self.capacity_per_worker, "must be positive"
            )
        validate_entries(backlog)

        units_total = backlog_units(backlog)
        useful_staff = ceil(units_total / self.capacity_per_worker)
        staff = max(0, min(int(staff_count), useful_staff, self.staff_count_max))

        extra_capacity = staff * self.capacity_per_worker
        multiplier = Decimal(str(max(0.0, salary_multiplier)))
        cost = (
            Decimal(staff) * Decimal(str(self.base_cost_per_worker)) * multiplier
        ).quantize(CENTS, rounding=ROUND_HALF_UP)

        quote = TemporaryStaffQuote(
            requested_staff_count=int(staff_count),
            staff_count=staff,
            capacity_per_worker=self.capacity_per_worker,
            extra_capacity=extra_capacity,
            backlog_units_total=units_total,
            will_clear=min(units_total, extra_capacity),
            salary_multiplier=multiplier,
            cost=cost,
        )

        logger.info(
            "temporary_staff_quoted",
            requested=quote.requested_staff_count,
            staff_count=staff,
            will_clear=quote.will_clear,
            cost=str(cost),
        )

        return quote

    def clear_backlog_with_staff(
        self,
        quote: TemporaryStaffQuote,
        backlog: Sequence[BacklogEntry],
    ) -> AllocationResult:
        """
        Spend a quote's extra capacity on the backlog, oldest first.

        The boost applies to this pass only; it is not a standing change
        to the warehouse's daily capacity.
        """
        return self.allocate(
            daily_capacity=0,
            backlog=backlog,
            todays_orders=[],
            extra_capacity=quote.extra_capacity,
        )


# Singleton instance
_capacity_allocation_service: Optional[CapacityAllocationService] = None


def get_capacity_allocation_service() -> CapacityAllocationService:
    """Get or create CapacityAllocationService instance."""
    global _capacity_allocation_service
    if _capacity_allocation_service is None:
        _capacity_allocation_service = CapacityAllocationService()
    return _capacity_allocation_service
