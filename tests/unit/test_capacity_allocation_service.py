"""
Unit tests for Capacity Allocation Service.

Tests:
1. FIFO ordering and the daily capacity ceiling
2. Idempotent re-entry and input immutability
3. Corrupted entries and invalid capacity
4. Stock-limited allocation
5. Temporary staff quote and backlog clearing
"""

import pytest
from datetime import date
from decimal import Decimal

from exceptions import BacklogInvariantError, InvalidCapacityError
from models.capacity import BacklogEntry
from services.capacity_allocation_service import (
    CapacityAllocationService,
    backlog_by_product,
    backlog_units,
    fifo_queue,
    get_capacity_allocation_service,
)
from tests.factories import BacklogEntryFactory


TODAY = date(2025, 3, 15)


def order(product_id: str, day: int, qty: int, fulfilled: int = 0, entry_id=None) -> BacklogEntry:
    return BacklogEntryFactory.create(
        product_id=product_id,
        order_date=date(2025, 3, day),
        qty_ordered=qty,
        qty_fulfilled=fulfilled,
        entry_id=entry_id,
    )


# ===================
# TEST 1: FIFO AND CEILING
# ===================

class TestFifoAllocation:
    """Tests for allocate ordering and capacity ceiling."""

    def test_never_ships_more_than_capacity(self, allocator):
        backlog = [order("A", 1, 10), order("B", 2, 10)]
        result = allocator.allocate(15, backlog, [])

        assert result.shipped_total == 15
        assert result.capacity_used == 15
        assert [line.qty for line in result.lines] == [10, 5]
        assert result.backlog_by_product == {"B": 5}

    def test_oldest_backlog_first(self, allocator):
        newer = order("A", 10, 5, entry_id="newer")
        older = order("B", 2, 5, entry_id="older")
        result = allocator.allocate(5, [newer, older], [])

        assert [line.entry_id for line in result.lines] == ["older"]
        assert [entry.entry_id for entry in result.updated_backlog] == ["newer"]

    def test_same_day_keeps_input_order(self, allocator):
        first = order("A", 3, 4, entry_id="first")
        second = order("B", 3, 4, entry_id="second")
        result = allocator.allocate(6, [first, second], [])

        assert [(line.entry_id, line.qty) for line in result.lines] == [("first", 4), ("second", 2)]

    def test_todays_orders_ship_after_backlog(self, allocator):
        backlog = [order("A", 1, 8)]
        today = [order("B", 15, 8)]
        result = allocator.allocate(10, backlog, today)

        assert result.shipped_from_backlog == 8
        assert result.shipped_from_today == 2
        assert [line.from_backlog for line in result.lines] == [True, False]
        assert result.backlog_by_product == {"B": 6}

    def test_today_orders_fill_spare_capacity(self, allocator):
        result = allocator.allocate(50, [], [order("A", 15, 12)])

        assert result.shipped_from_today == 12
        assert result.updated_backlog == []
        assert result.capacity_used == 12

    def test_extra_capacity_adds_to_daily(self, allocator):
        result = allocator.allocate(10, [order("A", 1, 30)], [], extra_capacity=15)

        assert result.capacity_total == 25
        assert result.shipped_total == 25

    def test_zero_capacity_ships_nothing(self, allocator):
        backlog = [order("A", 1, 10)]
        result = allocator.allocate(0, backlog, [])

        assert result.shipped_total == 0
        assert result.lines == []
        assert result.was_idempotent
        assert result.updated_backlog == backlog

    def test_partial_fill_carries_remaining(self, allocator):
        result = allocator.allocate(7, [order("A", 1, 10, fulfilled=2)], [])

        assert result.lines[0].qty == 7
        remaining = result.updated_backlog[0]
        assert remaining.qty_fulfilled == 9
        assert remaining.qty_remaining == 1

    def test_units_are_conserved(self, allocator):
        backlog = [order("A", 1, 13, fulfilled=3), order("B", 4, 9), order("A", 6, 21)]
        today = [order("C", 15, 17), order("A", 15, 5)]
        owed_before = backlog_units(backlog) + backlog_units(today)

        result = allocator.allocate(33, backlog, today)

        assert result.shipped_total == 33
        assert result.shipped_total + result.backlog_units == owed_before

    def test_fifo_queue_tags_sources(self):
        queue = fifo_queue([order("A", 5, 1)], [order("B", 15, 1)])
        assert [from_backlog for _, from_backlog in queue] == [True, False]


# ===================
# TEST 2: IDEMPOTENCY
# ===================

class TestIdempotency:
    """Tests for resolved entries and input immutability."""

    def test_resolved_entries_are_dropped(self, allocator):
        done = order("A", 1, 10, fulfilled=10)
        result = allocator.allocate(100, [done], [])

        assert result.lines == []
        assert result.updated_backlog == []
        assert result.was_idempotent

    def test_rerun_on_output_changes_nothing_without_capacity(self, allocator):
        backlog = [order("A", 1, 10), order("B", 2, 20)]
        first = allocator.allocate(12, backlog, [])
        second = allocator.allocate(0, first.updated_backlog, [])

        assert second.updated_backlog == first.updated_backlog
        assert second.backlog_by_product == first.backlog_by_product

    def test_inputs_are_not_mutated(self, allocator):
        backlog = [order("A", 1, 10)]
        today = [order("B", 15, 10)]
        allocator.allocate(20, backlog, today)

        assert backlog[0].qty_fulfilled == 0
        assert today[0].qty_fulfilled == 0

    def test_entry_ids_pass_through(self, allocator):
        result = allocator.allocate(5, [order("A", 1, 10, entry_id="item-77")], [])

        assert result.lines[0].entry_id == "item-77"
        assert result.updated_backlog[0].entry_id == "item-77"


# ===================
# TEST 3: VALIDATION
# ===================

class TestValidation:
    """Tests for invalid capacity and corrupted entries."""

    def test_negative_capacity(self, allocator):
        with pytest.raises(InvalidCapacityError) as exc_info:
            allocator.allocate(-1, [], [])
        assert exc_info.value.code == "CAPACITY_INVALID"
        assert exc_info.value.status_code == 422

    def test_negative_extra_capacity(self, allocator):
        with pytest.raises(InvalidCapacityError):
            allocator.allocate(10, [], [], extra_capacity=-5)

    def test_overfulfilled_entry(self, allocator):
        with pytest.raises(BacklogInvariantError) as exc_info:
            allocator.allocate(10, [order("A", 1, 5, fulfilled=6)], [])
        assert exc_info.value.details["product_id"] == "A"
        assert exc_info.value.code == "BACKLOG_INVARIANT_VIOLATED"

    def test_negative_quantities(self, allocator):
        with pytest.raises(BacklogInvariantError):
            allocator.allocate(10, [order("A", 1, -3)], [])
        with pytest.raises(BacklogInvariantError):
            allocator.allocate(10, [], [order("A", 15, 3, fulfilled=-1)])

    def test_error_serializes(self, allocator):
        with pytest.raises(InvalidCapacityError) as exc_info:
            allocator.allocate(-1, [], [])
        payload = exc_info.value.to_dict()
        assert payload["error"]["details"] == {"field": "daily_capacity", "provided": -1}


# ===================
# TEST 4: STOCK LIMIT
# ===================

class TestAvailableStock:
    """Tests for the optional per-product stock limit."""

    def test_stock_limits_product_lines(self, allocator):
        backlog = [order("A", 1, 10), order("B", 2, 10)]
        result = allocator.allocate(20, backlog, [], available_stock={"A": 4, "B": 10})

        assert [(line.product_id, line.qty) for line in result.lines] == [("A", 4), ("B", 10)]
        assert result.backlog_by_product == {"A": 6}

    def test_stock_shared_across_lines(self, allocator):
        backlog = [order("A", 1, 5), order("A", 2, 5)]
        result = allocator.allocate(20, backlog, [], available_stock={"A": 7})

        assert [line.qty for line in result.lines] == [5, 2]

    def test_unknown_product_has_no_stock(self, allocator):
        result = allocator.allocate(20, [order("Z", 1, 5)], [], available_stock={})
        assert result.shipped_total == 0


# ===================
# TEST 5: TEMPORARY STAFF
# ===================

class TestTemporaryStaff:
    """Tests for quote_temporary_staff and clear_backlog_with_staff."""

    def test_quote_clamped_to_backlog(self, allocator):
        """50 units at 20 per worker needs at most 3 workers."""
        backlog = [order("A", 1, 30), order("B", 2, 20)]
        quote = allocator.quote_temporary_staff(10, backlog, salary_multiplier=1.5)

        assert quote.requested_staff_count == 10
        assert quote.staff_count == 3
        assert quote.extra_capacity == 60
        assert quote.backlog_units_total == 50
        assert quote.will_clear == 50
        assert quote.cost == Decimal("270.00")

    def test_quote_below_need(self, allocator):
        quote = allocator.quote_temporary_staff(1, [order("A", 1, 50)])

        assert quote.staff_count == 1
        assert quote.will_clear == 20
        assert quote.cost == Decimal("60.00")

    def test_negative_request_is_zero(self, allocator):
        quote = allocator.quote_temporary_staff(-4, [order("A", 1, 50)])
        assert quote.staff_count == 0
        assert quote.cost == Decimal("0.00")

    def test_empty_backlog_needs_no_staff(self, allocator):
        quote = allocator.quote_temporary_staff(5, [])
        assert quote.staff_count == 0
        assert quote.extra_capacity == 0

    def test_staff_max_applies(self):
        service = CapacityAllocationService(
            capacity_per_worker=20, base_cost_per_worker=60, staff_count_max=2
        )
        quote = service.quote_temporary_staff(10, [order("A", 1, 500)])
        assert quote.staff_count == 2

    def test_cost_rounded_to_cents(self, allocator):
        quote = allocator.quote_temporary_staff(1, [order("A", 1, 20)], salary_multiplier=1.2345)
        # 60 * 1.2345 = 74.07
        assert quote.cost == Decimal("74.07")

    def test_zero_capacity_per_worker_rejected(self):
        service = CapacityAllocationService(capacity_per_worker=0)
        with pytest.raises(InvalidCapacityError) as exc_info:
            service.quote_temporary_staff(1, [order("A", 1, 10)])
        assert exc_info.value.message == "capacity_per_worker must be positive"
        assert exc_info.value.details == {"field": "capacity_per_worker", "provided": 0}

    def test_negative_capacity_message(self, allocator):
        with pytest.raises(InvalidCapacityError) as exc_info:
            allocator.allocate(-2, [], [])
        assert exc_info.value.message == "daily_capacity must not be negative"

    def test_clear_backlog_with_staff(self, allocator):
        backlog = [order("A", 1, 30), order("B", 2, 20)]
        quote = allocator.quote_temporary_staff(3, backlog)
        result = allocator.clear_backlog_with_staff(quote, backlog)

        assert result.capacity_total == 60
        assert result.shipped_from_backlog == 50
        assert result.updated_backlog == []

    def test_boost_is_one_off(self, allocator):
        """The next normal pass only uses daily capacity."""
        backlog = [order("A", 1, 100)]
        quote = allocator.quote_temporary_staff(2, backlog)
        boosted = allocator.clear_backlog_with_staff(quote, backlog)
        next_day = allocator.allocate(10, boosted.updated_backlog, [])

        assert boosted.shipped_total == 40
        assert next_day.capacity_total == 10


class TestHelpers:
    """Tests for module helpers."""

    def test_backlog_by_product_skips_resolved(self):
        entries = [order("A", 1, 5), order("B", 1, 5, fulfilled=5), order("A", 2, 3, fulfilled=1)]
        assert backlog_by_product(entries) == {"A": 7}

    def test_singleton(self):
        assert get_capacity_allocation_service() is get_capacity_allocation_service()
