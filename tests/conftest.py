"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add repository root to Python path
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

import pytest
from datetime import date

from config import configure_logging
from models.performance import BandConfig
from services.band_scoring_service import BandRuleBook
from services.capacity_allocation_service import CapacityAllocationService


@pytest.fixture(scope="session", autouse=True)
def structured_logging():
    """Configure structlog once so services log the way a host app would."""
    configure_logging()


# ===================
# FIXTURES
# ===================

@pytest.fixture
def today() -> date:
    """Simulated current day used across tests."""
    return date(2025, 3, 15)


@pytest.fixture
def standard_band() -> BandConfig:
    """Band from the worked example: 10..30 per day, expected 18."""
    return BandConfig(
        category_key="TOPS",
        quality_tier="STANDARD",
        tier_min=1,
        tier_max=5,
        min_daily=10,
        max_daily=30,
        expected_mode=18,
    )


@pytest.fixture
def rule_book(standard_band) -> BandRuleBook:
    """Rule book with tiered premium bands and the standard band."""
    return BandRuleBook([
        BandConfig(
            category_key="TOPS", quality_tier="PREMIUM",
            tier_min=1, tier_max=2, min_daily=2, max_daily=6,
        ),
        BandConfig(
            category_key="TOPS", quality_tier="PREMIUM",
            tier_min=3, tier_max=5, min_daily=5, max_daily=15,
        ),
        standard_band,
    ])


@pytest.fixture
def allocator() -> CapacityAllocationService:
    """Allocator with the default part-time staff economics."""
    return CapacityAllocationService(
        capacity_per_worker=20,
        base_cost_per_worker=60,
        staff_count_max=200,
    )
