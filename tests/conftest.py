"""Pytest configuration and fixtures for Table Engine tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

# Set test environment
os.environ["TABLE_ENGINE_ENV"] = "test"

from table_engine.models import (  # noqa: E402
    Booking,
    BookingStatus,
    CombinationRule,
    DurationRule,
    OperatingMode,
    RestaurantConfig,
    Table,
)

# Default booking date (a Friday, open for lunch and dinner)
FRIDAY = "2025-03-14"


@pytest.fixture
def duration_rules() -> tuple[DurationRule, ...]:
    """Duration rules from the default restaurant setup."""
    return (
        DurationRule(min_guests=1, max_guests=2, duration_minutes=90),
        DurationRule(min_guests=3, max_guests=4, duration_minutes=120),
        DurationRule(min_guests=5, max_guests=100, duration_minutes=150),
    )


@pytest.fixture
def two_tables() -> tuple[Table, ...]:
    """Two combinable four-seat tables."""
    return (
        Table(id="T1", name="Tisch 1", capacity=4),
        Table(id="T2", name="Tisch 2", capacity=4),
    )


@pytest.fixture
def pair_rule() -> tuple[CombinationRule, ...]:
    """Two four-seat tables join into a six-seat table."""
    return (CombinationRule(count=2, table_capacity=4, new_capacity=6),)


@pytest.fixture
def advanced_config(two_tables, pair_rule, duration_rules) -> RestaurantConfig:
    """Advanced-mode restaurant with two tables, open Tuesday to Sunday."""
    return RestaurantConfig(
        mode=OperatingMode.ADVANCED,
        tables=two_tables,
        combination_rules=pair_rule,
        duration_rules=duration_rules,
    )


@pytest.fixture
def simple_config() -> RestaurantConfig:
    """Simple-mode restaurant with 30 seats per slot."""
    return RestaurantConfig(mode=OperatingMode.SIMPLE, max_guests_per_slot=30)


@pytest.fixture
def make_booking():
    """Factory for booking records."""
    counter = {"n": 0}

    def _make(
        time: str,
        adults: int,
        children: int = 0,
        *,
        date: str = FRIDAY,
        status: BookingStatus = BookingStatus.CONFIRMED,
        tables: tuple[str, ...] | None = None,
        booking_id: str | None = None,
    ) -> Booking:
        counter["n"] += 1
        return Booking(
            id=booking_id or f"b{counter['n']}",
            date=date,
            time=time,
            adults=adults,
            children=children,
            status=status,
            assigned_table_ids=tables,
        )

    return _make


@pytest.fixture
def config_dir(tmp_path):
    """Directory with a minimal default.yaml; returns a writer for overrides."""
    (tmp_path / "default.yaml").write_text(
        "log_level: WARNING\n"
        "restaurant:\n"
        "  name: Test Trattoria\n"
        "  mode: advanced\n"
        "  tables:\n"
        "    - {id: T1, name: Tisch 1, capacity: 4}\n"
        "    - {id: T2, name: Tisch 2, capacity: 4}\n"
        "  combination_rules:\n"
        "    - {count: 2, table_capacity: 4, new_capacity: 6}\n",
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings are cached per config directory; start every test fresh."""
    from table_engine.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
