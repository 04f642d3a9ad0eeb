"""Table allocation for Advanced mode.

Two strategies, tried in order:

1. Single table: the smallest available table that seats the whole party.
   Ties keep the configured table order.
2. Combination: if no single table fits, the combination rules are tried
   from the fewest joined tables upward. A rule applies when its combined
   capacity seats the party and enough available combinable tables of
   exactly its table capacity exist; the first ``count`` of them (in
   configured order) are joined.

A combination is never used while a single table fits.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from table_engine.core.timeparse import parse_date, parse_time
from table_engine.log import get_logger
from table_engine.models import Booking, CombinationRule, DurationRule, Table
from table_engine.scheduling.duration import resolve_duration
from table_engine.scheduling.overlap import occupied_tables

log = get_logger(__name__)


def find_single_table(party_size: int, available: Sequence[Table]) -> Table | None:
    """Smallest available table with enough seats, or None."""
    suitable = [t for t in available if t.capacity >= party_size]
    if not suitable:
        return None
    # sorted() is stable, so equal capacities keep configured order
    return sorted(suitable, key=lambda t: t.capacity)[0]


def find_table_combination(
    party_size: int,
    available: Sequence[Table],
    combination_rules: Iterable[CombinationRule],
) -> tuple[CombinationRule, list[Table]] | None:
    """First combination rule that can seat the party, with the tables it joins."""
    combinable = [t for t in available if t.is_combinable]
    if not combinable:
        return None

    for rule in sorted(combination_rules, key=lambda r: r.count):
        if rule.new_capacity < party_size:
            continue

        matching = [t for t in combinable if t.capacity == rule.table_capacity]
        if len(matching) >= rule.count:
            return rule, matching[: rule.count]

    return None


def allocate_tables(
    party_size: int,
    date: str,
    time: str,
    bookings: Iterable[Booking],
    tables: Sequence[Table],
    combination_rules: Iterable[CombinationRule],
    duration_rules: Iterable[DurationRule],
    include_pending: bool = False,
) -> list[str] | None:
    """
    Choose tables for a party at a given date and time.

    Args:
        party_size: Number of guests
        date: Booking date (YYYY-MM-DD)
        time: Requested start (HH:MM)
        bookings: Snapshot of existing bookings
        tables: Configured tables, in configured order
        combination_rules: Rules for joining tables
        duration_rules: Duration rules, in configured order
        include_pending: Treat Pending bookings as holding their tables

    Returns:
        Table ids (one for a single table, ``rule.count`` for a combination),
        or None when nothing fits
    """
    date = parse_date(date).isoformat()
    duration_rules = tuple(duration_rules)
    start = parse_time(time)
    end = start + resolve_duration(party_size, duration_rules)

    occupied = occupied_tables(
        date, start, end, bookings, duration_rules, include_pending=include_pending
    )
    available = [t for t in tables if t.id not in occupied]

    table = find_single_table(party_size, available)
    if table is not None:
        log.debug(
            "Allocated single table",
            date=date, time=time, party_size=party_size, table_id=table.id,
        )
        return [table.id]

    combination = find_table_combination(party_size, available, combination_rules)
    if combination is not None:
        rule, joined = combination
        log.debug(
            "Allocated table combination",
            date=date, time=time, party_size=party_size,
            rule_id=rule.id, table_ids=[t.id for t in joined],
        )
        return [t.id for t in joined]

    log.debug(
        "No table or combination available",
        date=date, time=time, party_size=party_size, occupied=sorted(occupied),
    )
    return None
