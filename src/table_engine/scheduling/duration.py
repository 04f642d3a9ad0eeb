"""Occupancy duration policy.

Rules are scanned in configured order and the first matching range wins,
even when a later rule covers the party size more tightly. Restaurant
staff order the rules deliberately; do not sort them here.
"""

from __future__ import annotations

from typing import Iterable

from table_engine.models import DurationRule

DEFAULT_DURATION_MINUTES = 90


def resolve_duration(party_size: int, rules: Iterable[DurationRule]) -> int:
    """Expected table occupancy in minutes for a party.

    Args:
        party_size: Number of guests (adults + children)
        rules: Duration rules in configured order

    Returns:
        Duration of the first matching rule, or the 90 minute default
    """
    for rule in rules:
        if rule.matches(party_size):
            return rule.duration_minutes
    return DEFAULT_DURATION_MINUTES
