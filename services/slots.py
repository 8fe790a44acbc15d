"""Candidate start times within a day's opening hours."""

from datetime import date
from typing import List, Optional

from core.config import settings
from core.restaurant_config import RestaurantConfig
from core.utils_datetime import TimeLike, format_hhmm, from_minutes, parse_hhmm, to_minutes


def generate_slots(
    open_time: Optional[TimeLike],
    close_time: Optional[TimeLike],
    granularity_minutes: Optional[int] = None,
) -> List[str]:
    """
    Start times from ``open_time`` up to (not including) ``close_time``.

    Returns an empty list if either bound is malformed or the restaurant
    closes at or before it opens.
    """
    step = settings.SLOT_GRANULARITY_MINUTES if granularity_minutes is None else granularity_minutes
    if step <= 0:
        raise ValueError("granularity_minutes must be positive")

    start = parse_hhmm(open_time)
    end = parse_hhmm(close_time)
    if start is None or end is None:
        return []

    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)
    return [
        format_hhmm(from_minutes(current))
        for current in range(start_minutes, end_minutes, step)
    ]


def slots_for_date(
    config: RestaurantConfig,
    day: date,
    granularity_minutes: Optional[int] = None,
) -> List[str]:
    """Slots for ``day`` from the restaurant's weekly schedule; empty when closed."""
    hours = config.hours_for_date(day)
    if hours is None:
        return []
    return generate_slots(hours.open_time, hours.close_time, granularity_minutes)
