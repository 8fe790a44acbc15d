"""
Overlap checks between a candidate interval and a table's bookings.

Intervals are half-open, [start, end): a booking ending at 19:30 does not
conflict with one starting at 19:30.
"""
import logging
from datetime import time
from typing import Iterable, Optional, Tuple

from core.utils_datetime import (
    MINUTES_PER_DAY,
    DurationLike,
    TimeLike,
    compute_end_time,
    parse_hhmm,
    to_minutes,
)
from domain.models import Booking


logger = logging.getLogger(__name__)


def overlaps(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Check if two half-open minute ranges overlap."""
    return start1 < end2 and start2 < end1


def _minute_range(start: time, end: time) -> Tuple[int, int]:
    # An end earlier than the start wrapped past midnight; it runs to end of day.
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)
    if end_minutes < start_minutes:
        end_minutes = MINUTES_PER_DAY
    return start_minutes, end_minutes


def effective_end_time(booking: Booking, default_duration: Optional[DurationLike]) -> Optional[time]:
    """
    End of an existing booking.

    The stored end time wins; otherwise the restaurant's default duration is
    applied to the start. None when neither is usable.
    """
    if booking.expected_end_time is not None:
        return booking.expected_end_time
    return parse_hhmm(compute_end_time(booking.booking_time, default_duration))


def has_conflict(
    candidate_start: TimeLike,
    candidate_end: TimeLike,
    bookings: Iterable[Booking],
    default_duration: Optional[DurationLike] = None,
) -> bool:
    """
    Whether [candidate_start, candidate_end) overlaps any of ``bookings``.

    ``bookings`` must already be the occupying bookings of one table on one
    date. A booking whose end cannot be derived counts as a conflict.
    """
    start = parse_hhmm(candidate_start)
    end = parse_hhmm(candidate_end)
    if start is None or end is None:
        raise ValueError(f"Invalid candidate interval {candidate_start!r}-{candidate_end!r}")

    cand_start, cand_end = _minute_range(start, end)

    for booking in bookings:
        existing_end = effective_end_time(booking, default_duration)
        if existing_end is None:
            logger.debug(f"Booking {booking.id} has no derivable end time; treating as conflict")
            return True

        existing_start, existing_stop = _minute_range(booking.booking_time, existing_end)
        if overlaps(cand_start, cand_end, existing_start, existing_stop):
            return True

    return False
