"""
Table assignment: which tables are free for an interval, and which one to use.
"""
from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from core.utils_datetime import DurationLike, TimeLike
from domain.models import Booking, Table
from services.conflicts import has_conflict


def suitable_tables(tables: Iterable[Table], party_size: int) -> List[Table]:
    """Tables in service that seat at least ``party_size`` guests."""
    return [
        table for table in tables
        if table.capacity >= party_size and table.is_operational
    ]


def group_bookings_by_table(bookings: Iterable[Booking], day: date) -> Dict[str, List[Booking]]:
    """Occupying bookings on ``day``, keyed by table id. Unassigned bookings are skipped."""
    grouped: Dict[str, List[Booking]] = defaultdict(list)
    for booking in bookings:
        if booking.table_id is None or booking.booking_date != day:
            continue
        if not booking.is_occupying:
            continue
        grouped[booking.table_id].append(booking)
    return dict(grouped)


def find_available_tables(
    tables: Iterable[Table],
    bookings_by_table: Mapping[str, Sequence[Booking]],
    candidate_start: TimeLike,
    candidate_end: TimeLike,
    party_size: int,
    default_duration: Optional[DurationLike] = None,
) -> List[Table]:
    """
    Suitable tables with no booking overlapping [candidate_start, candidate_end).

    Existing bookings without a stored end time are measured with the
    restaurant's ``default_duration``. Input order is preserved.
    """
    return [
        table for table in suitable_tables(tables, party_size)
        if not has_conflict(
            candidate_start,
            candidate_end,
            bookings_by_table.get(table.id, ()),
            default_duration,
        )
    ]


def assignment_order(tables: Iterable[Table]) -> List[Table]:
    """Tables in preference order: smallest capacity first, then smallest id."""
    return sorted(tables, key=lambda table: (table.capacity, table.id))


def assign_table(available_tables: Iterable[Table]) -> Optional[Table]:
    """
    Pick the table to book from the free ones.

    The smallest table that fits wins, keeping larger tables for larger
    parties; equal capacities go to the smallest id.
    """
    ordered = assignment_order(available_tables)
    return ordered[0] if ordered else None
