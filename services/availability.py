"""
Day-level availability: which start times on a date can still be booked.
"""
import logging
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from core.restaurant_config import RestaurantConfig
from core.utils_datetime import (
    Clock,
    DurationLike,
    coerce_duration,
    compute_end_time,
    crosses_midnight,
    format_hhmm,
    get_current_datetime,
    localize,
    parse_hhmm,
)
from services.exceptions import DurationUnresolvableError
from services.slots import slots_for_date
from services.store import ReservationStore
from services.table_assignment import (
    find_available_tables,
    group_bookings_by_table,
    suitable_tables,
)


logger = logging.getLogger(__name__)


class AvailabilityService:
    """Lists bookable slots for a restaurant and day."""

    def __init__(
        self,
        store: ReservationStore,
        clock: Optional[Clock] = None,
        granularity_minutes: Optional[int] = None,
    ):
        """
        Args:
            store: Storage collaborator
            clock: Returns "now"; defaults to the wall clock in the restaurant timezone
            granularity_minutes: Slot step; defaults to settings
        """
        self.store = store
        self.clock = clock or get_current_datetime
        self.granularity_minutes = granularity_minutes

    def available_slots_for_day(
        self,
        restaurant_id: str,
        day: date,
        party_size: int,
        duration: Optional[DurationLike] = None,
        config: Optional[RestaurantConfig] = None,
        candidate_slots: Optional[Iterable[str]] = None,
    ) -> List[str]:
        """
        Start times on ``day`` with at least one free table for the whole
        ``duration``.

        Tables and bookings are fetched once for the whole day. Slots closer
        to "now" than the restaurant's advance notice are dropped, as are
        slots whose window would run past midnight. Nothing is assigned or
        written.

        Raises:
            RestaurantNotFoundError: unknown restaurant (when ``config`` is not given)
            StorageError: the store failed
            DurationUnresolvableError: no usable duration
        """
        if config is None:
            config = self.store.get_restaurant_config(restaurant_id)

        resolved = coerce_duration(duration) or config.default_duration
        if resolved is None:
            raise DurationUnresolvableError(
                f"No reservation duration for restaurant {restaurant_id}"
            )

        now = localize(self.clock(), config.tz)
        horizon_days = config.effective_advance_booking_days
        if day > now.date() + timedelta(days=horizon_days):
            return []

        if candidate_slots is None:
            candidate_slots = slots_for_date(config, day, self.granularity_minutes)
        candidate_slots = list(candidate_slots)
        if not candidate_slots:
            return []

        tables = suitable_tables(self.store.get_tables(restaurant_id), party_size)
        if not tables:
            return []
        bookings_by_table = group_bookings_by_table(self.store.get_bookings(restaurant_id), day)

        earliest = now + timedelta(hours=config.effective_min_advance_hours)

        available: List[str] = []
        for slot in candidate_slots:
            start = parse_hhmm(slot)
            if start is None:
                continue

            slot_dt = config.tz.localize(datetime.combine(day, start))
            if slot_dt < earliest:
                continue
            if crosses_midnight(start, resolved):
                continue

            end = compute_end_time(start, resolved)
            free = find_available_tables(
                tables,
                bookings_by_table,
                start,
                end,
                party_size,
                config.default_duration,
            )
            if free:
                available.append(format_hhmm(start))

        logger.debug(
            f"Restaurant {restaurant_id} on {day.isoformat()}: "
            f"{len(available)}/{len(candidate_slots)} slots free for party of {party_size}"
        )
        return available
