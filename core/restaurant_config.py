"""
Restaurant configuration: weekly opening hours and booking policy.

Answers whether a restaurant is open at a given moment.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, Mapping, Optional

import pytz

from core.config import settings
from core.utils_datetime import coerce_duration, format_hhmm, localize, parse_hhmm
from domain.enums import DayOfWeek
from domain.models import Duration


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TimeRange:
    """Opening and closing time for one day."""
    open_time: time
    close_time: time

    def is_open_at(self, check_time: time) -> bool:
        """Check if the restaurant is open at this time."""
        return self.open_time <= check_time < self.close_time

    @classmethod
    def from_strings(cls, open_str: Optional[str], close_str: Optional[str]) -> Optional["TimeRange"]:
        """Build a range from stored "HH:MM[:SS]" strings, or None when closed."""
        if not open_str or not close_str:
            return None
        open_time = parse_hhmm(open_str)
        close_time = parse_hhmm(close_str)
        if open_time is None or close_time is None:
            logger.warning(f"Ignoring malformed opening hours {open_str!r}-{close_str!r}")
            return None
        return cls(open_time=open_time, close_time=close_time)

    def __str__(self) -> str:
        return f"{format_hhmm(self.open_time)}-{format_hhmm(self.close_time)}"


@dataclass
class RestaurantConfig:
    """Per-restaurant settings read by the booking logic."""

    id: str
    name: str = ""
    timezone: str = settings.RESTAURANT_TIMEZONE

    # Weekly schedule; a missing day means closed
    regular_hours: Dict[DayOfWeek, TimeRange] = field(default_factory=dict)

    # Fallback length for bookings without a stored end time
    default_duration: Optional[Duration] = None

    # Booking window
    min_advance_hours: Optional[float] = None
    advance_booking_days: Optional[int] = None

    # Party size limits
    min_party_size: Optional[int] = None
    max_party_size: Optional[int] = None

    @property
    def tz(self) -> pytz.BaseTzInfo:
        """Get the timezone object."""
        return pytz.timezone(self.timezone)

    @property
    def effective_min_advance_hours(self) -> float:
        if self.min_advance_hours is None:
            return settings.DEFAULT_MIN_ADVANCE_HOURS
        return self.min_advance_hours

    @property
    def effective_advance_booking_days(self) -> int:
        if self.advance_booking_days is None:
            return settings.DEFAULT_ADVANCE_BOOKING_DAYS
        return self.advance_booking_days

    @property
    def effective_min_party_size(self) -> int:
        if self.min_party_size is None:
            return settings.DEFAULT_MIN_PARTY_SIZE
        return self.min_party_size

    @property
    def effective_max_party_size(self) -> int:
        if self.max_party_size is None:
            return settings.DEFAULT_MAX_PARTY_SIZE
        return self.max_party_size

    def hours_for_date(self, check_date: date) -> Optional[TimeRange]:
        """Operating hours for a date, or None if closed."""
        return self.regular_hours.get(DayOfWeek.from_weekday(check_date.weekday()))

    def is_open(self, when: datetime) -> bool:
        """
        Whether the restaurant is open at ``when``.

        Naive datetimes are read as restaurant-local time.
        """
        local = localize(when, self.tz) if when.tzinfo is not None else when
        hours = self.hours_for_date(local.date())
        if hours is None:
            return False
        return hours.is_open_at(local.time().replace(second=0, microsecond=0))

    def accepts_party_size(self, party_size: int) -> bool:
        return self.effective_min_party_size <= party_size <= self.effective_max_party_size

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "RestaurantConfig":
        """
        Build a config from a stored restaurant row.

        Expects ``<weekday>_open`` / ``<weekday>_close`` columns and a
        ``reservation_duration`` that is either a mapping or its JSON text.
        """
        regular_hours: Dict[DayOfWeek, TimeRange] = {}
        for day in DayOfWeek:
            time_range = TimeRange.from_strings(
                record.get(f"{day.value}_open"),
                record.get(f"{day.value}_close"),
            )
            if time_range is not None:
                regular_hours[day] = time_range

        raw_duration = record.get("reservation_duration")
        default_duration = coerce_duration(raw_duration)
        if raw_duration is not None and default_duration is None:
            logger.warning(f"Restaurant {record.get('id')}: unusable reservation_duration {raw_duration!r}")

        return cls(
            id=str(record["id"]),
            name=record.get("name") or "",
            timezone=record.get("timezone") or settings.RESTAURANT_TIMEZONE,
            regular_hours=regular_hours,
            default_duration=default_duration,
            min_advance_hours=record.get("min_advance_hours"),
            advance_booking_days=record.get("advance_booking_days"),
            min_party_size=record.get("min_party_size"),
            max_party_size=record.get("max_party_size"),
        )


def is_open(config: RestaurantConfig, when: datetime) -> bool:
    """Operating-hours check; see RestaurantConfig.is_open."""
    return config.is_open(when)
