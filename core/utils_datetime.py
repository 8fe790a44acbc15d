"""
DateTime utilities: "HH:MM" parsing, duration arithmetic and the clock.

Times of day are handled at minute granularity within a single calendar day.
"""
import json
import re
from datetime import datetime, time
from typing import Any, Callable, Mapping, Optional, Union

import pytz
from pydantic import ValidationError

from core.config import settings
from domain.models import Duration


TIMEZONE = pytz.timezone(settings.RESTAURANT_TIMEZONE)

MINUTES_PER_DAY = 24 * 60

_HHMM_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})(?::(\d{2}))?$')

Clock = Callable[[], datetime]
TimeLike = Union[str, time]
DurationLike = Union[Duration, Mapping[str, Any], str]


def get_current_datetime() -> datetime:
    """Get current datetime in the configured restaurant timezone."""
    return datetime.now(TIMEZONE)


def parse_hhmm(value: Optional[TimeLike]) -> Optional[time]:
    """
    Parse "HH:MM" (or "H:MM", "HH:MM:SS") into a time.

    Seconds are accepted and dropped. Returns None for anything malformed.
    """
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        return None

    match = _HHMM_PATTERN.match(value.strip())
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def format_hhmm(value: time) -> str:
    """Format a time as zero-padded "HH:MM"."""
    return f"{value.hour:02d}:{value.minute:02d}"


def to_minutes(value: time) -> int:
    """Minutes since midnight."""
    return value.hour * 60 + value.minute


def from_minutes(total: int) -> time:
    """Inverse of to_minutes, wrapping modulo one day."""
    total %= MINUTES_PER_DAY
    return time(total // 60, total % 60)


def coerce_duration(value: Optional[DurationLike]) -> Optional[Duration]:
    """
    Turn a Duration, a {"hours", "minutes"} mapping or its JSON encoding into
    a Duration. Returns None when either field is missing or invalid.
    """
    if value is None:
        return None
    if isinstance(value, Duration):
        return value
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            return None
    if not isinstance(value, Mapping):
        return None
    if value.get("hours") is None or value.get("minutes") is None:
        return None
    try:
        return Duration.model_validate(value)
    except ValidationError:
        return None


def compute_end_time(start: Optional[TimeLike], duration: Optional[DurationLike]) -> Optional[str]:
    """
    Compute the "HH:MM" end of a reservation starting at ``start``.

    Minutes are added first and their overflow carried into hours; the final
    hour wraps modulo 24. Returns None if the start is missing or malformed or
    the duration is not fully specified.
    """
    start_time = parse_hhmm(start)
    resolved = coerce_duration(duration)
    if start_time is None or resolved is None:
        return None

    end_minutes = start_time.minute + resolved.minutes
    end_hours = start_time.hour + resolved.hours + end_minutes // 60
    end_minutes %= 60
    end_hours %= 24

    return f"{end_hours:02d}:{end_minutes:02d}"


def crosses_midnight(start: Optional[TimeLike], duration: Optional[DurationLike]) -> bool:
    """True when [start, start + duration) would run into the next calendar day."""
    start_time = parse_hhmm(start)
    resolved = coerce_duration(duration)
    if start_time is None or resolved is None:
        return False
    return to_minutes(start_time) + resolved.total_minutes > MINUTES_PER_DAY


def localize(value: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """Make ``value`` aware in ``tz`` (naive values are taken as local to it)."""
    tz = tz or TIMEZONE
    if value.tzinfo is None:
        return tz.localize(value)
    return value.astimezone(tz)
