"""Domain enums for table booking."""

from enum import Enum


class ReservationStatus(str, Enum):
    """Booking status enumeration."""

    PLANNED = "planned"
    CANCELLED = "cancelled"
    ARRIVED = "arrived"

    @property
    def is_occupying(self) -> bool:
        """Whether a booking in this status holds its table."""
        return self is not ReservationStatus.CANCELLED


class TableStatus(str, Enum):
    """Operational status of a table."""

    AVAILABLE = "available"
    RESERVED = "reserved"
    OCCUPIED = "occupied"


class DayOfWeek(str, Enum):
    """Days of the week, ordered like ``date.weekday()``."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayOfWeek":
        return list(cls)[weekday]


class RejectionKind(str, Enum):
    """Machine-readable reasons a reservation request is rejected."""

    MALFORMED_REQUEST = "MalformedRequest"
    RESTAURANT_LOOKUP_FAILED = "RestaurantLookupFailed"
    RESTAURANT_CLOSED = "RestaurantClosed"
    NO_TABLE_AVAILABLE = "NoTableAvailable"
    DURATION_UNRESOLVABLE = "DurationUnresolvable"
    PARTY_SIZE_OUT_OF_RANGE = "PartySizeOutOfRange"
    OUTSIDE_BOOKING_WINDOW = "OutsideBookingWindow"
    CROSSES_MIDNIGHT = "CrossesMidnight"
    STORAGE_UNAVAILABLE = "StorageUnavailable"
