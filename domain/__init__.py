"""Domain layer for table booking."""

from .enums import (
    ReservationStatus,
    TableStatus,
    DayOfWeek,
    RejectionKind,
)
from .models import (
    Duration,
    Table,
    Booking,
    ReservationRequest,
    BookingCreate,
    ReservationDecisionOut,
    BookingOut,
    AvailabilityQuery,
    AvailabilityResponse,
)

__all__ = [
    # Enums
    "ReservationStatus",
    "TableStatus",
    "DayOfWeek",
    "RejectionKind",
    # Models
    "Duration",
    "Table",
    "Booking",
    "ReservationRequest",
    "BookingCreate",
    "ReservationDecisionOut",
    "BookingOut",
    "AvailabilityQuery",
    "AvailabilityResponse",
]
