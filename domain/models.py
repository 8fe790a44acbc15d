"""Domain models using Pydantic v2 for table booking."""

from datetime import date, datetime, time
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

from .enums import RejectionKind, ReservationStatus, TableStatus


def _id_to_str(v: Any) -> Any:
    """Numeric ids from storage are used as strings."""
    if isinstance(v, int) and not isinstance(v, bool):
        return str(v)
    return v


EntityId = Annotated[str, BeforeValidator(_id_to_str)]


class Duration(BaseModel):
    """Length of a reservation."""

    hours: int = Field(..., ge=0, description="Whole hours")
    minutes: int = Field(..., ge=0, description="Minutes on top of the hours")

    model_config = ConfigDict(frozen=True)

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes


class Table(BaseModel):
    """A bookable table."""

    id: EntityId = Field(..., min_length=1)
    capacity: int = Field(..., gt=0, description="Maximum guests seatable")
    status: TableStatus = TableStatus.AVAILABLE
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_operational(self) -> bool:
        return self.status == TableStatus.AVAILABLE


class Booking(BaseModel):
    """An existing reservation as seen by the availability logic."""

    id: EntityId
    table_id: Optional[EntityId] = None
    booking_date: date
    booking_time: time
    expected_end_time: Optional[time] = None
    party_size: int = Field(..., ge=1)
    status: ReservationStatus = ReservationStatus.PLANNED
    guest_name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("expected_end_time", mode="before")
    @classmethod
    def take_time_of_timestamp(cls, v: Any) -> Any:
        """Stored end times may be full timestamps; keep the time of day."""
        if isinstance(v, datetime):
            return v.time()
        if isinstance(v, str) and "T" in v:
            return datetime.fromisoformat(v).time()
        return v

    @property
    def is_occupying(self) -> bool:
        return self.status.is_occupying


class ReservationRequest(BaseModel):
    """
    A proposed reservation.

    Every field is optional here so that missing input surfaces as a
    MalformedRequest rejection instead of a parse error.
    """

    restaurant_id: Optional[EntityId] = None
    booking_date: Optional[date] = None
    booking_time: Optional[str] = Field(None, description="Start time, HH:MM")
    party_size: Optional[int] = None
    requested_duration: Optional[Duration] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class BookingCreate(ReservationRequest):
    """Request body for creating a booking."""

    guest_name: Optional[str] = Field(None, max_length=100)


class ReservationDecisionOut(BaseModel):
    """Outcome of validating a reservation request."""

    accepted: bool
    table: Optional[Table] = None
    end_time: Optional[str] = None
    error_kind: Optional[RejectionKind] = None
    message: str = ""
    retryable: bool = False


class BookingOut(BaseModel):
    """A booking created through the API."""

    booking: Booking
    table: Table
    end_time: str


class AvailabilityQuery(BaseModel):
    """Query model for listing bookable start times of a day."""

    date: date
    party_size: int = Field(..., ge=1)
    hours: int = Field(default=1, ge=0, le=23)
    minutes: int = Field(default=30, ge=0)

    model_config = ConfigDict(str_strip_whitespace=True)

    @property
    def duration(self) -> Duration:
        return Duration(hours=self.hours, minutes=self.minutes)


class AvailabilityResponse(BaseModel):
    """Response with available slots."""

    date: date
    slots: List[str]
    total_available: int
