"""Reservation endpoints: dry-run validation and booking."""

from fastapi import APIRouter, Depends, HTTPException, status

from apps.api.deps import get_booking_service, get_validator
from domain.enums import RejectionKind
from domain.models import BookingCreate, BookingOut, ReservationDecisionOut
from services.booking_service import BookingService
from services.reservation_validation import ReservationValidator


router = APIRouter(prefix="/reservations", tags=["reservations"])


@router.post("/validate", response_model=ReservationDecisionOut)
def validate_reservation(
    request: BookingCreate,
    validator: ReservationValidator = Depends(get_validator),
):
    """
    Check a reservation request without booking anything.

    Rejections are part of the response body, not an HTTP error.
    """
    return validator.validate(request).to_out()


@router.post("", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def create_reservation(
    request: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    """
    Validate the request and book the assigned table.

    Returns:
        BookingOut: Stored booking with its table and end time

    Raises:
        HTTPException: 409 when no table is free, 503 on storage trouble,
            422 for any other rejection
    """
    outcome = service.book(request, guest_name=request.guest_name)
    decision = outcome.decision

    if not outcome.created:
        detail = decision.to_out().model_dump(mode="json")
        if decision.is_infrastructure_failure:
            raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
        if decision.error_kind == RejectionKind.NO_TABLE_AVAILABLE:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

    return BookingOut(booking=outcome.booking, table=decision.table, end_time=decision.end_time)
