"""Availability endpoints: bookable start times for a day."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from apps.api.deps import get_availability_service
from domain.models import AvailabilityQuery, AvailabilityResponse
from services.availability import AvailabilityService
from services.exceptions import (
    DurationUnresolvableError,
    RestaurantNotFoundError,
    StorageError,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/restaurants", tags=["availability"])


@router.get("/{restaurant_id}/availability", response_model=AvailabilityResponse)
def get_availability(
    restaurant_id: str,
    day: date = Query(..., alias="date", description="Day to list, YYYY-MM-DD"),
    party_size: int = Query(..., ge=1, description="Number of guests"),
    hours: int = Query(1, ge=0, le=23, description="Reservation length, hours"),
    minutes: int = Query(30, ge=0, description="Reservation length, minutes"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """
    List start times on ``date`` with a free table for the whole duration.

    Args:
        restaurant_id: Restaurant ID
        day: Date to list
        party_size: Number of guests
        hours: Reservation length, hours part
        minutes: Reservation length, minutes part
        service: Availability service

    Returns:
        AvailabilityResponse: Available slots
    """
    query = AvailabilityQuery(date=day, party_size=party_size, hours=hours, minutes=minutes)
    duration = query.duration
    if duration.total_minutes == 0:
        raise HTTPException(status_code=422, detail="Reservation duration must be longer than zero.")

    try:
        slots = service.available_slots_for_day(
            restaurant_id,
            query.date,
            query.party_size,
            duration,
        )
    except RestaurantNotFoundError:
        raise HTTPException(status_code=404, detail="Restaurant not found")
    except DurationUnresolvableError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except StorageError as e:
        logger.error(f"Availability lookup failed for restaurant {restaurant_id}: {e}")
        raise HTTPException(status_code=503, detail="Availability is temporarily unavailable")

    return AvailabilityResponse(date=query.date, slots=slots, total_available=len(slots))
