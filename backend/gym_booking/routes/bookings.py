"""Booking API endpoints."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ..auth import require_bearer_token
from ..errors import BookingNotFoundError
from ..models import Booking, BookingListResponse, ConflictCheckResponse
from ..services import booking_service
from ..utils.logger import logger

router = APIRouter(
    prefix="/api", tags=["bookings"], dependencies=[Depends(require_bearer_token)]
)


@router.get("/booking-active/{user_id}/{gym_id}", response_model=ConflictCheckResponse)
async def check_active_booking(
    user_id: str = Path(..., description="User identifier"),
    gym_id: str = Path(..., description="Gym identifier"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
) -> ConflictCheckResponse:
    """Check whether the user already holds a live booking at the gym.

    Args:
        user_id: User identifier
        gym_id: Gym identifier
        start_date: Requested start date; checked together with end_date
        end_date: Requested end date

    Returns:
        Conflict flag and the conflicting booking, if any
    """
    if (start_date is None) != (end_date is None):
        raise HTTPException(
            status_code=422, detail="startDate and endDate must be given together"
        )
    if start_date and end_date and end_date < start_date:
        raise HTTPException(status_code=422, detail="endDate must not be before startDate")

    try:
        booking = await booking_service.find_active_booking(
            user_id, gym_id, start_date, end_date
        )
        return ConflictCheckResponse(conflict=booking is not None, booking=booking)

    except Exception as e:
        logger.error(f"Error checking bookings for {user_id} at {gym_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/bookings/{user_id}", response_model=BookingListResponse)
async def list_user_bookings(
    user_id: str = Path(..., description="User identifier")
) -> BookingListResponse:
    """List a user's bookings, newest first."""
    try:
        bookings = await booking_service.list_user_bookings(user_id)
        return BookingListResponse(bookings=bookings, total=len(bookings))

    except Exception as e:
        logger.error(f"Error listing bookings for {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/bookings/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: str = Path(..., description="Booking identifier")
) -> Booking:
    """Cancel a booking so it no longer blocks new ones."""
    try:
        logger.info(f"Cancelling booking: {booking_id}")
        return await booking_service.cancel_booking(booking_id)

    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")
    except Exception as e:
        logger.error(f"Error cancelling booking {booking_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))
