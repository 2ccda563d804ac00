"""Response models for API endpoints."""
from typing import List, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel
from .booking import Booking, BookingWindow
from .gym import Gym


class GymListResponse(CamelModel):
    """Response model for listing gyms."""

    gyms: List[Gym]
    total: int = Field(..., description="Total number of gyms")


class NearbyGym(CamelModel):
    gym: Gym
    distance_km: float


class NearbyGymsResponse(CamelModel):
    """Response model for location queries."""

    results: List[NearbyGym]
    total: int


class ConflictCheckResponse(CamelModel):
    """Response model for the active booking check."""

    conflict: bool
    booking: Optional[Booking] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "conflict": True,
                "booking": {"startDate": "2024-01-01", "endDate": "2024-01-07"},
            }
        }
    )


class BookingListResponse(CamelModel):
    bookings: List[Booking]
    total: int


class PaymentSessionResponse(CamelModel):
    """Response model for order creation."""

    payment_session_id: str = Field(..., description="Gateway payment session identifier")
    order_id: str
    booking_id: str


class PaymentStatusResponse(CamelModel):
    """Response model for payment verification."""

    order_id: str
    order_status: str
    booking: Booking


class ActiveBookingCheck(CamelModel):
    """Client-side view of the active booking check; only the dates are needed."""

    conflict: bool = False
    booking: Optional[BookingWindow] = None
