"""Data models for the application."""
from .gym import (
    CURRENCY_SYMBOLS,
    Amenity,
    Currency,
    CurrencyCode,
    Gym,
    GymCreate,
    GymPricing,
    Period,
    RateTable,
    Slot,
    Timings,
)
from .booking import (
    BillingPeriod,
    BookedTimeSlot,
    Booking,
    BookingSelection,
    BookingStatus,
    BookingWindow,
    Plan,
    TimeSlotChoice,
)
from .requests import OrderRequest, is_valid_phone
from .responses import (
    ActiveBookingCheck,
    BookingListResponse,
    ConflictCheckResponse,
    GymListResponse,
    NearbyGym,
    NearbyGymsResponse,
    PaymentSessionResponse,
    PaymentStatusResponse,
)

__all__ = [
    "CURRENCY_SYMBOLS",
    "Amenity",
    "Currency",
    "CurrencyCode",
    "Gym",
    "GymCreate",
    "GymPricing",
    "Period",
    "RateTable",
    "Slot",
    "Timings",
    "BillingPeriod",
    "BookedTimeSlot",
    "Booking",
    "BookingSelection",
    "BookingStatus",
    "BookingWindow",
    "Plan",
    "TimeSlotChoice",
    "OrderRequest",
    "is_valid_phone",
    "ActiveBookingCheck",
    "BookingListResponse",
    "ConflictCheckResponse",
    "GymListResponse",
    "NearbyGym",
    "NearbyGymsResponse",
    "PaymentSessionResponse",
    "PaymentStatusResponse",
]
