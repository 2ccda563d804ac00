"""Error types shared by services, routes and the booking flow."""
from typing import Any, Optional


class GymBookingError(Exception):
    """Base class for gym booking errors."""


class GymNotFoundError(GymBookingError):
    """Raised when a gym does not exist or has been soft-deleted."""

    def __init__(self, gym_id: str):
        super().__init__(f"Gym {gym_id} not found")
        self.gym_id = gym_id


class BookingNotFoundError(GymBookingError):
    """Raised when a booking lookup finds nothing."""

    def __init__(self, key: str):
        super().__init__(f"Booking {key} not found")
        self.key = key


class PricingError(GymBookingError):
    """Raised when a price cannot be computed."""


class UnknownPlanError(PricingError):
    """Raised for a plan name outside the fixed plan list."""

    def __init__(self, plan_name: str):
        super().__init__(f"Invalid plan: {plan_name!r}")
        self.plan_name = plan_name


class BookingConflictError(GymBookingError):
    """Raised when the user already holds a live booking for the gym."""

    def __init__(self, booking: Any):
        super().__init__(
            f"Active booking exists from {booking.start_date} to {booking.end_date}"
        )
        self.booking = booking


class PaymentGatewayError(GymBookingError):
    """Raised when the payment gateway rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class APIClientError(GymBookingError):
    """Raised by the API client for non-success responses."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"HTTP {status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail
