"""Services for the application."""
from .storage_service import StorageService, storage_service
from .gym_service import GymService, gym_service
from .booking_service import BookingService, booking_service
from .payment_gateway import CashfreeGateway, PaymentSession, payment_gateway
from .api_client import GymBookingClient

__all__ = [
    "StorageService",
    "storage_service",
    "GymService",
    "gym_service",
    "BookingService",
    "booking_service",
    "CashfreeGateway",
    "PaymentSession",
    "payment_gateway",
    "GymBookingClient",
]
