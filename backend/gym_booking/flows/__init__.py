"""User-facing booking flows."""
from .checkout import (
    AbortReason,
    BuyerProfile,
    CheckoutFlow,
    CheckoutResult,
    CheckoutState,
    PlanCard,
)

__all__ = [
    "AbortReason",
    "BuyerProfile",
    "CheckoutFlow",
    "CheckoutResult",
    "CheckoutState",
    "PlanCard",
]
