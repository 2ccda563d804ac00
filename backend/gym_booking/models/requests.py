"""Request models for API endpoints."""
from datetime import date as Date
import re
from typing import List

from pydantic import ConfigDict, Field, field_validator, model_validator

from .base import CamelModel
from .booking import BookedTimeSlot, Plan
from .gym import CurrencyCode

PHONE_PATTERN = re.compile(r"^\d{10}$")

# Tolerance when comparing a submitted amount against the recomputed one
AMOUNT_TOLERANCE = 0.01


def is_valid_phone(phone: str) -> bool:
    """Check a phone number is exactly 10 digits."""
    return bool(PHONE_PATTERN.match(phone or ""))


class OrderRequest(CamelModel):
    """Order creation request submitted at checkout."""

    user_id: str = Field(..., min_length=1)
    buyer_name: str = Field(..., alias="buyer_name", min_length=1)
    email: str
    phone: str
    gym_id: str = Field(..., min_length=1)
    selected_plan: Plan
    amount: float = Field(..., ge=0)
    base_amount: float = Field(..., ge=0)
    number_of_slots: int = Field(..., ge=1)
    currency: CurrencyCode = CurrencyCode.INR
    start_date: Date
    end_date: Date
    gym_names: str
    booking_date: Date
    booking_time_slots: List[BookedTimeSlot] = Field(default_factory=list)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        if not is_valid_phone(value):
            raise ValueError("Please enter a valid 10-digit phone number")
        return value

    @model_validator(mode="after")
    def check_totals(self) -> "OrderRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        plan_end = self.selected_plan.end_date(self.start_date)
        if self.end_date != plan_end:
            raise ValueError(
                f"endDate {self.end_date} does not match {self.selected_plan.value} "
                f"starting {self.start_date} (expected {plan_end})"
            )
        expected = self.base_amount * self.number_of_slots
        if abs(self.amount - expected) > AMOUNT_TOLERANCE:
            raise ValueError(
                f"amount {self.amount} does not equal baseAmount × numberOfSlots ({expected})"
            )
        return self

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userId": "kp_1234",
                "buyer_name": "Asha",
                "email": "asha@example.com",
                "phone": "9876543210",
                "gymId": "65f0c0ffee0000000000abcd",
                "selectedPlan": "Hourly Plan",
                "amount": 600,
                "baseAmount": 200,
                "numberOfSlots": 3,
                "currency": "INR",
                "startDate": "2024-01-01",
                "endDate": "2024-01-01",
                "gymNames": "Iron Temple",
                "bookingDate": "2023-12-30",
                "bookingTimeSlots": [
                    {"date": "2024-01-01", "time": "06:00 - 07:00", "slotId": "s1"}
                ],
            }
        }
    )
