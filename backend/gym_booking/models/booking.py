"""Plan, selection and booking data models."""
from datetime import date as Date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import ConfigDict, Field

from ..errors import UnknownPlanError
from .base import CamelModel
from .gym import CurrencyCode, generate_object_id


class BillingPeriod(str, Enum):
    """Billing period of a plan."""

    HOURLY = "hourly"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def rate_field(self) -> str:
        """Name of the RateTable attribute holding this period's rate."""
        return f"{self.value}_rate"

    @property
    def duration_days(self) -> int:
        """Days added to the start date to get the end date."""
        return _DURATION_DAYS[self]

    @property
    def unit(self) -> str:
        return _UNITS[self]


_DURATION_DAYS = {
    BillingPeriod.HOURLY: 0,
    BillingPeriod.WEEKLY: 6,
    BillingPeriod.MONTHLY: 30,
}

_UNITS = {
    BillingPeriod.HOURLY: "hour",
    BillingPeriod.WEEKLY: "week",
    BillingPeriod.MONTHLY: "month",
}


class Plan(str, Enum):
    """The six purchasable plans: billing period × trainer inclusion."""

    HOURLY = "Hourly Plan"
    HOURLY_WITH_TRAINER = "Hourly Plan With Trainer"
    WEEKLY = "Weekly Plan"
    WEEKLY_WITH_TRAINER = "Weekly Plan With Trainer"
    MONTHLY = "Monthly Plan"
    MONTHLY_WITH_TRAINER = "Monthly Plan With Trainer"

    @property
    def period(self) -> BillingPeriod:
        return _PLAN_VARIANTS[self][0]

    @property
    def with_trainer(self) -> bool:
        return _PLAN_VARIANTS[self][1]

    @classmethod
    def from_name(cls, name: str) -> "Plan":
        """Resolve a plan by display name or member name.

        Matching is exact after collapsing whitespace and ignoring case.

        Raises:
            UnknownPlanError: If no plan has that name
        """
        normalized = " ".join(str(name or "").split()).lower()
        for plan in cls:
            if normalized in (plan.value.lower(), plan.name.lower()):
                return plan
        raise UnknownPlanError(name)

    def end_date(self, start: Date) -> Date:
        """End date of a booking of this plan starting on ``start``."""
        return start + timedelta(days=self.period.duration_days)


_PLAN_VARIANTS = {
    Plan.HOURLY: (BillingPeriod.HOURLY, False),
    Plan.HOURLY_WITH_TRAINER: (BillingPeriod.HOURLY, True),
    Plan.WEEKLY: (BillingPeriod.WEEKLY, False),
    Plan.WEEKLY_WITH_TRAINER: (BillingPeriod.WEEKLY, True),
    Plan.MONTHLY: (BillingPeriod.MONTHLY, False),
    Plan.MONTHLY_WITH_TRAINER: (BillingPeriod.MONTHLY, True),
}


class TimeSlotChoice(CamelModel):
    """A time slot picked by the user."""

    model_config = ConfigDict(frozen=True)

    time: str
    slot_id: str = Field(..., alias="_id")


class BookingSelection(CamelModel):
    """Date and slots chosen before the plan step."""

    model_config = ConfigDict(frozen=True)

    gym_id: str
    selected_date: Optional[Date] = None
    selected_time: Tuple[TimeSlotChoice, ...] = ()

    @property
    def has_slots(self) -> bool:
        return len(self.selected_time) > 0

    @property
    def slot_count(self) -> int:
        """Number of slots billed; at least one."""
        return max(len(self.selected_time), 1)


class BookedTimeSlot(CamelModel):
    """A slot as recorded on an order."""

    slot_date: Date = Field(..., alias="date")
    time: str
    slot_id: str


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Booking(CamelModel):
    """Persisted reservation created for an order."""

    id: str = Field(default_factory=generate_object_id, alias="_id")
    order_id: str
    user_id: str
    gym_id: str
    gym_name: str
    selected_plan: Plan
    amount: float
    base_amount: float
    number_of_slots: int
    currency: CurrencyCode = CurrencyCode.INR
    start_date: Date
    end_date: Date
    booking_date: Date
    booking_time_slots: List[BookedTimeSlot] = Field(default_factory=list)
    status: BookingStatus = BookingStatus.PENDING
    payment_session_id: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_live(self) -> bool:
        return self.status != BookingStatus.CANCELLED

    def overlaps(self, start: Date, end: Date) -> bool:
        """Check whether [start, end] intersects this booking's dates (inclusive)."""
        return self.start_date <= end and start <= self.end_date


class BookingWindow(CamelModel):
    """Date range of an existing booking as reported to the booking flow."""

    start_date: Date
    end_date: Date
