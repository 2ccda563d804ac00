"""Gym record data models."""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
import uuid

from pydantic import Field, ValidationError, field_validator, model_validator

from .base import CamelModel


def generate_object_id() -> str:
    """Generate a 24 character hex identifier."""
    return uuid.uuid4().hex[:24]


class CurrencyCode(str, Enum):
    """Supported currency codes."""

    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    RUB = "RUB"
    KRW = "KRW"


CURRENCY_SYMBOLS = {
    CurrencyCode.INR: "₹",
    CurrencyCode.USD: "$",
    CurrencyCode.EUR: "€",
    CurrencyCode.GBP: "£",
    CurrencyCode.JPY: "¥",
    CurrencyCode.RUB: "₽",
    CurrencyCode.KRW: "₩",
}

DEFAULT_CURRENCY_SYMBOL = CURRENCY_SYMBOLS[CurrencyCode.INR]
UNKNOWN_GYM_NAME = "Unknown Gym"


class Currency(CamelModel):
    """Currency code and display symbol."""

    name: CurrencyCode = CurrencyCode.INR
    symbol: Optional[str] = None

    @model_validator(mode="after")
    def default_symbol(self) -> "Currency":
        if not self.symbol:
            self.symbol = CURRENCY_SYMBOLS[self.name]
        return self


class Address(CamelModel):
    location: str = Field(..., min_length=1)
    place_id: Optional[str] = Field(None, alias="place_id")
    street: Optional[str] = None


class Coordinates(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class RateTable(CamelModel):
    """Hourly, weekly and monthly rates for one pricing tier."""

    hourly_rate: float = Field(..., ge=0)
    weekly_rate: float = Field(..., ge=0)
    monthly_rate: float = Field(..., ge=0)


class Slot(CamelModel):
    """A bookable interval within a period."""

    id: str = Field(default_factory=generate_object_id, alias="_id")
    start: str = Field(..., min_length=1)
    end: str = Field(..., min_length=1)
    max_people: int = Field(..., ge=1)

    @property
    def label(self) -> str:
        return f"{self.start} - {self.end}"


class Period(CamelModel):
    """Opening window with its slot list."""

    opening_time: datetime
    closing_time: datetime
    slots: List[Slot] = Field(default_factory=list)

    def closes_after_opening(self) -> bool:
        return self.closing_time.timestamp() > self.opening_time.timestamp()


class Timings(CamelModel):
    morning: Period
    evening: Period

    @model_validator(mode="after")
    def check_period_order(self) -> "Timings":
        if not self.morning.closes_after_opening():
            raise ValueError("Morning closing time must be after opening time")
        if not self.evening.closes_after_opening():
            raise ValueError("Evening closing time must be after opening time")
        return self


class Images(CamelModel):
    url: str = Field(..., min_length=1)
    public_id: str = Field(..., alias="public_id", min_length=1)


class Amenity(CamelModel):
    id: str
    label: str
    checked: bool


class GymCreate(CamelModel):
    """Fields supplied when creating or replacing a gym."""

    gym_name: str
    address: Address
    coordinates: Coordinates
    pricing: RateTable
    personal_trainer_pricing: RateTable
    timings: Timings
    currency: Currency = Field(default_factory=Currency)
    description: str = Field(
        ..., max_length=500, description="Description cannot be more than 500 characters"
    )
    gym_owner: str = Field(..., min_length=1)
    images: Images
    amenities: List[Amenity] = Field(default_factory=list)

    @field_validator("gym_name")
    @classmethod
    def strip_gym_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Gym Name is required")
        return value


class Gym(GymCreate):
    """Persisted gym record."""

    id: str = Field(default_factory=generate_object_id, alias="_id")
    is_deleted: bool = False
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def slot_choices(self) -> List[Tuple[str, Slot]]:
        """List (period name, slot) pairs, morning first."""
        return [("morning", slot) for slot in self.timings.morning.slots] + [
            ("evening", slot) for slot in self.timings.evening.slots
        ]


class GymPricing(CamelModel):
    """Pricing view of a gym as consumed by the booking flow."""

    gym_id: str
    gym_name: str = UNKNOWN_GYM_NAME
    pricing: Optional[RateTable] = None
    personal_trainer_pricing: Optional[RateTable] = None
    currency_code: CurrencyCode = CurrencyCode.INR
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL

    @classmethod
    def from_payload(cls, gym_id: str, data: Dict[str, Any]) -> "GymPricing":
        """Build a pricing view from a gym document, defaulting absent parts.

        Args:
            gym_id: Gym identifier the payload was fetched for
            data: Gym JSON document

        Returns:
            Pricing view with missing tables left as None
        """
        currency = data.get("currency")
        if not isinstance(currency, dict):
            currency = {}
        try:
            code = CurrencyCode(currency.get("name") or CurrencyCode.INR)
        except ValueError:
            code = CurrencyCode.INR

        return cls(
            gym_id=gym_id,
            gym_name=data.get("gymName") or UNKNOWN_GYM_NAME,
            pricing=_parse_rate_table(data.get("pricing")),
            personal_trainer_pricing=_parse_rate_table(data.get("personalTrainerPricing")),
            currency_code=code,
            currency_symbol=currency.get("symbol") or DEFAULT_CURRENCY_SYMBOL,
        )


def _parse_rate_table(data: Optional[Dict[str, Any]]) -> Optional[RateTable]:
    if not data:
        return None
    try:
        return RateTable.model_validate(data)
    except ValidationError:
        return None
