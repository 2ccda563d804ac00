"""Plan price computation shared by the API and the booking flow."""
from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from ..errors import PricingError
from ..models import Gym, GymPricing, Plan, RateTable

PricedGym = Union[Gym, GymPricing]


@dataclass(frozen=True)
class PriceQuote:
    """Price of a plan for a number of slots."""

    plan: Plan
    base_amount: float
    number_of_slots: int

    @property
    def amount(self) -> float:
        return self.base_amount * self.number_of_slots


def rate_table_for(gym: PricedGym, plan: Plan) -> Optional[RateTable]:
    """Pick the rate table a plan is billed from."""
    if plan.with_trainer:
        return gym.personal_trainer_pricing
    return gym.pricing


def base_rate(gym: PricedGym, plan: Plan) -> float:
    """Get the per-slot rate of a plan.

    Raises:
        PricingError: If the gym has no rates for the plan
    """
    table = rate_table_for(gym, plan)
    if table is None:
        raise PricingError(f"No pricing available for {plan.value}")
    return getattr(table, plan.period.rate_field)


def quote(gym: PricedGym, plan: Plan, number_of_slots: int = 1) -> PriceQuote:
    """Quote a plan; fewer than one slot is billed as one."""
    return PriceQuote(
        plan=plan,
        base_amount=base_rate(gym, plan),
        number_of_slots=max(number_of_slots, 1),
    )


def booking_dates(plan: Plan, start: date) -> Tuple[date, date]:
    """Get the (start, end) dates covered by a plan starting on ``start``."""
    return start, plan.end_date(start)


def format_amount(symbol: str, amount: Optional[float]) -> str:
    """Render an amount with its currency symbol, e.g. ``₹600`` or ``$12.50``."""
    if amount is None:
        return f"{symbol}-"
    if float(amount).is_integer():
        return f"{symbol}{int(amount)}"
    return f"{symbol}{amount:.2f}"
