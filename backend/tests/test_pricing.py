"""Tests for plan pricing."""
from datetime import date

import pytest

from gym_booking.errors import PricingError
from gym_booking.models import GymPricing, Plan, RateTable
from gym_booking.services.pricing import base_rate, booking_dates, format_amount, quote


@pytest.fixture
def pricing():
    return GymPricing(
        gym_id="g1",
        gym_name="Iron Temple",
        pricing=RateTable(hourly_rate=200, weekly_rate=1000, monthly_rate=3500),
        personal_trainer_pricing=RateTable(hourly_rate=500, weekly_rate=2500, monthly_rate=8000),
    )


class TestBaseRate:
    """Tests for rate resolution."""

    @pytest.mark.parametrize(
        "plan, expected",
        [
            (Plan.HOURLY, 200),
            (Plan.HOURLY_WITH_TRAINER, 500),
            (Plan.WEEKLY, 1000),
            (Plan.WEEKLY_WITH_TRAINER, 2500),
            (Plan.MONTHLY, 3500),
            (Plan.MONTHLY_WITH_TRAINER, 8000),
        ],
    )
    def test_rates(self, pricing, plan, expected):
        assert base_rate(pricing, plan) == expected

    def test_missing_trainer_table(self, pricing):
        pricing.personal_trainer_pricing = None
        with pytest.raises(PricingError):
            base_rate(pricing, Plan.WEEKLY_WITH_TRAINER)
        assert base_rate(pricing, Plan.WEEKLY) == 1000


class TestQuote:
    def test_three_slots(self, pricing):
        price = quote(pricing, Plan.HOURLY, 3)
        assert price.base_amount == 200
        assert price.number_of_slots == 3
        assert price.amount == 600

    def test_zero_slots_billed_as_one(self, pricing):
        price = quote(pricing, Plan.MONTHLY_WITH_TRAINER, 0)
        assert price.number_of_slots == 1
        assert price.amount == 8000


class TestBookingDates:
    def test_offsets(self):
        start = date(2024, 2, 27)
        assert booking_dates(Plan.HOURLY, start) == (start, start)
        assert booking_dates(Plan.WEEKLY, start) == (start, date(2024, 3, 4))
        assert booking_dates(Plan.MONTHLY, start) == (start, date(2024, 3, 28))


class TestFormatAmount:
    def test_whole_amount(self):
        assert format_amount("₹", 600) == "₹600"
        assert format_amount("₹", 600.0) == "₹600"

    def test_fractional_amount(self):
        assert format_amount("$", 12.5) == "$12.50"

    def test_missing_amount(self):
        assert format_amount("₹", None) == "₹-"
