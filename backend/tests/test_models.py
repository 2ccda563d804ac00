"""Tests for data models."""
from datetime import date

import pytest
from pydantic import ValidationError

from gym_booking.errors import UnknownPlanError
from gym_booking.models import (
    BillingPeriod,
    Booking,
    BookingSelection,
    Currency,
    CurrencyCode,
    Gym,
    GymCreate,
    GymPricing,
    OrderRequest,
    Plan,
    TimeSlotChoice,
    is_valid_phone,
)

from conftest import make_gym_document, make_order_document


class TestGymModel:
    """Tests for gym validation."""

    def test_valid_gym(self, gym_document):
        """Test parsing a complete gym document."""
        gym = GymCreate.model_validate(gym_document)
        assert gym.gym_name == "Iron Temple"
        assert gym.pricing.hourly_rate == 200
        assert gym.personal_trainer_pricing.monthly_rate == 8000
        assert gym.timings.morning.slots[0].id == "m1"
        assert gym.timings.morning.slots[0].max_people == 10
        assert gym.address.place_id.startswith("ChIJ")

    def test_gym_name_is_stripped(self):
        gym = GymCreate.model_validate(make_gym_document(gymName="  Iron Temple  "))
        assert gym.gym_name == "Iron Temple"

    def test_blank_gym_name_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            GymCreate.model_validate(make_gym_document(gymName="   "))
        assert "Gym Name is required" in str(exc_info.value)

    def test_morning_closing_before_opening_rejected(self):
        """Test that a period closing before it opens is rejected."""
        document = make_gym_document()
        document["timings"]["morning"]["closingTime"] = "2024-01-01T05:00:00"

        with pytest.raises(ValidationError) as exc_info:
            GymCreate.model_validate(document)
        assert "Morning closing time must be after opening time" in str(exc_info.value)

    def test_evening_equal_times_rejected(self):
        document = make_gym_document()
        document["timings"]["evening"]["closingTime"] = document["timings"]["evening"]["openingTime"]

        with pytest.raises(ValidationError) as exc_info:
            GymCreate.model_validate(document)
        assert "Evening closing time must be after opening time" in str(exc_info.value)

    def test_negative_rate_rejected(self):
        document = make_gym_document(
            pricing={"hourlyRate": -1, "weeklyRate": 1000, "monthlyRate": 3500}
        )
        with pytest.raises(ValidationError):
            GymCreate.model_validate(document)

    def test_slot_requires_capacity(self):
        document = make_gym_document()
        document["timings"]["morning"]["slots"][0]["maxPeople"] = 0
        with pytest.raises(ValidationError):
            GymCreate.model_validate(document)

    def test_unknown_currency_rejected(self):
        with pytest.raises(ValidationError):
            GymCreate.model_validate(make_gym_document(currency={"name": "XYZ"}))

    def test_currency_symbol_defaults_from_code(self):
        assert Currency(name=CurrencyCode.USD).symbol == "$"
        assert Currency().symbol == "₹"

    def test_currency_defaults_to_inr(self):
        document = make_gym_document()
        del document["currency"]
        gym = GymCreate.model_validate(document)
        assert gym.currency.name == CurrencyCode.INR

    def test_description_length_limit(self):
        with pytest.raises(ValidationError):
            GymCreate.model_validate(make_gym_document(description="x" * 501))

        gym = GymCreate.model_validate(make_gym_document(description="x" * 500))
        assert len(gym.description) == 500

    def test_document_uses_wire_keys(self, gym_document):
        """Test that documents are dumped with camelCase and _id keys."""
        gym = Gym.model_validate({**gym_document, "_id": "g1"})
        document = gym.to_document()

        assert document["_id"] == "g1"
        assert document["gymName"] == "Iron Temple"
        assert document["personalTrainerPricing"]["hourlyRate"] == 500
        assert document["isDeleted"] is False
        assert document["address"]["place_id"] == gym_document["address"]["place_id"]

    def test_slot_choices_morning_first(self, gym_document):
        gym = Gym.model_validate(gym_document)
        choices = gym.slot_choices()
        assert [period for period, _ in choices] == ["morning", "morning", "evening"]
        assert choices[0][1].label == "06:00 - 07:00"


class TestGymPricing:
    """Tests for the lenient pricing view."""

    def test_from_payload(self, gym_document):
        pricing = GymPricing.from_payload("g1", gym_document)
        assert pricing.gym_name == "Iron Temple"
        assert pricing.pricing.weekly_rate == 1000
        assert pricing.currency_code == CurrencyCode.INR
        assert pricing.currency_symbol == "₹"

    def test_missing_parts_default(self):
        pricing = GymPricing.from_payload("g1", {})
        assert pricing.gym_name == "Unknown Gym"
        assert pricing.pricing is None
        assert pricing.personal_trainer_pricing is None
        assert pricing.currency_symbol == "₹"

    def test_invalid_rate_table_dropped(self, gym_document):
        gym_document["personalTrainerPricing"] = {"hourlyRate": "lots"}
        pricing = GymPricing.from_payload("g1", gym_document)
        assert pricing.personal_trainer_pricing is None
        assert pricing.pricing is not None

    @pytest.mark.parametrize("currency", ["INR", 42, ["INR"]])
    def test_malformed_currency_defaults(self, gym_document, currency):
        gym_document["currency"] = currency
        pricing = GymPricing.from_payload("g1", gym_document)
        assert pricing.currency_code == CurrencyCode.INR
        assert pricing.currency_symbol == "₹"
        assert pricing.pricing.hourly_rate == 200


class TestPlan:
    """Tests for plan lookup."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Hourly Plan", Plan.HOURLY),
            ("Weekly Plan With Trainer", Plan.WEEKLY_WITH_TRAINER),
            ("monthly plan", Plan.MONTHLY),
            ("MONTHLY_WITH_TRAINER", Plan.MONTHLY_WITH_TRAINER),
        ],
    )
    def test_from_name(self, name, expected):
        assert Plan.from_name(name) == expected

    @pytest.mark.parametrize("name", ["", "Yearly Plan", "Hourly Plan Trainer", "Weekly Plan Trainer"])
    def test_unknown_plan(self, name):
        with pytest.raises(UnknownPlanError):
            Plan.from_name(name)

    def test_variants(self):
        assert Plan.HOURLY_WITH_TRAINER.with_trainer
        assert not Plan.WEEKLY.with_trainer
        assert Plan.MONTHLY.period == BillingPeriod.MONTHLY
        assert BillingPeriod.WEEKLY.rate_field == "weekly_rate"

    def test_end_dates(self):
        start = date(2024, 1, 1)
        assert Plan.HOURLY.end_date(start) == date(2024, 1, 1)
        assert Plan.WEEKLY.end_date(start) == date(2024, 1, 7)
        assert Plan.MONTHLY_WITH_TRAINER.end_date(start) == date(2024, 1, 31)


class TestBookingSelection:
    def test_slot_count_at_least_one(self):
        assert BookingSelection(gym_id="g1").slot_count == 1
        assert not BookingSelection(gym_id="g1").has_slots

    def test_slot_count(self):
        selection = BookingSelection(
            gym_id="g1",
            selected_time=(
                TimeSlotChoice(time="06:00 - 07:00", slot_id="m1"),
                TimeSlotChoice(time="07:00 - 08:00", slot_id="m2"),
            ),
        )
        assert selection.has_slots
        assert selection.slot_count == 2


class TestBooking:
    def _booking(self, start, end):
        return Booking(
            order_id="order_1",
            user_id="user_1",
            gym_id="g1",
            gym_name="Iron Temple",
            selected_plan=Plan.WEEKLY,
            amount=1000,
            base_amount=1000,
            number_of_slots=1,
            start_date=start,
            end_date=end,
            booking_date=start,
        )

    def test_overlap_is_inclusive(self):
        booking = self._booking(date(2024, 1, 1), date(2024, 1, 7))
        assert booking.overlaps(date(2024, 1, 7), date(2024, 1, 10))
        assert booking.overlaps(date(2023, 12, 25), date(2024, 1, 1))
        assert not booking.overlaps(date(2024, 1, 8), date(2024, 1, 9))

    def test_new_booking_is_pending_and_live(self):
        booking = self._booking(date(2024, 1, 1), date(2024, 1, 7))
        assert booking.status.value == "pending"
        assert booking.is_live


class TestOrderRequest:
    """Tests for order validation."""

    def test_valid_order(self):
        order = OrderRequest.model_validate(make_order_document("g1"))
        assert order.selected_plan == Plan.HOURLY
        assert order.amount == 600
        assert order.booking_time_slots[0].slot_id == "m1"

        document = order.to_document()
        assert document["buyer_name"] == "Asha"
        assert document["bookingTimeSlots"][0] == {
            "date": "2030-01-01",
            "time": "06:00 - 07:00",
            "slotId": "m1",
        }

    @pytest.mark.parametrize("phone", ["12345", "98765432100", "98765abcde", ""])
    def test_invalid_phone(self, phone):
        with pytest.raises(ValidationError) as exc_info:
            OrderRequest.model_validate(make_order_document("g1", phone=phone))
        assert "valid 10-digit phone number" in str(exc_info.value)

    def test_amount_must_match_slots(self):
        with pytest.raises(ValidationError):
            OrderRequest.model_validate(make_order_document("g1", amount=400))

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            OrderRequest.model_validate(make_order_document("g1", endDate="2029-12-31"))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"endDate": "2030-12-31"},
            {"selectedPlan": "Weekly Plan", "amount": 3000, "baseAmount": 1000},
        ],
    )
    def test_end_date_must_match_plan(self, overrides):
        with pytest.raises(ValidationError) as exc_info:
            OrderRequest.model_validate(make_order_document("g1", **overrides))
        assert "does not match" in str(exc_info.value)

    def test_weekly_order_spans_seven_days(self):
        order = OrderRequest.model_validate(
            make_order_document(
                "g1",
                selectedPlan="Weekly Plan",
                amount=3000,
                baseAmount=1000,
                endDate="2030-01-07",
            )
        )
        assert order.end_date == order.selected_plan.end_date(order.start_date)

    def test_unknown_plan_rejected(self):
        with pytest.raises(ValidationError):
            OrderRequest.model_validate(make_order_document("g1", selectedPlan="Yearly Plan"))

    def test_is_valid_phone(self):
        assert is_valid_phone("9876543210")
        assert not is_valid_phone("+919876543210")
        assert not is_valid_phone(None)
