"""Booking price flow: plan choice, conflict check and checkout handoff."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, List, Optional, Tuple

import httpx

from ..errors import BookingConflictError, GymBookingError, UnknownPlanError
from ..models import (
    BookedTimeSlot,
    BookingSelection,
    BookingWindow,
    GymPricing,
    OrderRequest,
    Plan,
    is_valid_phone,
)
from ..services.api_client import GymBookingClient
from ..services.pricing import base_rate, booking_dates, format_amount, quote
from ..utils.logger import logger

DEFAULT_BUYER_NAME = "Gym User"
DEFAULT_BUYER_EMAIL = "test@example.com"

MSG_PRICING_FAILED = "Failed to load pricing."
MSG_NO_SLOTS = "Please select at least one time slot first"
MSG_INVALID_PLAN = "Invalid plan"
MSG_NO_PLAN = "Please choose a plan first"
MSG_BAD_PHONE = "Please enter a valid 10-digit phone number"
MSG_PAYMENT_FAILED = "Payment failed. Try again."
MSG_REDIRECTING = "Redirecting to payment..."

# (level, message) -> None; levels are "info", "warning" and "error"
Notifier = Callable[[str, str], None]


class CheckoutState(str, Enum):
    """States of one checkout attempt."""

    IDLE = "idle"
    PLAN_CHOSEN = "plan_chosen"
    MODAL_OPEN = "modal_open"
    PHONE_VALIDATED = "phone_validated"
    CONFLICT_CHECKED = "conflict_checked"
    ORDER_CREATED = "order_created"
    REDIRECTED = "redirected"
    ABORTED = "aborted"


class AbortReason(str, Enum):
    CONFLICT = "conflict"
    VALIDATION = "validation"
    ERROR = "error"


@dataclass(frozen=True)
class BuyerProfile:
    """Signed-in user as reported by the identity provider."""

    user_id: str
    given_name: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.given_name or self.name or DEFAULT_BUYER_NAME

    @property
    def contact_email(self) -> str:
        return self.email or DEFAULT_BUYER_EMAIL


@dataclass(frozen=True)
class PlanCard:
    """One plan as rendered on the pricing page."""

    plan: Plan
    symbol: str
    rate: Optional[float]
    number_of_slots: int

    @property
    def name(self) -> str:
        return self.plan.value

    @property
    def duration(self) -> str:
        return self.plan.period.unit

    @property
    def total(self) -> Optional[float]:
        if self.rate is None:
            return None
        return self.rate * self.number_of_slots

    @property
    def rate_label(self) -> str:
        label = f"{format_amount(self.symbol, self.rate)} per slot"
        if self.number_of_slots > 1:
            label += f" × {self.number_of_slots}"
        return label

    @property
    def total_label(self) -> Optional[str]:
        if self.number_of_slots <= 1:
            return None
        return f"Total: {format_amount(self.symbol, self.total)}"


@dataclass
class CheckoutResult:
    """Outcome of ``proceed_to_payment``."""

    state: CheckoutState
    message: str
    reason: Optional[AbortReason] = None
    order: Optional[OrderRequest] = None
    payment_session_id: Optional[str] = None
    checkout_url: Optional[str] = None
    conflict: Optional[BookingWindow] = None

    @property
    def succeeded(self) -> bool:
        return self.state == CheckoutState.REDIRECTED


class CheckoutFlow:
    """Drives one user's plan selection and checkout for a gym.

    State per attempt: idle -> plan_chosen -> modal_open -> phone_validated
    -> conflict_checked -> order_created -> redirected, or aborted (which
    returns the flow to idle).
    """

    def __init__(
        self,
        client: GymBookingClient,
        selection: BookingSelection,
        buyer: BuyerProfile,
        notify: Optional[Notifier] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize the flow.

        Args:
            client: API client; entered once per network action
            selection: Date and slots chosen on the previous page
            buyer: Signed-in user
            notify: Optional callback showing user-visible notifications
            today: Optional clock for the booking date. Defaults to date.today
        """
        self.client = client
        self.selection = selection
        self.buyer = buyer
        self.notify = notify
        self.today = today or date.today

        self.pricing = GymPricing(gym_id=selection.gym_id)
        self.loading = False
        self.selected_plan: Optional[Plan] = None
        self.phone_number = ""
        self.is_modal_open = False
        self.state = CheckoutState.IDLE
        self.history: List[CheckoutState] = [CheckoutState.IDLE]

    @property
    def number_of_slots(self) -> int:
        return self.selection.slot_count

    async def load_pricing(self) -> GymPricing:
        """Fetch the gym's pricing; failures leave the empty default pricing.

        Returns:
            The pricing now held by the flow
        """
        self.loading = True
        try:
            async with self.client as client:
                self.pricing = await client.fetch_pricing(self.selection.gym_id)
            logger.info(f"Pricing loaded for gym {self.selection.gym_id}")

        except (httpx.HTTPError, GymBookingError, ValueError) as e:
            logger.error(f"Error fetching gym data for {self.selection.gym_id}: {str(e)}")
            self._notify("error", MSG_PRICING_FAILED)

        finally:
            self.loading = False

        return self.pricing

    def plan_cards(self) -> List[PlanCard]:
        """Build the six plan cards from the loaded pricing."""
        cards = []
        for plan in Plan:
            try:
                rate = base_rate(self.pricing, plan)
            except GymBookingError:
                rate = None
            cards.append(
                PlanCard(
                    plan=plan,
                    symbol=self.pricing.currency_symbol,
                    rate=rate,
                    number_of_slots=self.number_of_slots,
                )
            )
        return cards

    def select_plan(self, plan_name: str) -> bool:
        """Choose a plan and open the confirmation step.

        Returns:
            True if the confirmation step is open
        """
        if not self.selection.has_slots:
            self._notify("error", MSG_NO_SLOTS)
            return False

        try:
            plan = Plan.from_name(plan_name)
        except UnknownPlanError:
            self._notify("error", MSG_INVALID_PLAN)
            return False

        self.selected_plan = plan
        self._transition(CheckoutState.PLAN_CHOSEN)
        self.is_modal_open = True
        self._transition(CheckoutState.MODAL_OPEN)
        return True

    def close_modal(self) -> None:
        """Dismiss the confirmation step without paying."""
        self.is_modal_open = False
        self.selected_plan = None
        self._transition(CheckoutState.IDLE)

    def booking_dates(self, plan: Plan) -> Tuple[date, date]:
        """Dates covered by the plan; an unset selection date starts today."""
        return booking_dates(plan, self.selection.selected_date or self.today())

    def build_order(self, plan: Plan, phone_number: str) -> OrderRequest:
        """Build the order request for the current selection.

        Raises:
            PricingError: If the gym has no rate for the plan
        """
        price = quote(self.pricing, plan, self.number_of_slots)
        start, end = self.booking_dates(plan)

        return OrderRequest(
            user_id=self.buyer.user_id,
            buyer_name=self.buyer.display_name,
            email=self.buyer.contact_email,
            phone=phone_number,
            gym_id=self.selection.gym_id,
            selected_plan=plan,
            amount=price.amount,
            base_amount=price.base_amount,
            number_of_slots=price.number_of_slots,
            currency=self.pricing.currency_code,
            start_date=start,
            end_date=end,
            gym_names=self.pricing.gym_name,
            booking_date=self.today(),
            booking_time_slots=[
                BookedTimeSlot(slot_date=start, time=slot.time, slot_id=slot.slot_id)
                for slot in self.selection.selected_time
            ],
        )

    async def proceed_to_payment(self, phone_number: str) -> CheckoutResult:
        """Validate, check for conflicts, create the order and hand off to checkout.

        Args:
            phone_number: Buyer phone number; must be exactly 10 digits

        Returns:
            Redirected result carrying the checkout URL, or an aborted result
        """
        if self.state != CheckoutState.MODAL_OPEN or self.selected_plan is None:
            return self._abort(AbortReason.VALIDATION, MSG_NO_PLAN)

        self.phone_number = phone_number
        if not is_valid_phone(phone_number):
            return self._abort(AbortReason.VALIDATION, MSG_BAD_PHONE)
        self._transition(CheckoutState.PHONE_VALIDATED)

        plan = self.selected_plan
        try:
            start, end = self.booking_dates(plan)

            async with self.client as client:
                check = await client.check_active_booking(
                    self.buyer.user_id, self.selection.gym_id, start, end
                )
                if check.conflict:
                    return self._abort_conflict(check.booking)
                self._transition(CheckoutState.CONFLICT_CHECKED)

                order = self.build_order(plan, phone_number)
                session = await client.create_order(order)
                self._transition(CheckoutState.ORDER_CREATED)
                checkout_url = client.checkout_url(session.payment_session_id)

            self._transition(CheckoutState.REDIRECTED)
            logger.info(f"Checkout ready for order {session.order_id}")
            self._notify("info", MSG_REDIRECTING)
            return CheckoutResult(
                state=CheckoutState.REDIRECTED,
                message=MSG_REDIRECTING,
                order=order,
                payment_session_id=session.payment_session_id,
                checkout_url=checkout_url,
            )

        except BookingConflictError as e:
            return self._abort_conflict(e.booking)

        except (httpx.HTTPError, GymBookingError, ValueError) as e:
            logger.error(f"Payment error: {str(e)}")
            return self._abort(AbortReason.ERROR, MSG_PAYMENT_FAILED)

        finally:
            self._reset_inputs()

    def _abort_conflict(self, booking: Optional[BookingWindow]) -> CheckoutResult:
        if booking is None:
            message = "You already have an active plan at this gym."
        else:
            message = (
                f"You already have an active plan from {booking.start_date:%d %b %Y} "
                f"to {booking.end_date:%d %b %Y}."
            )
        return self._abort(AbortReason.CONFLICT, message, conflict=booking)

    def _abort(
        self,
        reason: AbortReason,
        message: str,
        conflict: Optional[BookingWindow] = None,
    ) -> CheckoutResult:
        self._notify("error", message)
        self._transition(CheckoutState.ABORTED)
        self._reset_inputs()
        self._transition(CheckoutState.IDLE)
        return CheckoutResult(
            state=CheckoutState.ABORTED, message=message, reason=reason, conflict=conflict
        )

    def _reset_inputs(self) -> None:
        self.phone_number = ""
        self.selected_plan = None
        self.is_modal_open = False

    def _transition(self, state: CheckoutState) -> None:
        self.state = state
        self.history.append(state)

    def _notify(self, level: str, message: str) -> None:
        if self.notify:
            try:
                self.notify(level, message)
            except Exception as e:
                logger.warning(f"Notification callback failed: {e}")
