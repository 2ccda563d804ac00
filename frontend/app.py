"""Gradio frontend for booking gym slots and paying through hosted checkout."""
import os
import sys
from datetime import date
from html import escape
from typing import List, Optional, Tuple

import gradio as gr
import httpx
from dotenv import load_dotenv
from pydantic import ValidationError

load_dotenv()

from gym_booking.config import settings
from gym_booking.errors import APIClientError, PricingError
from gym_booking.flows import BuyerProfile, CheckoutFlow, PlanCard
from gym_booking.models import BookingSelection, Gym, GymPricing, Plan, TimeSlotChoice
from gym_booking.services.api_client import GymBookingClient
from gym_booking.services.pricing import base_rate

custom_css = """
/* Global theme colors */
.gradio-container {
    background-color: #252523 !important;
    color: #F7F7FA !important;
    padding-left: max(0px, calc((100% - 800px) / 2)) !important;
    padding-right: max(0px, calc((100% - 800px) / 2)) !important;
}
body {
    background-color: #252523 !important;
}

.gr-markdown, .gr-textbox label, .gr-button, h1, h2, h3, p {
    color: #F7F7FA !important;
}

/* Plan cards */
.plan-grid {
    display: grid;
    grid-template-columns: repeat(auto-fill, minmax(220px, 1fr));
    gap: 12px;
}
.plan-card {
    background: rgba(38, 38, 36, 0.6);
    backdrop-filter: blur(8px);
    -webkit-backdrop-filter: blur(8px);
    border: 1px solid rgba(255, 255, 255, 0.08);
    border-radius: 16px;
    padding: 16px;
    box-shadow: 0 4px 30px rgba(0, 0, 0, 0.3);
}
.plan-card h3 {
    margin: 0 0 4px 0;
    text-shadow: 0 0 20px rgba(198, 96, 63, 0.3);
}
.plan-duration {
    color: #888888;
    font-size: 13px;
}
.plan-rate {
    font-size: 20px;
    color: #C6603F;
    margin-top: 8px;
}
.plan-total {
    color: #F7F7FA;
    font-weight: bold;
}

button.primary, .primary {
    background: linear-gradient(135deg, rgba(198, 96, 63, 0.9), rgba(177, 78, 49, 0.9)) !important;
    border: 1px solid rgba(255, 255, 255, 0.1) !important;
    border-radius: 12px !important;
    box-shadow: 0 4px 15px rgba(198, 96, 63, 0.3);
    color: #FFFFFF !important;
    transition: all 0.3s ease;
}
button.primary:hover, .primary:hover {
    background: linear-gradient(135deg, rgba(177, 78, 49, 1), rgba(156, 62, 35, 1)) !important;
    transform: translateY(-2px);
}

.gradio-container textarea,
.gradio-container input[type="text"] {
    background: rgba(31, 30, 29, 0.8) !important;
    border: 1px solid rgba(255, 255, 255, 0.1) !important;
    border-radius: 20px !important;
}
.gradio-container textarea:focus,
.gradio-container input[type="text"]:focus {
    border-color: rgba(198, 96, 63, 0.6) !important;
    box-shadow: 0 0 15px rgba(198, 96, 63, 0.15);
}
"""

REDIRECT_JS = "(url) => { if (url) { window.location.href = url; } }"


def api_client() -> GymBookingClient:
    """Client authenticated with the frontend's bearer token."""
    return GymBookingClient(
        base_url=settings.api_base_url,
        token=os.getenv("GYM_BOOKING_TOKEN", ""),
    )


def notify(level: str, message: str) -> None:
    """Show a flow notification as a Gradio toast."""
    if level == "info":
        gr.Info(message)
    else:
        gr.Warning(message)


def build_plan_cards(pricing: Optional[GymPricing], number_of_slots: int) -> List[PlanCard]:
    """Plan cards for the loaded pricing, or unpriced cards before a gym is loaded."""
    cards = []
    for plan in Plan:
        rate = None
        if pricing is not None:
            try:
                rate = base_rate(pricing, plan)
            except PricingError:
                rate = None
        cards.append(
            PlanCard(
                plan=plan,
                symbol=pricing.currency_symbol if pricing else "₹",
                rate=rate,
                number_of_slots=number_of_slots,
            )
        )
    return cards


def format_plan_cards(cards: List[PlanCard]) -> str:
    """Generate HTML for the plan grid."""
    html = '<div class="plan-grid">'
    for card in cards:
        html += '<div class="plan-card">'
        html += f"<h3>{escape(card.name)}</h3>"
        html += f'<div class="plan-duration">{escape(card.duration)}</div>'
        html += f'<div class="plan-rate">{escape(card.rate_label)}</div>'
        if card.total_label:
            html += f'<div class="plan-total">{escape(card.total_label)}</div>'
        html += "</div>"
    html += "</div>"
    return html


def slot_options(gym: Gym) -> List[Tuple[str, str]]:
    """(label, slot id) pairs for the slot picker."""
    return [
        (f"{period.capitalize()} {slot.label}", slot.id)
        for period, slot in gym.slot_choices()
    ]


def parse_date(value: str) -> Optional[date]:
    """Parse a YYYY-MM-DD date; blank means today."""
    value = (value or "").strip()
    if not value:
        return None
    return date.fromisoformat(value)


async def load_gym(gym_id: str):
    """Fetch the gym and its pricing, then fill the slot picker and plan cards."""
    gym_id = (gym_id or "").strip()
    if not gym_id:
        gr.Warning("Please enter a gym id")
        return None, None, gr.update(choices=[], value=[]), format_plan_cards(build_plan_cards(None, 1)), ""

    try:
        async with api_client() as client:
            document = await client.fetch_gym_document(gym_id)
        gym = Gym.model_validate(document)
        pricing = GymPricing.from_payload(gym_id, document)
    except (APIClientError, httpx.HTTPError, ValidationError) as e:
        print(f"[ERROR] Failed to load gym {gym_id}: {e}")
        gr.Warning("Failed to load pricing.")
        return None, None, gr.update(choices=[], value=[]), format_plan_cards(build_plan_cards(None, 1)), ""

    header = f"### {gym.gym_name}\n{gym.address.location}"
    if gym.description:
        header += f"\n\n{gym.description}"

    return (
        gym,
        pricing,
        gr.update(choices=slot_options(gym), value=[]),
        format_plan_cards(build_plan_cards(pricing, 1)),
        header,
    )


def refresh_plan_cards(pricing: Optional[GymPricing], slot_ids: List[str]) -> str:
    return format_plan_cards(build_plan_cards(pricing, max(len(slot_ids or []), 1)))


async def choose_plan(
    gym: Optional[Gym],
    slot_ids: List[str],
    selected_date: str,
    plan_name: str,
    user_id: str,
    buyer_name: str,
    buyer_email: str,
):
    """Start a checkout flow for the chosen plan and open the phone step."""
    if gym is None:
        gr.Warning("Please load a gym first")
        return None, gr.update(visible=False), ""

    if not (user_id or "").strip():
        gr.Warning("Please enter your user id")
        return None, gr.update(visible=False), ""

    try:
        start = parse_date(selected_date)
    except ValueError:
        gr.Warning("Please enter the date as YYYY-MM-DD")
        return None, gr.update(visible=False), ""

    labels = {slot.id: slot.label for _, slot in gym.slot_choices()}
    selection = BookingSelection(
        gym_id=gym.id,
        selected_date=start,
        selected_time=tuple(
            TimeSlotChoice(time=labels[slot_id], slot_id=slot_id)
            for slot_id in (slot_ids or [])
            if slot_id in labels
        ),
    )
    buyer = BuyerProfile(
        user_id=user_id.strip(),
        name=(buyer_name or "").strip() or None,
        email=(buyer_email or "").strip() or None,
    )

    flow = CheckoutFlow(api_client(), selection, buyer, notify=notify)
    await flow.load_pricing()
    if not flow.select_plan(plan_name or ""):
        return None, gr.update(visible=False), ""

    start_date, end_date = flow.booking_dates(flow.selected_plan)
    card = next(card for card in flow.plan_cards() if card.plan == flow.selected_plan)
    summary = (
        f"**{card.name}** for {flow.number_of_slots} slot(s), "
        f"{start_date:%d %b %Y} to {end_date:%d %b %Y}\n\n"
        f"{card.total_label or card.rate_label}"
    )
    return flow, gr.update(visible=True), summary


async def proceed_to_payment(flow: Optional[CheckoutFlow], phone_number: str):
    """Run the checkout flow; returns the checkout URL on success."""
    if flow is None:
        gr.Warning("Please choose a plan first")
        return None, gr.update(visible=False), ""

    result = await flow.proceed_to_payment((phone_number or "").strip())
    if not result.succeeded:
        return None, gr.update(visible=False), ""

    return None, gr.update(visible=False), result.checkout_url


def close_phone_step(flow: Optional[CheckoutFlow]):
    if flow is not None:
        flow.close_modal()
    return None, gr.update(visible=False)


async def show_payment_result(request: gr.Request) -> str:
    """On return from checkout, verify the order named in the query string."""
    order_id = request.query_params.get("order_id") if request else None
    if not order_id:
        return ""

    try:
        async with api_client() as client:
            result = await client.verify_payment(order_id)
    except (APIClientError, httpx.HTTPError) as e:
        print(f"[ERROR] Failed to verify order {order_id}: {e}")
        gr.Warning("Could not verify your payment. Please refresh to try again.")
        return ""

    if result.order_status == "PAID":
        gr.Info("Payment successful. Your booking is active.")
        booking = result.booking
        return (
            f"### Booking confirmed\n{booking.gym_name}: {booking.selected_plan.value}, "
            f"{booking.start_date:%d %b %Y} to {booking.end_date:%d %b %Y}"
        )

    gr.Warning(f"Payment status: {result.order_status}")
    return f"### Payment {result.order_status.lower()}\nOrder {order_id}"


with gr.Blocks(title="Gym Booking") as demo:
    gr.HTML(f"<style>{custom_css}</style>")

    gr.HTML("<h1>Gym <span style='color: #C6603F;'>Booking</span></h1>")
    gr.Markdown("Pick your slots, choose a plan and pay securely")

    # State
    gym_state = gr.State(None)
    pricing_state = gr.State(None)
    flow_state = gr.State(None)

    with gr.Row():
        gym_id_input = gr.Textbox(label="Gym Id", placeholder="65f0c0ffee0000000000abcd", scale=6)
        load_btn = gr.Button("Load Gym", variant="primary", scale=1)

    with gr.Row():
        user_id_input = gr.Textbox(label="User Id", scale=2)
        name_input = gr.Textbox(label="Name", scale=2)
        email_input = gr.Textbox(label="Email", scale=2)

    payment_status = gr.Markdown("")
    gym_header = gr.Markdown("")

    with gr.Group():
        gr.Markdown("### Date and Slots")
        date_input = gr.Textbox(label="Start Date", placeholder="YYYY-MM-DD (blank for today)")
        slots_input = gr.CheckboxGroup(choices=[], label="Time Slots")

    with gr.Group():
        gr.Markdown("### Plans")
        plan_cards = gr.HTML(value=format_plan_cards(build_plan_cards(None, 1)))
        plan_radio = gr.Radio(
            choices=[plan.value for plan in Plan],
            label="Plan",
            show_label=True,
        )
        choose_btn = gr.Button("Choose Plan", variant="primary")

    with gr.Group(visible=False) as phone_group:
        gr.Markdown("### Confirm Booking")
        plan_summary = gr.Markdown("")
        phone_input = gr.Textbox(label="Phone Number", placeholder="10-digit mobile number")
        with gr.Row():
            pay_btn = gr.Button("Proceed to Payment", variant="primary", scale=2)
            cancel_btn = gr.Button("Cancel", scale=1)

    checkout_url = gr.Textbox(visible=False)

    # Event Handlers
    load_btn.click(
        fn=load_gym,
        inputs=[gym_id_input],
        outputs=[gym_state, pricing_state, slots_input, plan_cards, gym_header],
    )
    gym_id_input.submit(
        fn=load_gym,
        inputs=[gym_id_input],
        outputs=[gym_state, pricing_state, slots_input, plan_cards, gym_header],
    )

    slots_input.change(
        fn=refresh_plan_cards,
        inputs=[pricing_state, slots_input],
        outputs=[plan_cards],
    )

    choose_btn.click(
        fn=choose_plan,
        inputs=[gym_state, slots_input, date_input, plan_radio, user_id_input, name_input, email_input],
        outputs=[flow_state, phone_group, plan_summary],
    )

    pay_btn.click(
        fn=proceed_to_payment,
        inputs=[flow_state, phone_input],
        outputs=[flow_state, phone_group, checkout_url],
    ).then(
        fn=lambda: "",
        outputs=[phone_input],
    ).then(
        fn=None,
        inputs=[checkout_url],
        js=REDIRECT_JS,
    )

    cancel_btn.click(
        fn=close_phone_step,
        inputs=[flow_state],
        outputs=[flow_state, phone_group],
    )

    demo.load(fn=show_payment_result, outputs=[payment_status])


def validate_environment():
    """Check required environment variables before starting."""
    print(f"[STARTUP] API_BASE_URL: {settings.api_base_url}")

    token = os.getenv("GYM_BOOKING_TOKEN")
    if not token or not token.strip():
        print("[ERROR] GYM_BOOKING_TOKEN environment variable must be set")
        sys.exit(1)
    print("[STARTUP] GYM_BOOKING_TOKEN is set")


if __name__ == "__main__":
    validate_environment()

    print("[STARTUP] Starting Gradio booking app...")
    demo.queue()
    demo.launch(
        server_port=int(os.getenv("GRADIO_SERVER_PORT", 7860)),
        server_name="0.0.0.0",
        share=False
    )
