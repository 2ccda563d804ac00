"""CLI tool for managing gyms, quoting plans and listing bookings."""
import asyncio
import json
from pathlib import Path
from typing import Optional

import httpx
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import settings
from ..errors import APIClientError, PricingError
from ..models import Booking, Gym, GymPricing, Plan
from ..services.api_client import GymBookingClient
from ..services.pricing import base_rate, format_amount

app = typer.Typer(help="Gym booking command line tools")
console = Console()

STATUS_COLORS = {
    "pending": "yellow",
    "active": "green",
    "cancelled": "red",
}


def create_plans_table(pricing: GymPricing, slots: int) -> Table:
    """Create a rich table with every plan's per-slot rate and total."""
    table = Table(title=f"{pricing.gym_name} ({pricing.currency_code.value})")
    table.add_column("Plan", style="cyan bold", no_wrap=True)
    table.add_column("Per slot", justify="right")
    table.add_column("Slots", justify="right")
    table.add_column("Total", justify="right", style="green")

    symbol = pricing.currency_symbol
    for plan in Plan:
        try:
            rate = base_rate(pricing, plan)
        except PricingError:
            table.add_row(plan.value, "[red]n/a[/red]", str(slots), "[red]n/a[/red]")
            continue
        table.add_row(
            plan.value,
            format_amount(symbol, rate),
            str(slots),
            format_amount(symbol, rate * slots),
        )

    return table


def create_bookings_table(bookings: list) -> Table:
    """Create a rich table listing bookings."""
    table = Table(show_header=True)
    table.add_column("Booking", style="cyan", no_wrap=True)
    table.add_column("Gym")
    table.add_column("Plan")
    table.add_column("Dates")
    table.add_column("Amount", justify="right")
    table.add_column("Status")

    for booking in bookings:
        booking: Booking
        color = STATUS_COLORS.get(booking.status.value, "white")
        table.add_row(
            booking.id,
            booking.gym_name,
            booking.selected_plan.value,
            f"{booking.start_date} → {booking.end_date}",
            f"{booking.amount:g} {booking.currency.value}",
            f"[{color}]{booking.status.value.upper()}[/{color}]",
        )

    return table


def _client(api_url: Optional[str], token: Optional[str]) -> GymBookingClient:
    return GymBookingClient(base_url=api_url or settings.api_base_url, token=token)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    raise typer.Exit(1)


@app.command()
def add(
    file: Path = typer.Argument(..., exists=True, readable=True, help="Gym JSON document"),
    api_url: Optional[str] = typer.Option(None, help="API base URL"),
    token: str = typer.Option(..., envvar="GYM_BOOKING_TOKEN", help="Bearer token"),
):
    """
    Add a gym from a JSON file.

    Example:

        gym-booking add gym.json --token dev-token
    """
    try:
        document = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _fail(f"{file} is not valid JSON: {e}")

    async def run() -> Gym:
        async with _client(api_url, token) as client:
            return await client.add_gym(document)

    try:
        gym = asyncio.run(run())
    except (APIClientError, httpx.HTTPError) as e:
        _fail(str(e))

    console.print(Panel(
        f"[cyan]Id:[/cyan] {gym.id}\n[cyan]Owner:[/cyan] {gym.gym_owner}\n"
        f"[cyan]Location:[/cyan] {gym.address.location}",
        title=f"[green]Added {gym.gym_name}",
        border_style="green",
    ))


@app.command()
def plans(
    gym_id: str = typer.Argument(..., help="Gym identifier"),
    slots: int = typer.Option(1, min=1, help="Number of slots to price"),
    api_url: Optional[str] = typer.Option(None, help="API base URL"),
    token: str = typer.Option(..., envvar="GYM_BOOKING_TOKEN", help="Bearer token"),
):
    """
    Show the six plans of a gym priced for a number of slots.

    Example:

        gym-booking plans 65f0c0ffee0000000000abcd --slots 3
    """
    async def run() -> GymPricing:
        async with _client(api_url, token) as client:
            return await client.fetch_pricing(gym_id)

    try:
        pricing = asyncio.run(run())
    except (APIClientError, httpx.HTTPError) as e:
        _fail(str(e))

    console.print(create_plans_table(pricing, slots))


@app.command()
def bookings(
    user_id: str = typer.Argument(..., help="User identifier"),
    api_url: Optional[str] = typer.Option(None, help="API base URL"),
    token: str = typer.Option(..., envvar="GYM_BOOKING_TOKEN", help="Bearer token"),
):
    """List a user's bookings."""
    async def run():
        async with _client(api_url, token) as client:
            return await client.list_bookings(user_id)

    try:
        result = asyncio.run(run())
    except (APIClientError, httpx.HTTPError, ValidationError) as e:
        _fail(str(e))

    if not result.bookings:
        console.print(f"[yellow]No bookings for {user_id}[/yellow]")
        return

    console.print(create_bookings_table(result.bookings))
    console.print(f"\n[cyan]Total:[/cyan] {result.total}")


if __name__ == "__main__":
    app()
