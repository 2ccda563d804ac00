"""Async client for the gym booking API."""
from datetime import date
import inspect
from typing import Any, Awaitable, Callable, Dict, Optional, Union
from urllib.parse import quote

import httpx

from ..config import settings
from ..errors import APIClientError, BookingConflictError
from ..models import (
    ActiveBookingCheck,
    BookingListResponse,
    BookingWindow,
    Gym,
    GymPricing,
    OrderRequest,
    PaymentSessionResponse,
    PaymentStatusResponse,
)

TokenProvider = Callable[[], Union[str, Awaitable[str]]]


class GymBookingClient:
    """Async HTTP client for the booking API.

    Each ``async with`` block resolves a fresh bearer token and opens one
    connection pool, so an instance can be reused across user actions.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        token_provider: Optional[TokenProvider] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the API client.

        Args:
            base_url: API base URL. Defaults to settings.api_base_url
            token: Static bearer token
            token_provider: Callable (sync or async) returning a bearer token; wins over token
            timeout: Request timeout in seconds. Defaults to settings.default_timeout
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token
        self.token_provider = token_provider
        self.timeout = timeout or settings.default_timeout
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _resolve_token(self) -> str:
        if self.token_provider is None:
            return self.token or ""
        token = self.token_provider()
        if inspect.isawaitable(token):
            token = await token
        return token or ""

    async def __aenter__(self):
        """Async context manager entry."""
        token = await self._resolve_token()
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        if not self._client:
            raise RuntimeError("GymBookingClient must be used as an async context manager")

        response = await self._client.request(method, path, **kwargs)
        if response.is_error:
            raise APIClientError(response.status_code, _error_detail(response))
        return response.json()

    async def fetch_gym_document(self, gym_id: str) -> Dict[str, Any]:
        """Fetch a gym's raw JSON document."""
        return await self._request("GET", f"/api/getSingleGym/{quote(gym_id, safe='')}")

    async def get_gym(self, gym_id: str) -> Gym:
        """Fetch and validate a gym."""
        return Gym.model_validate(await self.fetch_gym_document(gym_id))

    async def fetch_pricing(self, gym_id: str) -> GymPricing:
        """Fetch a gym's rate tables, currency symbol and name."""
        return GymPricing.from_payload(gym_id, await self.fetch_gym_document(gym_id))

    async def add_gym(self, document: Dict[str, Any]) -> Gym:
        """Create a gym from a JSON document."""
        return Gym.model_validate(await self._request("POST", "/api/addGym", json=document))

    async def check_active_booking(
        self,
        user_id: str,
        gym_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ActiveBookingCheck:
        """Ask whether the user already holds a live booking at the gym."""
        params = {}
        if start is not None and end is not None:
            params = {"startDate": start.isoformat(), "endDate": end.isoformat()}

        data = await self._request(
            "GET",
            f"/api/booking-active/{quote(user_id, safe='')}/{quote(gym_id, safe='')}",
            params=params,
        )
        return ActiveBookingCheck.model_validate(data)

    async def create_order(self, order: OrderRequest) -> PaymentSessionResponse:
        """Submit an order and get the gateway payment session.

        Raises:
            BookingConflictError: If the server reserved nothing because of an overlap
            APIClientError: For any other non-success response
        """
        try:
            data = await self._request(
                "POST", "/api/createCashfreeOrder", json=order.to_document()
            )
        except APIClientError as e:
            if e.status_code == 409 and isinstance(e.detail, dict) and e.detail.get("booking"):
                raise BookingConflictError(BookingWindow.model_validate(e.detail["booking"])) from e
            raise
        return PaymentSessionResponse.model_validate(data)

    async def verify_payment(self, order_id: str) -> PaymentStatusResponse:
        """Sync a booking with its gateway order status."""
        data = await self._request("POST", f"/api/verifyPayment/{quote(order_id, safe='')}")
        return PaymentStatusResponse.model_validate(data)

    async def list_bookings(self, user_id: str) -> BookingListResponse:
        """List a user's bookings."""
        data = await self._request("GET", f"/api/bookings/{quote(user_id, safe='')}")
        return BookingListResponse.model_validate(data)

    def checkout_url(self, payment_session_id: str) -> str:
        """URL of the hosted checkout page for a payment session."""
        return f"{self.base_url}/api/checkout/{quote(payment_session_id, safe='')}"


def _error_detail(response: httpx.Response) -> Any:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and "detail" in body:
        return body["detail"]
    return body
