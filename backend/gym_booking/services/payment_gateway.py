"""Cashfree payment gateway client and hosted checkout page."""
import html
import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..errors import PaymentGatewayError
from ..models import OrderRequest
from ..utils.logger import logger

CASHFREE_SDK_URL = "https://sdk.cashfree.com/js/v3/cashfree.js"


@dataclass(frozen=True)
class PaymentSession:
    """Gateway order created for a checkout attempt."""

    order_id: str
    payment_session_id: str
    order_status: str = "ACTIVE"


class CashfreeGateway:
    """Async client for the Cashfree PG orders API."""

    def __init__(
        self,
        app_id: Optional[str] = None,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the gateway client.

        Args:
            app_id: Cashfree client id. Defaults to settings.cashfree_app_id
            secret_key: Cashfree client secret. Defaults to settings.cashfree_secret_key
            base_url: PG base URL. Defaults to the configured mode's URL
            api_version: x-api-version header value
            timeout: Request timeout in seconds. Defaults to settings.default_timeout
            transport: Optional httpx transport (used by tests)
        """
        self.app_id = app_id if app_id is not None else settings.cashfree_app_id
        self.secret_key = secret_key if secret_key is not None else settings.cashfree_secret_key
        self.base_url = (base_url or settings.cashfree_base_url).rstrip("/")
        self.api_version = api_version or settings.cashfree_api_version
        self.timeout = timeout or settings.default_timeout
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "x-client-id": self.app_id,
            "x-client-secret": self.secret_key,
            "x-api-version": self.api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._headers(),
            timeout=self.timeout,
            transport=self.transport,
        )

    def build_order_payload(self, order_id: str, order: OrderRequest) -> Dict[str, Any]:
        """Translate an order request into a Cashfree create-order body."""
        return {
            "order_id": order_id,
            "order_amount": round(order.amount, 2),
            "order_currency": order.currency.value,
            "customer_details": {
                "customer_id": order.user_id,
                "customer_name": order.buyer_name,
                "customer_email": order.email,
                "customer_phone": order.phone,
            },
            "order_meta": {
                "return_url": settings.payment_return_url.replace("{order_id}", order_id),
            },
            "order_note": f"{order.selected_plan.value} at {order.gym_names}",
        }

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        async with self._client() as client:
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response.json()

            except httpx.HTTPStatusError as e:
                message = _error_message(e.response)
                logger.error(f"Cashfree {method} {path} failed: HTTP {e.response.status_code} {message}")
                raise PaymentGatewayError(message, e.response.status_code) from e

            except httpx.TimeoutException as e:
                raise PaymentGatewayError(
                    f"Payment gateway timed out after {self.timeout} seconds"
                ) from e

            except httpx.RequestError as e:
                raise PaymentGatewayError(f"Payment gateway request failed: {str(e)}") from e

    async def create_order(self, order_id: str, order: OrderRequest) -> PaymentSession:
        """Create a gateway order and get its payment session.

        Args:
            order_id: Merchant order identifier
            order: Validated order request

        Returns:
            Payment session for the hosted checkout

        Raises:
            PaymentGatewayError: If the gateway rejects the order or is unreachable
        """
        data = await self._request(
            "POST", "/orders", json=self.build_order_payload(order_id, order)
        )

        session_id = data.get("payment_session_id")
        if not session_id:
            raise PaymentGatewayError("Payment gateway returned no payment_session_id")

        logger.info(f"Cashfree order created: {order_id}")
        return PaymentSession(
            order_id=data.get("order_id", order_id),
            payment_session_id=session_id,
            order_status=data.get("order_status", "ACTIVE"),
        )

    async def get_order_status(self, order_id: str) -> str:
        """Fetch an order's status (ACTIVE, PAID, EXPIRED or TERMINATED).

        Raises:
            PaymentGatewayError: If the lookup fails
        """
        data = await self._request("GET", f"/orders/{order_id}")
        return str(data.get("order_status", "")).upper()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def render_checkout_page(payment_session_id: str, mode: Optional[str] = None) -> str:
    """Render the page that hands a payment session to the Cashfree JS checkout.

    Args:
        payment_session_id: Session id from create_order
        mode: "sandbox" or "production". Defaults to settings.cashfree_mode

    Returns:
        HTML document that redirects the current tab to the hosted checkout
    """
    options = json.dumps(
        {"paymentSessionId": payment_session_id, "redirectTarget": "_self"}
    ).replace("</", "<\\/")
    sdk_mode = json.dumps(mode or settings.cashfree_mode)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>Redirecting to payment</title>
  <script src="{CASHFREE_SDK_URL}"></script>
</head>
<body>
  <p>Redirecting to payment for session {html.escape(payment_session_id)}...</p>
  <script>
    const cashfree = Cashfree({{ mode: {sdk_mode} }});
    cashfree.checkout({options});
  </script>
</body>
</html>
"""


# Global gateway instance
payment_gateway = CashfreeGateway()
