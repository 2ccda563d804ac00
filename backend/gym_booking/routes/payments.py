"""Order creation, payment verification and hosted checkout endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Path
from fastapi.responses import HTMLResponse

from ..auth import require_bearer_token
from ..errors import (
    BookingConflictError,
    BookingNotFoundError,
    GymNotFoundError,
    PaymentGatewayError,
    PricingError,
)
from ..models import (
    Booking,
    BookingStatus,
    OrderRequest,
    PaymentSessionResponse,
    PaymentStatusResponse,
)
from ..models.requests import AMOUNT_TOLERANCE
from ..services import booking_service, gym_service, payment_gateway, storage_service
from ..services.payment_gateway import render_checkout_page
from ..services.pricing import quote
from ..utils.logger import logger

router = APIRouter(prefix="/api", tags=["payments"])

PAID_STATUSES = {"PAID"}
CLOSED_STATUSES = {"EXPIRED", "TERMINATED"}


async def _release_unpaid(booking: Booking) -> bool:
    """Cancel a pending booking whose gateway order was never paid.

    A paid order is activated instead and keeps blocking.

    Returns:
        True if the booking was cancelled

    Raises:
        BookingConflictError: With the activated booking if its order was paid
    """
    if booking.status != BookingStatus.PENDING or not booking.order_id:
        return False

    try:
        order_status = await payment_gateway.get_order_status(booking.order_id)
    except PaymentGatewayError as e:
        logger.warning(f"Could not check order {booking.order_id}: {str(e)}")
        return False

    if order_status in PAID_STATUSES:
        booking = await booking_service.update_status(booking.id, BookingStatus.ACTIVE)
        raise BookingConflictError(booking)

    await booking_service.cancel_booking(booking.id)
    logger.info(
        f"Released unpaid booking {booking.id} (order {booking.order_id}, status {order_status})"
    )
    return True


@router.post(
    "/createCashfreeOrder",
    response_model=PaymentSessionResponse,
    dependencies=[Depends(require_bearer_token)],
)
async def create_cashfree_order(order: OrderRequest) -> PaymentSessionResponse:
    """Reserve a booking and create its gateway order.

    The conflict check and the insert happen atomically; an overlapping live
    booking answers 409 with the conflicting booking. The user's own pending
    booking is released first when its gateway order was not paid.

    Args:
        order: Order request built at checkout

    Returns:
        Payment session id for the hosted checkout
    """
    try:
        logger.info(
            f"Creating order for user {order.user_id}: {order.selected_plan.value} "
            f"x{order.number_of_slots} at gym {order.gym_id}"
        )

        gym = await gym_service.get_gym(order.gym_id)
        expected = quote(gym, order.selected_plan, order.number_of_slots)
        if (
            abs(expected.base_amount - order.base_amount) > AMOUNT_TOLERANCE
            or abs(expected.amount - order.amount) > AMOUNT_TOLERANCE
        ):
            raise HTTPException(status_code=422, detail="Order amount does not match gym pricing")
        if order.currency != gym.currency.name:
            raise HTTPException(status_code=422, detail="Order currency does not match gym currency")

        order_id = f"order_{storage_service.generate_id()}"
        try:
            booking = await booking_service.reserve(order, order_id, gym_name=gym.gym_name)
        except BookingConflictError as e:
            if not await _release_unpaid(e.booking):
                raise
            booking = await booking_service.reserve(order, order_id, gym_name=gym.gym_name)

        try:
            session = await payment_gateway.create_order(order_id, order)
        except PaymentGatewayError:
            await booking_service.cancel_booking(booking.id)
            raise

        booking = await booking_service.attach_payment_session(
            booking.id, session.payment_session_id
        )
        logger.info(f"Order {order_id} ready for checkout (booking {booking.id})")

        return PaymentSessionResponse(
            payment_session_id=session.payment_session_id,
            order_id=order_id,
            booking_id=booking.id,
        )

    except HTTPException:
        raise
    except GymNotFoundError:
        raise HTTPException(status_code=404, detail="Gym not found")
    except PricingError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except BookingConflictError as e:
        raise HTTPException(
            status_code=409,
            detail={"conflict": True, "booking": e.booking.to_document()},
        )
    except PaymentGatewayError as e:
        logger.error(f"Payment gateway error: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error creating order: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post(
    "/verifyPayment/{order_id}",
    response_model=PaymentStatusResponse,
    dependencies=[Depends(require_bearer_token)],
)
async def verify_payment(
    order_id: str = Path(..., description="Gateway order identifier")
) -> PaymentStatusResponse:
    """Sync a booking's status with its gateway order.

    PAID activates the booking, EXPIRED or TERMINATED cancels it, anything
    else leaves it pending.
    """
    try:
        booking = await booking_service.get_by_order_id(order_id)
        order_status = await payment_gateway.get_order_status(order_id)
        logger.info(f"Order {order_id} status: {order_status}")

        if order_status in PAID_STATUSES:
            booking = await booking_service.update_status(booking.id, BookingStatus.ACTIVE)
        elif order_status in CLOSED_STATUSES:
            booking = await booking_service.update_status(booking.id, BookingStatus.CANCELLED)

        return PaymentStatusResponse(order_id=order_id, order_status=order_status, booking=booking)

    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    except PaymentGatewayError as e:
        logger.error(f"Payment gateway error: {str(e)}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error verifying order {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/checkout/{payment_session_id}", response_class=HTMLResponse)
async def checkout_page(
    payment_session_id: str = Path(..., description="Gateway payment session identifier")
) -> HTMLResponse:
    """Serve the page that redirects the browser to the hosted checkout."""
    return HTMLResponse(render_checkout_page(payment_session_id))
