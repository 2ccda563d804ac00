"""FastAPI application entry point."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routes import bookings, gyms, payments
from .services import storage_service
from .services.storage_service import BOOKINGS, GYMS
from .utils.logger import logger

app = FastAPI(
    title="Gym Booking API",
    description="Gym records, slot bookings and hosted payment checkout",
    version="1.0.0",
    debug=settings.debug,
)

# Browser clients are the Gradio frontend and the hosted checkout redirect
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(gyms.router)
app.include_router(bookings.router)
app.include_router(payments.router)


@app.get("/health")
async def health_check():
    """Health check endpoint; needs no bearer token.

    Returns:
        Health status and the payment gateway mode
    """
    return {
        "status": "healthy",
        "service": "gym-booking",
        "paymentMode": settings.cashfree_mode,
    }


@app.get("/")
async def root():
    return {
        "message": "Gym Booking API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


@app.on_event("startup")
async def startup_event():
    """Prepare the document collections and report configuration."""
    for collection in (GYMS, BOOKINGS):
        storage_service.get_collection_directory(collection)
    logger.info(f"Gym Booking API storing documents under {storage_service.base_path}")

    logger.info(f"Cashfree mode: {settings.cashfree_mode} ({settings.cashfree_base_url})")
    if not settings.cashfree_app_id or not settings.cashfree_secret_key:
        logger.warning("Cashfree credentials are not set; order creation will fail")
    if not settings.allowed_tokens:
        logger.warning("API_TOKENS is empty; any bearer token is accepted")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Gym Booking API stopped")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gym_booking.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )
