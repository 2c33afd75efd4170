# villa_booking/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from villa_booking.config import ALLOWED_ORIGINS, HOLD_TTL_MINUTES, PROPERTY_TIMEZONE
from villa_booking.error_handlers import register_error_handlers
from villa_booking.logging_config import setup_logging
from villa_booking.middleware import RequestIDMiddleware
from villa_booking.routes.admin_calendar import router as admin_calendar_router
from villa_booking.routes.admin_reservations import router as admin_reservations_router
from villa_booking.routes.admin_settings import router as admin_settings_router
from villa_booking.routes.booking import router as booking_router
from villa_booking.routes.health import router as health_router
from villa_booking.routes.metrics import router as metrics_router
from villa_booking.routes.reservations import router as reservations_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Villa Booking API",
    description="Availability, pricing quotes and reservations for a single villa",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_error_handlers(app)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(booking_router, tags=["Booking"])
app.include_router(reservations_router, tags=["Reservations"])
app.include_router(admin_reservations_router, prefix="/admin", tags=["Admin"])
app.include_router(admin_calendar_router, prefix="/admin", tags=["Admin"])
app.include_router(admin_settings_router, prefix="/admin", tags=["Admin"])


@app.on_event("startup")
def startup_event() -> None:
    logger.info(
        "application_started",
        property_timezone=PROPERTY_TIMEZONE,
        hold_ttl_minutes=HOLD_TTL_MINUTES,
    )
