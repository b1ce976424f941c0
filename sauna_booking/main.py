"""
Secret Sauna Company - booking API
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import structlog

from sauna_booking import __version__
from sauna_booking.config import settings
from sauna_booking.errors import BookingError, StoreError
from sauna_booking.api import admin, booking

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting booking API", version=__version__)
    yield
    logger.info("Shutting down booking API")


app = FastAPI(
    title="Secret Sauna Company Booking",
    description="Session availability, reservations and booking ops",
    version=__version__,
    lifespan=lifespan,
)

# Public endpoints are called from the marketing site; the ops panel sends X-Admin-Token
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Token"],
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request payload"})


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store error", path=request.url.path, error=str(exc))
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "booking", "version": __version__}


app.include_router(booking.router, prefix="/booking", tags=["Booking"])
app.include_router(admin.router, prefix="/booking/admin", tags=["Booking Ops"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sauna_booking.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
