"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from driver_onboarding.api.v1 import validation
from driver_onboarding.core.config import settings
from driver_onboarding.core.logging import get_logger, setup_logging
from driver_onboarding.core.tracing import setup_tracing
from driver_onboarding.validation.oracle import OracleConfig


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
    setup_tracing()
    logger = get_logger("startup")

    oracle_config = OracleConfig.from_settings(settings)
    logger.info(
        "Application starting",
        env=settings.APP_ENV,
        llm_provider=str(oracle_config.provider),
        oracle_configured=oracle_config.enabled,
        schedule_minute=settings.VALIDATION_SCHEDULE_MINUTE,
    )
    if not oracle_config.enabled:
        logger.warning("No oracle API key configured, validation passes will be skipped")
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Driver Onboarding Validation API",
    description="Asynchronous document validation for driver registrations",
    version="0.1.0",
    lifespan=lifespan,
)

API_PREFIX = "/api/v1"
app.include_router(validation.router, prefix=API_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
