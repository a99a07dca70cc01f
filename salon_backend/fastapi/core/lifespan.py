import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from salon_backend.fastapi.core.init_settings import global_settings
from salon_backend.fastapi.dependencies.database import init_db

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the database tables
    init_db()
    logger.info(
        "%s %s started (standard day: %s min, timezone: %s)",
        global_settings.APP_NAME,
        global_settings.APP_VERSION,
        global_settings.STANDARD_DAILY_MINUTES,
        global_settings.BUSINESS_TIMEZONE,
    )

    yield

    logger.info("%s shutting down", global_settings.APP_NAME)
