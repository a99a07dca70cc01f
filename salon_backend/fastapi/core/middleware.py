import logging
from fastapi.middleware.cors import CORSMiddleware
from salon_backend.fastapi.core.init_settings import global_settings

logger = logging.getLogger(__name__)


def allowed_origins(settings=global_settings) -> list:
    """Front-end origin, the API's own origin and any extra CORS_ORIGINS entries."""
    origins = [settings.CLIENT_URL, settings.API_BASE_URL.rstrip("/")]
    origins.extend(origin.strip() for origin in settings.CORS_ORIGINS.split(","))
    return sorted({origin for origin in origins if origin})


def setup_cors(app):
    origins = allowed_origins()
    logger.info("CORS allowed origins: %s", origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"]
    )
