import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from salon_backend.fastapi.core.init_settings import global_settings
from salon_backend.fastapi.core.exceptions import CoreError
from salon_backend.fastapi.core.lifespan import lifespan
from salon_backend.fastapi.core.middleware import setup_cors
from salon_backend.fastapi.core.routers import setup_routers

logging.basicConfig(
    level=global_settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)

app = FastAPI(
    title=global_settings.APP_NAME,
    version=global_settings.APP_VERSION,
    description="Attendance ledger, overtime accounting and monthly payroll for salon staff",
    lifespan=lifespan
)


@app.exception_handler(CoreError)
async def core_error_handler(request: Request, exc: CoreError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "error": exc.error}
    )


setup_cors(app)
setup_routers(app)
