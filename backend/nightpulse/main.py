"""NightPulse FastAPI Application.

Serves aggregated nightlife venues. Every error leaves the app in the same
envelope as the route responses: ``{"success": false, "error": AppError}``.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from nightpulse import __version__
from nightpulse.api import router
from nightpulse.api.routes import shutdown_services
from nightpulse.config import get_settings
from nightpulse.models import AppError, ErrorCode

logging.basicConfig(
    level=os.getenv("NIGHTPULSE_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    if settings.has_api_key:
        logger.info(f"[STARTUP] Searching venue types: {', '.join(settings.venue_types)}")
    else:
        logger.warning("[STARTUP] GOOGLE_MAPS_API_KEY is not configured; serving mock venues")
    yield
    # Closes the shared provider HTTP client
    await shutdown_services()


app = FastAPI(
    title="NightPulse API",
    description="Nightlife venues with live busyness estimates",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def error_response(status_code: int, error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error.model_dump(mode="json", exclude_none=True)},
    )


@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: Exception):
    """Malformed request bodies and query parameters."""
    return error_response(
        422,
        AppError(
            code=ErrorCode.VALIDATION_ERROR,
            message=str(exc),
            user_message="Invalid request format. Please check your input.",
        ),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return error_response(
        500,
        AppError(
            code=ErrorCode.API_ERROR,
            message=str(exc),
            user_message="Something went wrong. Please try again.",
        ),
    )


app.include_router(router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
