"""FastAPI application entrypoint. No business logic; only wiring, middleware and app-wide error handlers."""

import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from yardtrack.api.v1 import router as v1_router
from yardtrack.core.config import settings
from yardtrack.services.user_mapper import MalformedInputError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="YardTrack API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.exception_handler(MalformedInputError)
def malformed_record_handler(request: Request, exc: MalformedInputError) -> JSONResponse:
    """A stored user record could not be mapped; the data is corrupt, not the request."""
    logger.error("Malformed user record on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Stored user data is malformed."},
    )


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "YardTrack API", "docs": "/docs"}
