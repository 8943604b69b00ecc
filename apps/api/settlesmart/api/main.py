"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from settlesmart.config import get_settings
from settlesmart.llm.client import close_completion_client
from settlesmart.llm.errors import CompletionError, ConfigurationError, UpstreamError
from settlesmart.api.routes import router


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    if not settings.openai_api_key.strip():
        logger.error("OPENAI_API_KEY is not set; every plan request will fail")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_completion_client()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="SettleSmart API - 4-week relocation onboarding checklists",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CompletionError)
async def completion_error_handler(request: Request, exc: CompletionError) -> JSONResponse:
    """Map completion failures to a generic ``{"error": ...}`` body."""
    if isinstance(exc, UpstreamError):
        logger.error(f"{request.url.path}: upstream HTTP {exc.status_code}")
    elif not isinstance(exc, ConfigurationError):
        logger.error(f"{request.url.path}: {type(exc).__name__}: {exc}")
    return JSONResponse(status_code=500, content={"error": exc.public_message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the failure and keep the ``{"error": ...}`` body shape."""
    logger.exception(f"Unhandled error in {request.url.path}: {exc!r}")
    return JSONResponse(status_code=500, content={"error": CompletionError.public_message})


# Include routes
app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "settlesmart.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
