"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from filegen import __version__
from filegen.api import files, slider
from filegen.config import get_settings
from filegen.core.exceptions import GenerationError, ValidationError, WriteError
from filegen.core.logging import configure_logging, get_logger
from filegen.middleware.request_id import RequestIDMiddleware
from filegen.middleware.timing import TimingMiddleware
from filegen.schemas.base import ErrorResponse

settings = get_settings()

# Configure structured logging
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    logger.info(
        "application_starting",
        environment=settings.environment,
        debug=settings.debug,
        chunk_size_bytes=settings.chunk_size_bytes,
        output_dir=settings.output_dir,
    )

    yield

    logger.info("application_shutdown")


app = FastAPI(
    title="File Generator API",
    description=(
        "Generates files of an exact size (up to 10 GB) filled with random "
        "bytes, zeros or a repeated hex pattern, streamed chunk by chunk."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
        "X-Request-ID",
    ],
    expose_headers=[
        "X-Request-ID",
        "X-Job-ID",
        "Content-Disposition",
    ],
)

app.add_middleware(TimingMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(ValidationError)
async def validation_error_handler(
    _request: Request, exc: ValidationError
) -> JSONResponse:
    """Invalid size, unit or hex pattern."""
    logger.info("validation_failed", error=str(exc), field=exc.field)
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error="validation_error", message=str(exc), field=exc.field
        ).model_dump(exclude_none=True),
    )


@app.exception_handler(GenerationError)
async def generation_error_handler(
    _request: Request, exc: GenerationError
) -> JSONResponse:
    """Failure of an in-progress job."""
    if isinstance(exc, WriteError):
        status_code = status.HTTP_507_INSUFFICIENT_STORAGE
        error = "write_error"
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        error = "generation_error"

    logger.error("generation_request_failed", error=str(exc), bytes_written=exc.bytes_written)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=error, message=str(exc), bytes_written=exc.bytes_written
        ).model_dump(exclude_none=True),
    )


# Include routers
app.include_router(slider.router, prefix="/api/v1")
app.include_router(files.router, prefix="/api/v1")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": "File Generator API",
        "version": __version__,
        "docs": "/docs" if settings.debug else "disabled",
    }
