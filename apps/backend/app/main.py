"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.chat.routes import router as chat_router
from app.core.config import get_settings
from app.core.constants import MSG_INTERNAL_ERROR, MSG_INVALID_BODY, MSG_UPSTREAM_TIMEOUT
from app.core.exceptions import ErrorKind, RelayError, UpstreamError
from app.core.logging_config import configure_logging
from app.db.session import dispose_engine
from app.services.container import ServiceContainer

settings = get_settings()
logger = logging.getLogger(__name__)

# The only place an error kind becomes an HTTP status
STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.INVALID: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.UPSTREAM: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings.log_level)
    app.state.services = ServiceContainer.from_settings()
    logger.info(f"{settings.app_name} started ({settings.environment})")
    yield
    # Shutdown
    await app.state.services.aclose()
    await dispose_engine()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Relay between users, Stream Chat, and a generative AI model",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_body(exc: RelayError) -> str:
    """Client-facing message for a relay error."""
    if isinstance(exc, UpstreamError):
        if settings.expose_error_details:
            return f"{MSG_INTERNAL_ERROR}: {exc.cause}"
        return MSG_INTERNAL_ERROR
    if exc.kind is ErrorKind.TIMEOUT:
        return MSG_UPSTREAM_TIMEOUT
    return exc.message


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    status_code = STATUS_BY_KIND[exc.kind]
    if status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc.message}",
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({status_code}): {exc.message}")
    return JSONResponse(status_code=status_code, content={"error": _error_body(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    detail = errors[0].get("msg", MSG_INVALID_BODY) if errors else MSG_INVALID_BODY
    logger.info(f"{request.method} {request.url.path} invalid body: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": f"{MSG_INVALID_BODY}: {detail}"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} crashed")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": MSG_INTERNAL_ERROR},
    )


@app.get("/healthz")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "environment": settings.environment}


# Include routers
app.include_router(chat_router, tags=["Chat"])


def run() -> None:
    """Serve the API with uvicorn on the configured interface and port."""
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
