"""Entry point for the gateway service."""

import time
import uuid
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from common.constants import CORS_HEADERS, SERVICE_NAME, SERVICE_VERSION
from common.logging_config import setup_logging
from engine.exceptions import (
    NoBodyError,
    PayloadTooLargeError,
    StreamReadFailedError,
    ThroughputError,
)
from engine.limits import LimitsPolicy
from gateway.config import GATEWAY_HOST, GATEWAY_PORT, GATEWAY_RELOAD, load_limits
from gateway.routes.legacy_routes import router as legacy_router
from gateway.routes.transfer_routes import router as transfer_router
from gateway.schemas.transfer import ErrorResponse, HealthResponse, VersionResponse

logger = setup_logging('gateway')
setup_logging('engine')


async def cors_headers(request: Request, call_next):
    """
    Answer preflight requests directly and attach CORS headers to every response.
    """
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)

    response = await call_next(request)
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


async def log_requests(request: Request, call_next):
    """
    Middleware to log all HTTP requests and responses.

    For streaming downloads the duration covers the time to first byte only.
    """
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()

    logger.info(
        f"Request started: {request.method} {request.url.path} [request_id={request_id}]"
    )

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} "
        f"status={response.status_code} duration={duration:.3f}s [request_id={request_id}]"
    )

    response.headers["X-Request-ID"] = request_id

    return response


async def no_body_handler(request: Request, exc: NoBodyError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"No body error: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(detail=str(exc), code="NO_BODY").model_dump(exclude_none=True)
    )


async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Payload too large: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        content=ErrorResponse(
            detail=str(exc),
            code="PAYLOAD_TOO_LARGE",
            bytes_received=exc.bytes_received,
        ).model_dump(exclude_none=True)
    )


async def stream_read_failed_handler(request: Request, exc: StreamReadFailedError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.warning(
        f"Stream read failed: {exc} [request_id={request_id}] path={request.url.path}"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            detail=str(exc),
            code="STREAM_READ_FAILED",
            bytes_received=exc.bytes_received,
        ).model_dump(exclude_none=True)
    )


async def throughput_exception_handler(request: Request, exc: ThroughputError):
    request_id = getattr(request.state, 'request_id', 'unknown')
    logger.error(
        f"Engine exception: {exc} [request_id={request_id}] path={request.url.path}",
        exc_info=True
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(detail=str(exc), code="INTERNAL_ERROR").model_dump(exclude_none=True)
    )


async def root():
    """
    Plain text banner.
    """
    return PlainTextResponse(f"{SERVICE_NAME} {SERVICE_VERSION}")


async def health_check():
    """
    Health check endpoint for load balancers and the probe client.
    """
    return HealthResponse(ts=int(time.time() * 1000))


async def version():
    return VersionResponse(name=SERVICE_NAME, version=SERVICE_VERSION)


def create_app(limits: Optional[LimitsPolicy] = None) -> FastAPI:
    """
    Build the gateway application.

    Args:
        limits: Limits policy to serve with; read from the environment when None

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Throughput Probe Gateway",
        description="Streams synthetic bytes to measure upload and download throughput",
        version=SERVICE_VERSION
    )
    app.state.limits = limits if limits is not None else load_limits()
    logger.info(f"Gateway limits: {app.state.limits}")

    app.middleware("http")(cors_headers)
    app.middleware("http")(log_requests)

    app.add_exception_handler(NoBodyError, no_body_handler)
    app.add_exception_handler(PayloadTooLargeError, payload_too_large_handler)
    app.add_exception_handler(StreamReadFailedError, stream_read_failed_handler)
    app.add_exception_handler(ThroughputError, throughput_exception_handler)

    app.include_router(transfer_router)
    app.include_router(legacy_router)

    app.add_api_route("/", root, methods=["GET"])
    app.add_api_route("/health", health_check, methods=["GET"], response_model=HealthResponse)
    app.add_api_route("/version", version, methods=["GET"], response_model=VersionResponse)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "gateway.main:app",
        host=GATEWAY_HOST,
        port=GATEWAY_PORT,
        reload=GATEWAY_RELOAD
    )


if __name__ == "__main__":
    main()
