"""
Request middleware for the Resume Matching API: request ids, error mapping,
request logging and slow-request detection.
"""
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from resumematch.utils.exceptions import ResumeMatchBaseException, map_to_http_exception
from resumematch.utils.logging_config import get_logger

logger = get_logger(__name__)


def error_response(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Uniform error body: success flag, timestamp, request id and detail fields"""
    if isinstance(detail, str):
        detail = {"message": detail}
    elif not isinstance(detail, dict):
        detail = {"message": str(detail)}

    content = {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }
    return JSONResponse(status_code=status_code, content=content, headers={"X-Request-ID": request_id})


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Assigns a request id and turns engine exceptions into JSON error responses"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response

        except ResumeMatchBaseException as exc:
            logger.error(
                f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}",
                extra={
                    "request_id": request_id,
                    "error_code": exc.error_code,
                    "details": exc.details,
                }
            )
            http_exc = map_to_http_exception(exc)
            return error_response(request_id, http_exc.status_code, http_exc.detail)

        except ValidationError as exc:
            # model validation failing inside a handler, not request parsing
            logger.error(
                f"Pydantic validation error in {request.method} {request.url.path}: {exc}",
                extra={"request_id": request_id}
            )
            return error_response(request_id, 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_url=False),
            })

        except Exception as exc:
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {exc}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                },
                exc_info=True
            )
            return error_response(request_id, 500, {
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            })


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request with status and duration"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, "request_id", None)

        logger.debug(
            f"Request: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {time.time() - start_time:.3f}s",
                extra={"request_id": request_id, "exception": str(exc)}
            )
            raise

        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} "
            f"in {time.time() - start_time:.3f}s",
            extra={"request_id": request_id, "status_code": response.status_code}
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Flags slow requests and reports processing time in a response header"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        processing_time = time.time() - start_time

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "threshold": self.slow_request_threshold,
                }
            )

        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"
        return response
