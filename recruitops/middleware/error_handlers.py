"""
Request-level middleware for the RecruitOps API: the JSON error envelope,
request ids, request logging and slow-request warnings.
"""
import json
import time
import traceback
import uuid
from datetime import datetime
from typing import Any, Dict

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from pydantic import ValidationError

from recruitops.utils.exceptions import RecruitOpsBaseException, map_to_http_exception
from recruitops.utils.logging_config import get_logger

logger = get_logger(__name__)

MAX_LOGGED_BODY = 10000

# Sourcing fans out to every platform and backfill walks whole collections;
# both are expected to run well past the default threshold.
SLOW_PATH_THRESHOLDS: Dict[str, float] = {
    "/api/sourcing": 20.0,
    "/api/candidates/backfill": 60.0,
    "/api/candidates/upload": 10.0,
}


def _request_context(request: Request, request_id: str, **extra) -> Dict[str, Any]:
    return {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        **extra,
    }


def error_envelope(request_id: str, status_code: int, detail: Any) -> JSONResponse:
    """Uniform failure body: ``{success, timestamp, request_id, status_code, ...detail}``"""
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "timestamp": datetime.utcnow().isoformat(),
            "request_id": request_id,
            "status_code": status_code,
            **detail,
        },
        headers={"X-Request-ID": request_id},
    )


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns every failure into the error envelope and tags responses with a request id.

    A caller-supplied ``X-Request-ID`` is reused so a sourcing run can be
    followed across the client and server logs.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra=_request_context(
                request, request_id,
                query_params=dict(request.query_params),
                client_ip=request.client.host if request.client else "unknown",
            )
        )

        try:
            response = await call_next(request)
        except RecruitOpsBaseException as exc:
            http_exc = map_to_http_exception(exc)
            # client mistakes (bad JD, unknown stage, missing candidate) are warnings
            log = logger.error if http_exc.status_code >= 500 else logger.warning
            log(
                f"{exc.__class__.__name__} in {request.method} {request.url.path}: {exc.message}",
                extra=_request_context(
                    request, request_id,
                    exception_type=exc.__class__.__name__,
                    error_code=exc.error_code,
                    details=exc.details,
                )
            )
            return error_envelope(request_id, http_exc.status_code, http_exc.detail)
        except ValidationError as exc:
            logger.error(
                f"Model validation failed in {request.method} {request.url.path}: {exc}",
                extra=_request_context(request, request_id, validation_errors=exc.errors())
            )
            return error_envelope(request_id, 400, {
                "error": "Data validation failed",
                "message": "Invalid data format or values",
                "validation_errors": exc.errors(include_url=False),
            })
        except HTTPException as exc:
            logger.warning(
                f"HTTP {exc.status_code} in {request.method} {request.url.path}: {exc.detail}",
                extra=_request_context(request, request_id, status_code=exc.status_code)
            )
            return error_envelope(request_id, exc.status_code, exc.detail)
        except Exception as exc:
            logger.error(
                f"Unhandled {exc.__class__.__name__} in {request.method} {request.url.path}: {exc}",
                extra=_request_context(
                    request, request_id,
                    exception_type=exc.__class__.__name__,
                    traceback=traceback.format_exc(),
                ),
                exc_info=True
            )
            # internals stay in the logs
            return error_envelope(request_id, 500, {
                "error": "Internal server error",
                "message": "An unexpected error occurred. Please try again later.",
            })

        logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra=_request_context(request, request_id, status_code=response.status_code)
        )
        response.headers["X-Request-ID"] = request_id
        return response


async def _describe_body(request: Request) -> Any:
    """Loggable summary of a request body.

    Uploads are reduced to their size and JSON bodies carrying a job
    description log its length instead of the full text.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/"):
        return f"<Upload: {request.headers.get('content-length', '?')} bytes>"

    try:
        body = await request.body()
    except Exception as e:
        return f"<Unable to read body: {e}>"
    if not body:
        return None
    if len(body) >= MAX_LOGGED_BODY:
        return f"<Large body: {len(body)} bytes>"

    try:
        payload = json.loads(body)
    except ValueError:
        return body.decode("utf-8", errors="ignore")[:1000]
    if isinstance(payload, dict) and isinstance(payload.get("jd"), str):
        payload = {**payload, "jd": f"<{len(payload['jd'])} chars>"}
    elif isinstance(payload, list):
        payload = f"<{len(payload)} records>"
    return payload


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Debug-level request details and an info line per response"""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', None) or request.headers.get("X-Request-ID", "unknown")

        body = await _describe_body(request) if request.method in ("POST", "PUT", "PATCH") else None
        logger.debug(
            f"Request details: {request.method} {request.url}",
            extra=_request_context(request, request_id, body=body)
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {elapsed:.3f}s",
                extra=_request_context(request, request_id, processing_time=elapsed, exception=str(exc))
            )
            raise

        elapsed = time.time() - start_time
        logger.info(
            f"Response: {request.method} {request.url.path} - {response.status_code} in {elapsed:.3f}s",
            extra=_request_context(request, request_id, status_code=response.status_code, processing_time=elapsed)
        )
        return response


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Warns about slow requests and reports timing in X-Processing-Time"""

    def __init__(self, app, slow_request_threshold: float = 2.0, path_thresholds: Dict[str, float] = None):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold
        self.path_thresholds = SLOW_PATH_THRESHOLDS if path_thresholds is None else path_thresholds

    def threshold_for(self, path: str) -> float:
        for prefix, threshold in self.path_thresholds.items():
            if path == prefix or path.startswith(prefix + "/"):
                return threshold
        return self.slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', None) or request.headers.get("X-Request-ID", "unknown")

        response = await call_next(request)

        elapsed = time.time() - start_time
        threshold = self.threshold_for(request.url.path)
        if elapsed > threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {elapsed:.3f}s",
                extra=_request_context(request, request_id, processing_time=elapsed, threshold=threshold)
            )
        else:
            logger.debug(
                f"Request performance: {request.method} {request.url.path} - {elapsed:.3f}s",
                extra=_request_context(request, request_id, processing_time=elapsed)
            )

        response.headers["X-Processing-Time"] = f"{elapsed:.3f}"
        return response
