"""
Centralized Error Handling and Logging System
Every failure is logged as one JSON entry and answered with the error envelope.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime
from typing import Any, Dict, Optional
from contextvars import ContextVar

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import LOG_REQUEST_BODIES, LOG_BODY_MAX_SIZE
from models.person import ErrorResponse

# Per-request trace id and the endpoint currently handling the request
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
endpoint_context_var: ContextVar[str] = ContextVar('endpoint_context', default='')

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
SENSITIVE_NAME_FRAGMENTS = ('password', 'secret', 'token', 'key', 'auth', 'credential', 'cookie')


def is_sensitive(name: str) -> bool:
    lowered = name.lower()
    return any(fragment in lowered for fragment in SENSITIVE_NAME_FRAGMENTS)


def redact(value: Any) -> Any:
    """Mask sensitive keys and truncate long strings before they reach the log"""
    if isinstance(value, dict):
        return {k: REDACTED if is_sensitive(str(k)) else redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [redact(item) for item in value]
    if isinstance(value, str) and len(value) > LOG_BODY_MAX_SIZE:
        return value[:LOG_BODY_MAX_SIZE] + "...[TRUNCATED]"
    return value


def _request_summary(request: Request) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.url.path,
        "query_params": dict(request.query_params),
        "headers": redact(dict(request.headers)),
        "client_ip": request.client.host if request.client else None,
    }


def _captured_body(request: Request) -> Optional[str]:
    body = getattr(request.state, 'captured_body', None)
    if not body:
        return None
    try:
        return redact(body.decode('utf-8'))
    except UnicodeDecodeError:
        return "DECODE_ERROR"


def log_error(
    error_type: str,
    message: str,
    request: Optional[Request] = None,
    exception: Optional[Exception] = None,
    include_traceback: bool = False,
    **context: Any
) -> str:
    """Write one structured error entry and return its trace id"""
    trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

    entry: Dict[str, Any] = {
        "timestamp": datetime.utcnow().isoformat(),
        "trace_id": trace_id,
        "error_type": error_type,
        "message": message,
    }
    if request is not None:
        entry["request"] = _request_summary(request)
        body = _captured_body(request)
        if body is not None:
            entry["request"]["body"] = body
    if exception is not None:
        entry["exception"] = {"type": type(exception).__name__, "details": str(exception)}
        if include_traceback:
            entry["exception"]["traceback"] = traceback.format_exc()
    if context:
        entry["context"] = redact(context)
    endpoint = endpoint_context_var.get('')
    if endpoint:
        entry["endpoint"] = endpoint

    logger.error(json.dumps(entry, default=str))
    return trace_id


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns a trace id per request and keeps the body for error logs"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        endpoint_context_var.set('')
        request.state.trace_id = trace_id
        request.state.captured_body = await request.body() if LOG_REQUEST_BODIES else None

        try:
            response = await call_next(request)
        except Exception as e:
            log_error(
                "unhandled_exception",
                f"Unhandled exception in request processing: {e}",
                request=request,
                exception=e,
                include_traceback=True
            )
            raise
        response.headers["X-Trace-ID"] = trace_id
        return response


def error_envelope(status_code: int, message: str) -> JSONResponse:
    """Build the JSON error envelope response"""
    content = ErrorResponse(statusCode=status_code, message=message).model_dump()
    return JSONResponse(status_code=status_code, content=content)

# Global Exception Handlers
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        log_error(f"http_{exc.status_code}", str(exc.detail), request=request)
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return error_envelope(exc.status_code, str(exc.detail))

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body decode failures are answered with HTTP 400"""
    messages = []
    for error in exc.errors():
        location = [str(loc) for loc in error.get("loc", []) if loc != "body"]
        field = " -> ".join(location) if location else "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    message = "; ".join(messages) or "Invalid request body"

    log_error("decode_error_400", message, request=request, error_count=len(messages))
    return error_envelope(400, message)

async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else is a 500 that does not expose internals"""
    log_error(
        "internal_server_error",
        f"Unhandled exception: {exc}",
        request=request,
        exception=exc,
        include_traceback=True
    )
    return error_envelope(500, "An unexpected error occurred")

def setup_error_handling(app):
    """Setup error handling for FastAPI app"""
    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling system initialized")

def set_endpoint_context(context: str):
    """Set context for current endpoint (call at start of endpoint functions)"""
    endpoint_context_var.set(context)
