# slotbook/core/middleware.py
"""Request tracing, request logging and error rendering"""
import uuid
import time
import logging
from fastapi.responses import JSONResponse
from starlette.requests import Request

from slotbook.services.booking.exceptions import BookingError, SlotConflictError

logger = logging.getLogger(__name__)


async def correlation_id_middleware(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and duration of every request"""
    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
        extra={
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "client": request.client.host if request.client else "unknown",
        }
    )

    return response


async def booking_error_handler(request: Request, exc: BookingError):
    """Render engine errors as {"detail", "error", "field"?} with their HTTP status"""
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    if isinstance(exc, SlotConflictError):
        logger.info(f"Slot conflict on {request.url.path}: {exc.reason}", extra={"correlation_id": correlation_id})
    else:
        logger.warning(
            f"{exc.error} on {request.method} {request.url.path}: {exc.message}",
            extra={"correlation_id": correlation_id}
        )

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())
