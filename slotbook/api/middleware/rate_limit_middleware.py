# ===== slotbook/api/middleware/rate_limit_middleware.py =====
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Dict, List
import time


class PublicWriteRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Per-client sliding window on unauthenticated write endpoints
    (booking submission, token actions). Reads are not limited.
    """

    def __init__(self, app, requests_per_minute: int = 30, path_prefix: str = "/api/v1/public/"):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.path_prefix = path_prefix
        self.request_times: Dict[str, List[float]] = {}  # per process; put behind Redis when scaling out

    async def dispatch(self, request: Request, call_next):
        if request.method != "POST" or not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_id = request.client.host if request.client else "unknown"
        current_time = time.monotonic()

        recent = [t for t in self.request_times.get(client_id, []) if current_time - t < 60.0]

        if len(recent) >= self.requests_per_minute:
            self.request_times[client_id] = recent
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Too many requests. Please wait a moment and try again.",
                    "error": "rate_limited",
                    "retry_after": 60
                },
                headers={"Retry-After": "60"}
            )

        recent.append(current_time)
        self.request_times[client_id] = recent

        return await call_next(request)
