import logging
import time
from collections import defaultdict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

# Paths that get the stricter per-IP limit
AUTH_PATHS = ("/auth/login", "/auth/register", "/auth/worker-signup", "/invites/validate")


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limit_per_minute: int = 60, auth_limit_per_minute: int = 30):
        super().__init__(app)
        self.limit = limit_per_minute
        self.auth_limit = auth_limit_per_minute
        # In-memory store: IP -> [timestamp1, timestamp2, ...]
        self.requests = defaultdict(list)

    async def dispatch(self, request: Request, call_next):
        if self.limit <= 0:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.time()

        # Drop requests older than the 60s window
        self.requests[client_ip] = [t for t in self.requests[client_ip] if now - t < 60]

        path = request.url.path
        limit = self.limit
        if request.method == "POST" and any(p in path for p in AUTH_PATHS):
            limit = min(self.limit, self.auth_limit)

        if len(self.requests[client_ip]) >= limit:
            logger.warning(f"Rate limit hit for {client_ip} on {path}")
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please try again later."}
            )

        self.requests[client_ip].append(now)

        response = await call_next(request)
        return response
