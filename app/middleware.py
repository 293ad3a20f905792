import time
import logging
from collections import defaultdict

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .config import settings
from .exceptions import create_error_response

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    window = 60

    def __init__(self, app: ASGIApp, rate_limit: int = None):
        super().__init__(app)
        self.requests = defaultdict(list)
        self.rate_limit = rate_limit or settings.RATE_LIMIT_PER_MINUTE
        self._last_sweep = 0.0

    def _prune(self, current_time: float) -> None:
        """Drop expired timestamps, and clients with none left."""
        for ip in list(self.requests):
            recent = [t for t in self.requests[ip] if current_time - t < self.window]
            if recent:
                self.requests[ip] = recent
            else:
                del self.requests[ip]
        self._last_sweep = current_time

    async def dispatch(self, request: Request, call_next):
        client_ip = request.client.host if request.client else "unknown"

        current_time = time.time()
        if current_time - self._last_sweep >= self.window:
            self._prune(current_time)
        else:
            self.requests[client_ip] = [
                req_time for req_time in self.requests[client_ip]
                if current_time - req_time < self.window
            ]

        if len(self.requests[client_ip]) >= self.rate_limit:
            logger.warning(f"Rate limit exceeded for IP: {client_ip}")
            return JSONResponse(
                status_code=429,
                content=create_error_response("Rate limit exceeded. Please try again later."),
            )

        self.requests[client_ip].append(current_time)
        return await call_next(request)


class SecurityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Request: {request.method} {request.url.path} from {client_host}")

        response = await call_next(request)

        duration = time.time() - start_time
        logger.info(f"Response: {response.status_code} in {duration:.3f}s")

        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled error: {str(e)}", exc_info=True)
            message = f"Something went wrong: {str(e)}" if settings.DEBUG else "Something went wrong!"
            return JSONResponse(status_code=500, content=create_error_response(message))


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Enforce a hard cap on request size using Content-Length when available
        content_length = request.headers.get("content-length")
        if content_length is not None:
            try:
                size = int(content_length)
            except ValueError:
                size = 0
            if size > settings.MAX_UPLOAD_SIZE:
                return JSONResponse(
                    status_code=413,
                    content=create_error_response("Request entity too large"),
                )
        return await call_next(request)
