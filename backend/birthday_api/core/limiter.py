from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from birthday_api.config import settings
from birthday_api.core.errors import error_body

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."


def build_limiter(rate: str, storage_uri: str = "memory://", enabled: bool = True) -> Limiter:
    """
    Per-client-IP limiter shared by every route.

    Application limits count all endpoints together, so a client gets
    ``rate`` requests in total rather than per endpoint.
    """
    return Limiter(
        key_func=get_remote_address,
        application_limits=[rate],
        storage_uri=storage_uri,
        enabled=enabled,
    )


limiter = build_limiter(
    settings.RATE_LIMIT,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content=error_body(RATE_LIMIT_MESSAGE))


def install_rate_limit(app: FastAPI, app_limiter: Limiter) -> None:
    app.state.limiter = app_limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
    app.add_middleware(SlowAPIMiddleware)
