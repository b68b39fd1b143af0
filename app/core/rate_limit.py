from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from app.core.config import (
    GLOBAL_RATE_LIMIT,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_STORAGE_URI,
)

# application_limits are shared by every route; per-route limits stack on top
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[GLOBAL_RATE_LIMIT],
    storage_uri=RATE_LIMIT_STORAGE_URI,
    enabled=RATE_LIMIT_ENABLED,
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    logger.warning(
        f"[rate-limit] {get_remote_address(request)} {request.method} "
        f"{request.url.path} over {exc.detail}"
    )
    return JSONResponse(status_code=429, content={"error": "Rate limit exceeded"})
