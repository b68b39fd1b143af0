from typing import Optional, Dict, Any

import httpx
from fastapi import Header
from jose import jwt, JWTError
from loguru import logger

from app.core.config import (
    AUTH_TIMEOUT_SECONDS,
    AUTH_VERIFY_MODE,
    SUPABASE_JWT_SECRET,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_URL,
)
from app.core.errors import ServerError, Unauthenticated


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _get_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise Unauthenticated("Missing or invalid authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthenticated("Missing or invalid authorization header")

    token = parts[1].strip()
    if not token:
        raise Unauthenticated("Missing bearer token")

    return token


# ------------------------------------------------------------
# Verification Modes
# ------------------------------------------------------------
def _introspect_token(token: str) -> Dict[str, Any]:
    """
    Ask Supabase Auth who the token belongs to.
    Returns the user record; only its id is used.
    """
    try:
        resp = httpx.get(
            f"{SUPABASE_URL}/auth/v1/user",
            headers={
                "Authorization": f"Bearer {token}",
                "apikey": SUPABASE_SERVICE_ROLE_KEY,
            },
            timeout=AUTH_TIMEOUT_SECONDS,
        )
    except httpx.TimeoutException:
        logger.error("[auth] identity service timed out")
        raise ServerError()
    except httpx.HTTPError as e:
        logger.error(f"[auth] identity service unreachable: {e}")
        raise ServerError()

    if resp.status_code >= 500:
        logger.error(f"[auth] identity service error: HTTP {resp.status_code}")
        raise ServerError()

    if resp.status_code != 200:
        raise Unauthenticated("Invalid token")

    try:
        return resp.json()
    except ValueError:
        logger.error("[auth] identity service returned non-JSON response")
        raise ServerError()


def _verify_jwt_hs256(token: str) -> Dict[str, Any]:
    """
    Local HS256 verification using SUPABASE_JWT_SECRET
    """
    if not SUPABASE_JWT_SECRET:
        logger.error("[auth] SUPABASE_JWT_SECRET not set")
        raise ServerError()

    try:
        payload = jwt.decode(
            token,
            SUPABASE_JWT_SECRET,
            algorithms=["HS256"],
            options={"verify_aud": False},
        )
    except JWTError:
        raise Unauthenticated("Invalid or expired token")

    return {"id": payload.get("sub")}


def verify_token(token: str) -> str:
    if AUTH_VERIFY_MODE == "introspect":
        user = _introspect_token(token)
    elif AUTH_VERIFY_MODE == "hs256":
        user = _verify_jwt_hs256(token)
    else:
        logger.error(f"[auth] invalid AUTH_VERIFY_MODE: {AUTH_VERIFY_MODE}")
        raise ServerError()

    user_id = user.get("id")
    if not user_id:
        raise Unauthenticated("Invalid token")

    return str(user_id)


# ------------------------------------------------------------
# Main Dependency
# ------------------------------------------------------------
def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
) -> str:
    token = _get_bearer_token(authorization)
    user_id = verify_token(token)
    logger.debug(f"[auth] user_id={user_id}")
    return user_id
