from loguru import logger
from supabase import create_client, Client

from app.core.config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY
from app.core.errors import ServerError

_SUPABASE: Client | None = None

def supabase_admin() -> Client:
    """Service-role client shared by storage and identity admin calls."""
    global _SUPABASE
    if _SUPABASE is not None:
        return _SUPABASE

    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        logger.error("[supabase] SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY not set")
        raise ServerError()

    _SUPABASE = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _SUPABASE
