from fastapi import APIRouter

from app.api.routes import account, blocks, cleanup, locations, nearby, presence, profile, upload
from app.modules.conversations import routes as conversations

api_router = APIRouter(prefix="/api")

api_router.include_router(presence.router, prefix="/presence", tags=["presence"])
api_router.include_router(locations.router, prefix="/locations", tags=["locations"])
api_router.include_router(nearby.router, prefix="/users", tags=["nearby"])
api_router.include_router(blocks.router, prefix="/blocks", tags=["blocks"])
api_router.include_router(cleanup.router, prefix="/cleanup", tags=["cleanup"])
api_router.include_router(account.router, prefix="/account", tags=["account"])
api_router.include_router(profile.router, prefix="/profile", tags=["profile"])
api_router.include_router(upload.router, tags=["upload"])
api_router.include_router(conversations.router)
