from fastapi import APIRouter
from fedistatus.core.activitypub.actor import actor_router
from fedistatus.core.activitypub.webfinger import webfinger_router

# routers
users_router = APIRouter()
well_known_router = APIRouter()

# Actor 文件置於站台根目錄
users_router.include_router(actor_router, prefix="/users")

# 僅在 .well-known 底下提供標準發現端點
well_known_router.include_router(webfinger_router)
