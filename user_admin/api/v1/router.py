from fastapi import APIRouter

from user_admin.api.v1.routes.health import router as health_router
from user_admin.api.v1.routes.users import router as users_router

api_router = APIRouter()

# ─────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────

api_router.include_router(
    health_router,
    tags=["Health"],
)

api_router.include_router(
    users_router,
    prefix="/users",
    tags=["Users"],
)
