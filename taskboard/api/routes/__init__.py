from fastapi import APIRouter

from taskboard.api.routes import auth, health, tasks, users

# Main API router
router = APIRouter()

# Register sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(auth.router, tags=["authentication"])
router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
router.include_router(users.router, prefix="/users", tags=["users"])
