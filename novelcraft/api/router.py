from fastapi import APIRouter

from novelcraft.api.endpoints import (
    auth,
    chapters,
    characters,
    passkey,
    projects,
    world_book,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(passkey.router, prefix="/auth/passkey", tags=["passkey"])
api_router.include_router(projects.router, prefix="/projects", tags=["projects"])
api_router.include_router(
    chapters.router, prefix="/projects/{project_id}/chapters", tags=["chapters"]
)
api_router.include_router(
    characters.router, prefix="/projects/{project_id}/characters", tags=["characters"]
)
api_router.include_router(
    world_book.router, prefix="/projects/{project_id}/world-book", tags=["world-book"]
)
