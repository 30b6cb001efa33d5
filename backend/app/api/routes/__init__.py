"""API route registration."""

from fastapi import APIRouter

from app.api.routes import health, auth, todos, drive, pages

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(todos.router, tags=["todos"])
api_router.include_router(drive.router, prefix="/drive", tags=["drive"])

page_router = APIRouter()

page_router.include_router(pages.router, tags=["pages"])
