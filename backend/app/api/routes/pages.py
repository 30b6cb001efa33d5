"""Page view models: the data behind the index, login, todo and drive pages."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form

from app.api.deps import CurrentSession, get_access_token, get_session, require_page_session
from app.config import settings
from app.schemas.auth import LoginPage
from app.schemas.files import DrivePage
from app.schemas.todos import Todo, TodoPage
from app.services import get_storage_bucket, get_todo_table
from app.services.drive_service import DriveView
from app.services.storage_service import StorageBucket
from app.services.supabase_client import SupabaseError
from app.services.todo_service import TodoPageService, TodoTable

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/")
async def index(
    table: TodoTable = Depends(get_todo_table),
    access_token: Optional[str] = Depends(get_access_token),
):
    """Raw rows of the todo table."""
    try:
        todos: list[Todo] = await table.select(access_token=access_token)
    except SupabaseError as exc:
        logger.error("Error fetching todos: %s", exc)
        return {"todos": [], "error": exc.message}
    return {"todos": [todo.model_dump(mode="json") for todo in todos]}


@router.get("/login", response_model=LoginPage)
async def login_page(session: Optional[CurrentSession] = Depends(get_session)):
    return LoginPage(
        authenticated=session is not None,
        login_url=f"{settings.api_prefix}/auth/login",
        signup_url=f"{settings.api_prefix}/auth/signup",
        redirect_to=settings.home_path,
    )


@router.get("/supabase", response_model=TodoPage)
async def todo_page(
    session: CurrentSession = Depends(require_page_session),
    table: TodoTable = Depends(get_todo_table),
):
    """Todo list, newest first; an empty table is seeded with samples."""
    return await TodoPageService(table, access_token=session.access_token).load()


@router.post("/supabase", response_model=TodoPage)
async def todo_page_add(
    title: str = Form(""),
    session: CurrentSession = Depends(require_page_session),
    table: TodoTable = Depends(get_todo_table),
):
    """Add-todo form submission."""
    return await TodoPageService(table, access_token=session.access_token).add(title)


@router.get("/drive", response_model=DrivePage)
async def drive_page(
    session: CurrentSession = Depends(require_page_session),
    bucket: StorageBucket = Depends(get_storage_bucket),
):
    view = DriveView(bucket, access_token=session.access_token)
    await view.refresh()
    return DrivePage(bucket=bucket.bucket, files=view.files, error=view.error)
