"""Todo row endpoints: JSON in, ``{success, error?}`` out (200 or 500)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from app.api.deps import get_access_token
from app.schemas.todos import (
    AddTodoRequest,
    DeleteTodoRequest,
    TodoActionResponse,
    ToggleTodoRequest,
)
from app.services import get_todo_table
from app.services.supabase_client import SupabaseError
from app.services.todo_service import TodoTable

logger = logging.getLogger(__name__)
router = APIRouter()

# Malformed JSON and pydantic validation errors are ValueErrors.
_FAILURES = (SupabaseError, ValueError)


def _failed(response: Response, message: str) -> TodoActionResponse:
    # The injected response carries any refreshed session cookies.
    response.status_code = 500
    return TodoActionResponse(success=False, error=message)


@router.post("/add-todo", response_model=TodoActionResponse, response_model_exclude_none=True)
async def add_todo(
    request: Request,
    response: Response,
    table: TodoTable = Depends(get_todo_table),
    access_token: Optional[str] = Depends(get_access_token),
):
    try:
        body = AddTodoRequest.model_validate(await request.json())
        if not body.title.strip():
            raise ValueError("Todo title must not be blank")
        await table.insert({"title": body.title}, access_token=access_token)
    except _FAILURES as exc:
        logger.error("Error adding todo: %s", exc)
        return _failed(response, "Failed to add todo")
    return TodoActionResponse(success=True)


@router.post("/delete-todo", response_model=TodoActionResponse, response_model_exclude_none=True)
async def delete_todo(
    request: Request,
    response: Response,
    table: TodoTable = Depends(get_todo_table),
    access_token: Optional[str] = Depends(get_access_token),
):
    try:
        body = DeleteTodoRequest.model_validate(await request.json())
        await table.delete(body.id, access_token=access_token)
    except _FAILURES as exc:
        logger.error("Error deleting todo: %s", exc)
        return _failed(response, "Failed to delete todo")
    return TodoActionResponse(success=True)


@router.post("/toggle-todo", response_model=TodoActionResponse, response_model_exclude_none=True)
async def toggle_todo(
    request: Request,
    response: Response,
    table: TodoTable = Depends(get_todo_table),
    access_token: Optional[str] = Depends(get_access_token),
):
    """Flip ``completed``; the body carries the state before the toggle."""
    try:
        body = ToggleTodoRequest.model_validate(await request.json())
        await table.update(body.id, {"completed": not body.completed}, access_token=access_token)
    except _FAILURES as exc:
        logger.error("Error toggling todo: %s", exc)
        return _failed(response, "Failed to toggle todo")
    return TodoActionResponse(success=True)
