"""Todo schemas: rows of the ``todos`` table and endpoint payloads."""

from datetime import datetime

from pydantic import BaseModel


class Todo(BaseModel):
    id: str
    title: str
    completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AddTodoRequest(BaseModel):
    title: str


class DeleteTodoRequest(BaseModel):
    id: str


class ToggleTodoRequest(BaseModel):
    id: str
    completed: bool  # state before the toggle


class TodoActionResponse(BaseModel):
    success: bool
    error: str | None = None


class TodoPage(BaseModel):
    """Todo page view model."""
    todos: list[Todo] = []
    error: str | None = None
