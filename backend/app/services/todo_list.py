"""Optimistic todo list: client of the ``/api/*-todo`` endpoints.

Toggle and delete change the local list before the request goes out. When
the endpoint reports failure, or cannot be reached, the previous list is
restored so the view never drifts from the server.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings
from app.schemas.todos import Todo, TodoActionResponse

logger = logging.getLogger(__name__)


class TodoList:
    def __init__(self, http: httpx.AsyncClient, todos: list[Todo], api_prefix: str | None = None):
        self._http = http
        self._prefix = settings.api_prefix if api_prefix is None else api_prefix
        self.todos = list(todos)
        self.error: str | None = None

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> TodoActionResponse:
        try:
            resp = await self._http.post(f"{self._prefix}/{endpoint}", json=payload)
            return TodoActionResponse.model_validate(resp.json())
        except (httpx.HTTPError, ValueError) as exc:
            return TodoActionResponse(success=False, error=str(exc) or exc.__class__.__name__)

    async def _apply(self, endpoint: str, payload: dict[str, Any], optimistic: list[Todo]) -> bool:
        previous = self.todos
        self.todos = optimistic
        result = await self._post(endpoint, payload)
        if not result.success:
            self.todos = previous
            self.error = result.error
            logger.error("Error calling %s: %s", endpoint, result.error)
            return False
        self.error = None
        return True

    async def toggle(self, todo_id: str) -> bool:
        todo = next((t for t in self.todos if t.id == todo_id), None)
        if todo is None:
            return False
        optimistic = [
            t.model_copy(update={"completed": not t.completed}) if t.id == todo_id else t
            for t in self.todos
        ]
        return await self._apply(
            "toggle-todo", {"id": todo_id, "completed": todo.completed}, optimistic
        )

    async def delete(self, todo_id: str) -> bool:
        optimistic = [t for t in self.todos if t.id != todo_id]
        return await self._apply("delete-todo", {"id": todo_id}, optimistic)
