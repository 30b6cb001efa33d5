"""Todo table access (PostgREST) and the todo page flow."""

from __future__ import annotations

import logging
from typing import Any

from app.config import settings
from app.schemas.todos import Todo, TodoPage
from app.services.supabase_client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)

SAMPLE_TODOS = (
    "Finish project integration",
    "Test the todo app",
    "Polish the user experience",
)


class TodoTable(SupabaseClient):
    """CRUD on a single table via ``/rest/v1/<table>``."""

    def __init__(self, table: str | None = None, **kwargs: Any):
        super().__init__(**kwargs)
        self.table = table or settings.todos_table

    @property
    def _path(self) -> str:
        return f"/rest/v1/{self.table}"

    async def select(
        self,
        order_by: str = "created_at",
        ascending: bool = False,
        access_token: str | None = None,
    ) -> list[Todo]:
        direction = "asc" if ascending else "desc"
        resp = await self._request(
            "GET",
            self._path,
            access_token=access_token,
            params={"select": "*", "order": f"{order_by}.{direction}"},
        )
        return [Todo.model_validate(row) for row in resp.json()]

    async def insert(
        self,
        rows: dict[str, Any] | list[dict[str, Any]],
        access_token: str | None = None,
    ) -> list[Todo]:
        resp = await self._request(
            "POST",
            self._path,
            access_token=access_token,
            headers={"Prefer": "return=representation"},
            json=rows,
        )
        return [Todo.model_validate(row) for row in self._json(resp) or []]

    async def update(
        self,
        todo_id: str,
        values: dict[str, Any],
        access_token: str | None = None,
    ) -> list[Todo]:
        resp = await self._request(
            "PATCH",
            self._path,
            access_token=access_token,
            headers={"Prefer": "return=representation"},
            params={"id": f"eq.{todo_id}"},
            json=values,
        )
        return [Todo.model_validate(row) for row in self._json(resp) or []]

    async def delete(self, todo_id: str, access_token: str | None = None) -> None:
        await self._request(
            "DELETE",
            self._path,
            access_token=access_token,
            params={"id": f"eq.{todo_id}"},
        )


class TodoPageService:
    """Loads and extends the todo list shown on the todo page."""

    def __init__(self, table: TodoTable, access_token: str | None = None):
        self._table = table
        self._token = access_token

    async def load(self) -> TodoPage:
        """Fetch todos newest first; seed sample rows into an empty table."""
        try:
            try:
                todos = await self._table.select(access_token=self._token)
            except SupabaseError as exc:
                logger.warning("Fetching todos failed: %s", exc.message)
                return TodoPage(error=exc.message)

            if not todos and settings.seed_sample_todos:
                await self._table.insert(
                    [{"title": title} for title in SAMPLE_TODOS],
                    access_token=self._token,
                )
                todos = await self._table.select(access_token=self._token)
                logger.info("Seeded %d sample todos", len(SAMPLE_TODOS))

            return TodoPage(todos=todos)
        except SupabaseError as exc:
            logger.error("Error fetching todos: %s", exc)
            return TodoPage(error="Failed to fetch todos")

    async def add(self, title: str) -> TodoPage:
        """Insert a todo and reload. Blank titles are ignored."""
        if not title.strip():
            return await self.load()
        try:
            await self._table.insert({"title": title}, access_token=self._token)
        except SupabaseError as exc:
            logger.error("Error adding todo: %s", exc)
            page = await self.load()
            page.error = "Failed to add todo"
            return page
        return await self.load()
