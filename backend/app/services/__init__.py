"""Supabase service clients: singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from app.config import settings

if TYPE_CHECKING:
    from app.services.auth_service import AuthClient
    from app.services.storage_service import StorageBucket
    from app.services.todo_service import TodoTable

logger = logging.getLogger(__name__)

_auth_client: AuthClient | None = None
_todo_table: TodoTable | None = None
_storage_bucket: StorageBucket | None = None


async def init_services(transport: httpx.AsyncBaseTransport | None = None) -> None:
    """Create the Supabase clients shared by all requests."""
    global _auth_client, _todo_table, _storage_bucket

    from app.services.auth_service import AuthClient
    from app.services.storage_service import StorageBucket
    from app.services.todo_service import TodoTable

    if not settings.supabase_anon_key:
        logger.warning(
            "Supabase key not configured (TODODRIVE_SUPABASE_ANON_KEY); "
            "requests to %s will be rejected",
            settings.supabase_url,
        )

    _auth_client = AuthClient(transport=transport)
    _todo_table = TodoTable(transport=transport)
    _storage_bucket = StorageBucket(transport=transport)
    logger.info(
        "Supabase clients initialized (table=%s, bucket=%s)",
        settings.todos_table,
        settings.storage_bucket,
    )


async def shutdown_services() -> None:
    """Drop the client singletons."""
    global _auth_client, _todo_table, _storage_bucket
    _auth_client = None
    _todo_table = None
    _storage_bucket = None


def get_auth_client() -> AuthClient:
    if _auth_client is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _auth_client


def get_todo_table() -> TodoTable:
    if _todo_table is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _todo_table


def get_storage_bucket() -> StorageBucket:
    if _storage_bucket is None:
        raise RuntimeError("Services not initialized, call init_services() first")
    return _storage_bucket
