"""Shared HTTP layer for the Supabase REST APIs (auth, PostgREST, storage)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseError(Exception):
    """A Supabase operation failed; carries the service's message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(resp: httpx.Response) -> str:
    """Pull the human-readable message out of a Supabase error body."""
    try:
        data = resp.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        for key in ("message", "msg", "error_description", "error"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return resp.reason_phrase or f"HTTP {resp.status_code}"


class SupabaseClient:
    """Base client: project URL, API key and error mapping.

    Each call opens a short-lived ``httpx.AsyncClient``. ``transport`` lets
    tests plug in an ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = (base_url or settings.supabase_url).rstrip("/")
        self._api_key = api_key if api_key is not None else settings.supabase_anon_key
        self._timeout = timeout or settings.supabase_timeout_seconds
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {access_token or self._api_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and raise ``SupabaseError`` on any failure."""
        all_headers = self._headers(access_token)
        if headers:
            all_headers.update(headers)

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method, path, headers=all_headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Supabase unreachable (%s %s): %s", method, path, exc)
            raise SupabaseError(str(exc) or exc.__class__.__name__) from exc

        if resp.is_error:
            message = _error_message(resp)
            logger.debug("Supabase %s %s -> %s: %s", method, path, resp.status_code, message)
            raise SupabaseError(message, status_code=resp.status_code)
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> Any:
        if not resp.content:
            return None
        return resp.json()
