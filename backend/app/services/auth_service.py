"""Supabase Auth (GoTrue) client: password login, sign-up, session refresh."""

from __future__ import annotations

import logging

from app.schemas.auth import AuthSession, AuthUser
from app.services.supabase_client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)


class AuthClient(SupabaseClient):
    """Email + password auth against ``/auth/v1``."""

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        resp = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return AuthSession.model_validate(resp.json())

    async def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user.

        Returns None when the project requires e-mail confirmation, in which
        case Supabase answers with the bare user and no session.
        """
        resp = await self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password},
        )
        data = resp.json()
        if not data.get("access_token"):
            logger.info("Sign-up for %s pending e-mail confirmation", email)
            return None
        return AuthSession.model_validate(data)

    async def get_user(self, access_token: str) -> AuthUser:
        resp = await self._request("GET", "/auth/v1/user", access_token=access_token)
        return AuthUser.model_validate(resp.json())

    async def refresh_session(self, refresh_token: str) -> AuthSession:
        resp = await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )
        return AuthSession.model_validate(resp.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session server-side. An already invalid token is not an error."""
        try:
            await self._request("POST", "/auth/v1/logout", access_token=access_token)
        except SupabaseError as exc:
            if exc.status_code not in (401, 403, 404):
                raise
