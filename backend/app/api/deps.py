"""FastAPI dependency injection: Supabase session cookies & auth guards."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.schemas.auth import AuthSession, AuthUser
from app.services import get_auth_client
from app.services.auth_service import AuthClient
from app.services.supabase_client import SupabaseError

logger = logging.getLogger(__name__)

TOKEN_AUDIENCE = "authenticated"


@dataclass
class CurrentSession:
    user: AuthUser
    access_token: str


def set_session_cookies(response: Response, session: AuthSession) -> None:
    response.set_cookie(
        settings.access_cookie_name,
        session.access_token,
        max_age=session.expires_in,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    response.set_cookie(
        settings.refresh_cookie_name,
        session.refresh_token,
        max_age=settings.refresh_cookie_max_age_days * 24 * 3600,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )


def clear_session_cookies(response: Response) -> None:
    response.delete_cookie(settings.access_cookie_name)
    response.delete_cookie(settings.refresh_cookie_name)


async def _validate_token(token: str, auth: AuthClient) -> Optional[AuthUser]:
    """Resolve the user behind an access token, None if it is not usable."""
    if settings.supabase_jwt_secret:
        try:
            payload = jwt.decode(
                token,
                settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience=TOKEN_AUDIENCE,
            )
        except ExpiredSignatureError:
            logger.debug("Access token expired")
            return None
        except JWTError as exc:
            logger.info("Rejected access token: %s", exc)
            return None
        subject = payload.get("sub")
        if not subject:
            return None
        return AuthUser(id=subject, email=payload.get("email"))

    try:
        return await auth.get_user(token)
    except SupabaseError as exc:
        if exc.status_code not in (401, 403):
            logger.warning("Token validation failed: %s", exc)
        return None


async def get_session(
    request: Request,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
) -> Optional[CurrentSession]:
    """Current session from cookies, refreshing an expired access token."""
    access_token = request.cookies.get(settings.access_cookie_name)
    refresh_token = request.cookies.get(settings.refresh_cookie_name)

    if access_token:
        user = await _validate_token(access_token, auth)
        if user:
            return CurrentSession(user=user, access_token=access_token)

    if not refresh_token:
        return None

    try:
        session = await auth.refresh_session(refresh_token)
        user = session.user or await auth.get_user(session.access_token)
    except SupabaseError as exc:
        logger.info("Session refresh failed: %s", exc)
        return None

    set_session_cookies(response, session)
    logger.debug("Session refreshed for %s", user.id)
    return CurrentSession(user=user, access_token=session.access_token)


async def get_access_token(
    session: Optional[CurrentSession] = Depends(get_session),
) -> Optional[str]:
    """User token for row-level security, None to fall back to the anon key."""
    return session.access_token if session else None


async def require_session(
    session: Optional[CurrentSession] = Depends(get_session),
) -> CurrentSession:
    """API guard: 401 without a session."""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return session


async def require_page_session(
    session: Optional[CurrentSession] = Depends(get_session),
) -> CurrentSession:
    """Page guard: redirect to the login route without a session."""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_307_TEMPORARY_REDIRECT,
            detail="Login required",
            headers={"Location": settings.login_path},
        )
    return session
