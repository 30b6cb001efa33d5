"""Auth routes: email/password login and sign-up via Supabase Auth."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.deps import (
    CurrentSession,
    clear_session_cookies,
    get_session,
    set_session_cookies,
)
from app.config import settings
from app.schemas.auth import AuthResponse, LoginRequest
from app.services import get_auth_client
from app.services.auth_service import AuthClient
from app.services.supabase_client import SupabaseError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
):
    """Sign in and store the session in cookies."""
    try:
        session = await auth.sign_in_with_password(body.email, body.password)
    except SupabaseError as exc:
        logger.info("Login failed for %s: %s", body.email, exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
        )

    set_session_cookies(response, session)
    return AuthResponse(success=True, redirect_to=settings.home_path, user=session.user)


@router.post("/signup", response_model=AuthResponse)
async def signup(
    body: LoginRequest,
    response: Response,
    auth: AuthClient = Depends(get_auth_client),
):
    """
    Register a new account.

    When the project requires e-mail confirmation no session is issued and
    the client lands on the login route after following ``redirect_to``.
    """
    try:
        session = await auth.sign_up(body.email, body.password)
    except SupabaseError as exc:
        logger.info("Sign-up failed for %s: %s", body.email, exc)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=exc.message,
        )

    if session is None:
        return AuthResponse(success=True, redirect_to=settings.login_path)
    set_session_cookies(response, session)
    return AuthResponse(success=True, redirect_to=settings.home_path, user=session.user)


@router.post("/logout", response_model=AuthResponse)
async def logout(
    response: Response,
    session: Optional[CurrentSession] = Depends(get_session),
    auth: AuthClient = Depends(get_auth_client),
):
    """Revoke the session and clear cookies."""
    if session is not None:
        try:
            await auth.sign_out(session.access_token)
        except SupabaseError as exc:
            logger.warning("Sign-out failed: %s", exc)
    clear_session_cookies(response)
    return AuthResponse(success=True, redirect_to=settings.login_path)
