"""Auth schemas: Supabase (GoTrue) sessions and login payloads."""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthUser(BaseModel):
    id: str
    email: str | None = None


class AuthSession(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = 3600
    expires_at: int | None = None
    user: AuthUser | None = None


class AuthResponse(BaseModel):
    success: bool
    redirect_to: str | None = None
    user: AuthUser | None = None


class LoginPage(BaseModel):
    """Login view model."""
    authenticated: bool = False
    login_url: str
    signup_url: str
    redirect_to: str
