"""
Authentication endpoints.

Credentials are handled entirely by Supabase Auth. This API keeps a local
profile per identity (role, company, onboarding state) and mirrors the
provider's access token into an HttpOnly ``session`` cookie.
"""

from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Response, status
import logging

from app.api.deps import (
    AuthClient,
    CurrentUser,
    DbSession,
    SESSION_COOKIE,
    get_access_token,
    get_or_provision_user,
)
from app.config import settings
from app.schemas.auth import (
    SignupRequest,
    SignupResponse,
    LoginRequest,
    LoginResponse,
    SessionTokens,
    UserResponse,
    OAuthUrlResponse,
    CompleteOnboardingRequest,
    CompleteOnboardingResponse,
)
from app.services.onboarding import complete_onboarding
from app.services.supabase_auth import AuthIdentity

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_SESSION_SECONDS = 3600


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(signup_data: SignupRequest, db: DbSession, auth_client: AuthClient):
    """Register with the identity provider and create a company-less profile."""
    metadata = {"first_name": signup_data.first_name, "last_name": signup_data.last_name}
    session = await auth_client.sign_up(signup_data.email, signup_data.password, metadata)

    identity = AuthIdentity(
        id=session.user.id,
        email=session.user.email or signup_data.email,
        metadata={**session.user.metadata, **metadata},
    )
    user = await get_or_provision_user(db, identity)
    return SignupResponse(user=UserResponse.from_db_user(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    response: Response,
    db: DbSession,
    auth_client: AuthClient,
):
    """Password sign-in. The access token is also set as the session cookie."""
    session = await auth_client.sign_in_with_password(login_data.email, login_data.password)
    user = await get_or_provision_user(db, session.user)

    response.set_cookie(
        key=SESSION_COOKIE,
        value=session.access_token,
        httponly=True,
        secure=settings.ENVIRONMENT != "development",
        samesite="lax",
        max_age=session.expires_in or DEFAULT_SESSION_SECONDS,
    )

    logger.info("User %s logged in", user.id)
    return LoginResponse(
        user=UserResponse.from_db_user(user),
        session=SessionTokens(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
        ),
    )


@router.post("/logout")
async def logout(
    response: Response,
    auth_client: AuthClient,
    token: Annotated[Optional[str], Depends(get_access_token)],
):
    """Revoke the provider session (if any) and clear the session cookie."""
    if token:
        await auth_client.sign_out(token)
    response.delete_cookie(key=SESSION_COOKIE)
    return {"message": "Successfully logged out"}


@router.post("/google", response_model=OAuthUrlResponse)
async def google_sign_in(auth_client: AuthClient):
    """URL that starts the Google sign-in flow at the identity provider."""
    redirect_to = f"{settings.FRONTEND_URL.rstrip('/')}/auth/callback"
    return OAuthUrlResponse(url=auth_client.oauth_authorize_url("google", redirect_to))


@router.get("/user", response_model=UserResponse)
@router.get("/profile", response_model=UserResponse)
async def get_current_user_info(current_user: CurrentUser):
    """Get current authenticated user information."""
    return UserResponse.from_db_user(current_user)


@router.post("/complete-onboarding", response_model=CompleteOnboardingResponse)
async def complete_user_onboarding(
    onboarding_data: CompleteOnboardingRequest,
    db: DbSession,
    current_user: CurrentUser,
):
    """Create the caller's company and make them its owner."""
    user, _company = await complete_onboarding(db, current_user, onboarding_data)
    return CompleteOnboardingResponse(user=UserResponse.from_db_user(user))
