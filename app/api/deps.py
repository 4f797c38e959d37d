"""
FastAPI Dependencies

Provides dependency injection for database sessions, the identity provider
client, authentication and tenant resolution.

SECURITY NOTES:
- Access tokens and their claims are never logged
- Bearer token is the primary auth method (SPA-friendly, no CSRF needed)
- The ``session`` cookie set at login is accepted as a fallback
- Every authentication failure is the same 401
"""

from typing import Annotated, Optional
from fastapi import Depends, Cookie, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select
import logging

from app.database import get_db
from app.exceptions import ConflictError, ExternalServiceError, UnauthorizedError
from app.models.user import User, UserRole
from app.services.supabase_auth import AuthIdentity, SupabaseAuthClient
from app.services.tenancy import require_company

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"

# HTTP Bearer - primary auth method
security = HTTPBearer(auto_error=False)


def get_auth_client(request: Request) -> SupabaseAuthClient:
    """The identity provider client built in the application lifespan."""
    client = getattr(request.app.state, "auth_client", None)
    if client is None:
        raise ExternalServiceError("Auth provider", "not configured", status_code=503)
    return client


AuthClient = Annotated[SupabaseAuthClient, Depends(get_auth_client)]
DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_access_token(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
    session_token: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    if credentials:
        return credentials.credentials
    return session_token or None


def _names_from_metadata(metadata: dict) -> tuple[Optional[str], Optional[str]]:
    first = metadata.get("first_name")
    last = metadata.get("last_name")
    if first or last:
        return first, last
    # Google identities carry a single display name
    full = (metadata.get("full_name") or metadata.get("name") or "").strip()
    if not full:
        return None, None
    parts = full.split(None, 1)
    return parts[0], (parts[1] if len(parts) > 1 else None)


def user_from_identity(identity: AuthIdentity) -> User:
    """A fresh, company-less local profile for a provider identity."""
    first_name, last_name = _names_from_metadata(identity.metadata)
    return User(
        id=identity.id,
        email=identity.email,
        first_name=first_name,
        last_name=last_name,
        profile_image_url=identity.metadata.get("avatar_url"),
        role=UserRole.admin.value,
        is_owner=False,
        has_completed_onboarding=False,
    )


async def get_or_provision_user(db: AsyncSession, identity: AuthIdentity) -> User:
    """Load the local profile for ``identity``, creating it on first sight."""
    result = await db.execute(select(User).where(User.id == identity.id))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = user_from_identity(identity)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # A concurrent request may have provisioned the same identity
        result = await db.execute(select(User).where(User.id == identity.id))
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing
        logger.warning("Provisioning rejected for identity %s: email already in use", identity.id)
        raise ConflictError("Email is already registered to another account")

    await db.refresh(user)
    logger.info("Provisioned local user %s", user.id)
    return user


async def get_current_user(
    db: DbSession,
    auth_client: AuthClient,
    token: Annotated[Optional[str], Depends(get_access_token)],
) -> User:
    """
    Resolve the caller from their access token.

    SECURITY:
    - Missing, malformed and expired tokens all produce the same 401
    - Token payloads are NOT logged
    """
    if not token:
        raise UnauthorizedError()

    identity = await auth_client.get_user(token)
    user = await get_or_provision_user(db, identity)

    logger.debug("User authenticated", extra={"user_id": user.id})
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


async def get_company_id(current_user: CurrentUser) -> str:
    """Company of the caller; 400 for users who have not onboarded yet."""
    return require_company(current_user)


CompanyId = Annotated[str, Depends(get_company_id)]
