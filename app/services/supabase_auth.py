"""
Supabase Auth client.

Thin async wrapper over the GoTrue REST API (``<SUPABASE_URL>/auth/v1``).
One instance lives on ``app.state.auth_client`` for the life of the process
and is injected into routes through ``app.api.deps.get_auth_client``.

Access tokens are verified locally with the project's JWT secret when it is
configured; otherwise every verification is a round trip to ``GET /user``.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urlencode
import logging

import httpx
from jose import JWTError, jwt

from app.config import Settings
from app.exceptions import BusinessRuleError, ExternalServiceError, UnauthorizedError

logger = logging.getLogger(__name__)

SERVICE_NAME = "Auth provider"


@dataclass
class AuthIdentity:
    """The caller as the identity provider sees them."""

    id: str
    email: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_user_payload(cls, data: dict) -> "AuthIdentity":
        return cls(
            id=str(data["id"]),
            email=data.get("email"),
            metadata=data.get("user_metadata") or {},
        )

    @classmethod
    def from_claims(cls, claims: dict) -> "AuthIdentity":
        return cls(
            id=str(claims["sub"]),
            email=claims.get("email"),
            metadata=claims.get("user_metadata") or {},
        )


@dataclass
class AuthSession:
    """Result of a sign-up or password sign-in."""

    user: AuthIdentity
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class SupabaseAuthClient:
    """Async client for the Supabase Auth API."""

    JWT_ALGORITHMS = ["HS256"]

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        jwt_secret: Optional[str] = None,
        jwt_audience: str = "authenticated",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_url = f"{self.base_url}/auth/v1"
        self.jwt_secret = jwt_secret
        self.jwt_audience = jwt_audience
        self._client = httpx.AsyncClient(
            base_url=self.auth_url,
            headers={"apikey": anon_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["SupabaseAuthClient"]:
        """Build a client from settings, or None when Supabase is not configured."""
        if not settings.supabase_configured:
            return None
        return cls(
            base_url=settings.SUPABASE_URL,
            anon_key=settings.SUPABASE_ANON_KEY,
            jwt_secret=settings.SUPABASE_JWT_SECRET,
            jwt_audience=settings.SUPABASE_JWT_AUDIENCE,
            timeout=settings.AUTH_PROVIDER_TIMEOUT_SECONDS,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Auth provider request failed: %s %s (%s)", method, path, type(e).__name__)
            raise ExternalServiceError(SERVICE_NAME, "unreachable") from e

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            data = resp.json()
        except ValueError:
            return resp.text or f"HTTP {resp.status_code}"
        return (
            data.get("msg")
            or data.get("error_description")
            or data.get("message")
            or data.get("error")
            or f"HTTP {resp.status_code}"
        )

    @staticmethod
    def _session_from(data: dict) -> AuthSession:
        # Sign-up returns the bare user when email confirmation is required
        user_data = data.get("user") or data
        return AuthSession(
            user=AuthIdentity.from_user_payload(user_data),
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
        )

    async def sign_up(self, email: str, password: str, metadata: Optional[dict] = None) -> AuthSession:
        """Register a new identity. Provider-side rejections surface as 400."""
        payload = {"email": email, "password": password, "data": metadata or {}}
        resp = await self._request("POST", "/signup", json=payload)
        if resp.status_code >= 500:
            raise ExternalServiceError(SERVICE_NAME, self._error_message(resp))
        if resp.status_code >= 400:
            raise BusinessRuleError(self._error_message(resp))
        logger.info("Auth identity registered")
        return self._session_from(resp.json())

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        """Password grant. Any rejected credential pair is a uniform 401."""
        resp = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if resp.status_code >= 500:
            raise ExternalServiceError(SERVICE_NAME, self._error_message(resp))
        if resp.status_code >= 400:
            raise UnauthorizedError("Invalid email or password")
        return self._session_from(resp.json())

    async def sign_out(self, access_token: str) -> None:
        """Revoke the session behind ``access_token``. Already-invalid tokens are ignored."""
        resp = await self._request(
            "POST", "/logout", headers={"Authorization": f"Bearer {access_token}"}
        )
        if resp.status_code >= 500:
            raise ExternalServiceError(SERVICE_NAME, self._error_message(resp))
        if resp.status_code >= 400:
            logger.info("Sign-out for an already-invalid token (HTTP %d)", resp.status_code)

    async def get_user(self, access_token: str) -> AuthIdentity:
        """Resolve an access token to its identity.

        Raises UnauthorizedError for any invalid or expired token.
        """
        if self.jwt_secret:
            return self._decode_token(access_token)

        resp = await self._request(
            "GET", "/user", headers={"Authorization": f"Bearer {access_token}"}
        )
        if resp.status_code >= 500:
            raise ExternalServiceError(SERVICE_NAME, self._error_message(resp))
        if resp.status_code >= 400:
            raise UnauthorizedError()
        return AuthIdentity.from_user_payload(resp.json())

    def _decode_token(self, access_token: str) -> AuthIdentity:
        try:
            claims = jwt.decode(
                access_token,
                self.jwt_secret,
                algorithms=self.JWT_ALGORITHMS,
                audience=self.jwt_audience,
            )
        except JWTError:
            # Never log the token or its claims
            logger.warning("Access token rejected")
            raise UnauthorizedError()
        if not claims.get("sub"):
            raise UnauthorizedError()
        return AuthIdentity.from_claims(claims)

    def oauth_authorize_url(self, provider: str, redirect_to: str) -> str:
        """URL the browser follows to start a third-party sign-in."""
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self.auth_url}/authorize?{query}"
