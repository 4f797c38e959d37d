"""Shared test helpers: Supabase-style access tokens and a fake Auth API."""

import json
import uuid
from datetime import datetime, timedelta, timezone

import httpx
from jose import jwt


TEST_SUPABASE_URL = "https://project-ref.supabase.test"
TEST_ANON_KEY = "test-anon-key"
TEST_JWT_SECRET = "test-jwt-secret-0123456789abcdef0123456789"


def make_access_token(
    user_id: str,
    email: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    audience: str = "authenticated",
    secret: str = TEST_JWT_SECRET,
    **claims,
) -> str:
    """Sign a token the way Supabase Auth does (HS256, audience 'authenticated')."""
    payload = {
        "sub": user_id,
        "email": email,
        "aud": audience,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def bearer(user_id: str, email: str | None = None) -> dict:
    return {"Authorization": f"Bearer {make_access_token(user_id, email)}"}


class FakeSupabaseAuth:
    """In-memory stand-in for the Supabase Auth REST API."""

    def __init__(self):
        self.accounts: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []

    def register(self, email: str, password: str, metadata: dict | None = None) -> dict:
        account = {
            "id": str(uuid.uuid4()),
            "email": email,
            "password": password,
            "user_metadata": metadata or {},
        }
        self.accounts[email] = account
        return account

    def _session(self, account: dict) -> dict:
        return {
            "access_token": make_access_token(account["id"], account["email"]),
            "refresh_token": "refresh-" + account["id"],
            "expires_in": 3600,
            "token_type": "bearer",
            "user": {
                "id": account["id"],
                "email": account["email"],
                "user_metadata": account["user_metadata"],
            },
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/signup":
            body = json.loads(request.content)
            if body["email"] in self.accounts:
                return httpx.Response(422, json={"code": 422, "msg": "User already registered"})
            account = self.register(body["email"], body["password"], body.get("data"))
            return httpx.Response(200, json=self._session(account))

        if path == "/auth/v1/token":
            body = json.loads(request.content)
            account = self.accounts.get(body["email"])
            if account is None or account["password"] != body["password"]:
                return httpx.Response(
                    400,
                    json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                )
            return httpx.Response(200, json=self._session(account))

        if path == "/auth/v1/logout":
            return httpx.Response(204)

        return httpx.Response(404, json={"msg": "Not found"})

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

