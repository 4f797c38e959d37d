"""
Tests for the auth endpoints (/api/auth): signup, login, logout, Google
sign-in URL, the current-user profile and onboarding.
"""
from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy import select, func

from app.models.company import Company
from app.models.user import User
from tests.helpers import bearer, make_access_token
from tests.factories import SignupFactory

AUTH_PREFIX = "/api/auth"


class TestSignup:

    @pytest.mark.asyncio
    async def test_signup_creates_company_less_user(self, client: AsyncClient, test_db, fake_supabase):
        payload = SignupFactory(firstName="Dana", lastName="Reyes")
        response = await client.post(f"{AUTH_PREFIX}/signup", json=payload)

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == payload["email"]
        assert user["firstName"] == "Dana"
        assert user["lastName"] == "Reyes"
        assert user["companyId"] is None
        assert user["hasCompletedOnboarding"] is False
        assert user["isOwner"] is False

        assert payload["email"] in fake_supabase.accounts
        row = (await test_db.execute(select(User).where(User.id == user["id"]))).scalar_one()
        assert row.company_id is None

    @pytest.mark.asyncio
    async def test_signup_duplicate_email_rejected(self, client: AsyncClient, fake_supabase):
        payload = SignupFactory()
        fake_supabase.register(payload["email"], "whatever1")

        response = await client.post(f"{AUTH_PREFIX}/signup", json=payload)

        assert response.status_code == 400
        assert response.json()["detail"] == "User already registered"

    @pytest.mark.asyncio
    async def test_signup_short_password_rejected(self, client: AsyncClient, fake_supabase):
        response = await client.post(f"{AUTH_PREFIX}/signup", json=SignupFactory(password="abc"))

        assert response.status_code == 422
        assert fake_supabase.requests == []


class TestLogin:

    @pytest.mark.asyncio
    async def test_login_returns_session_and_sets_cookie(self, client: AsyncClient, fake_supabase):
        fake_supabase.register("dispatch@acme-hvac.test", "correct-horse", {"first_name": "Pat"})

        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "dispatch@acme-hvac.test", "password": "correct-horse"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "dispatch@acme-hvac.test"
        assert data["user"]["firstName"] == "Pat"
        assert data["session"]["accessToken"]
        assert data["session"]["tokenType"] == "bearer"
        set_cookie = response.headers["set-cookie"]
        assert "session=" in set_cookie
        assert "httponly" in set_cookie.lower()

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client: AsyncClient, fake_supabase):
        fake_supabase.register("dispatch@acme-hvac.test", "correct-horse")

        response = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "dispatch@acme-hvac.test", "password": "wrong"},
        )

        assert response.status_code == 401
        assert response.headers["content-type"].startswith("application/problem+json")
        assert response.json()["detail"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_session_cookie_authenticates(self, client: AsyncClient, fake_supabase):
        fake_supabase.register("dispatch@acme-hvac.test", "correct-horse")
        login = await client.post(
            f"{AUTH_PREFIX}/login",
            json={"email": "dispatch@acme-hvac.test", "password": "correct-horse"},
        )
        token = login.json()["session"]["accessToken"]

        response = await client.get(f"{AUTH_PREFIX}/user", headers={"Cookie": f"session={token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "dispatch@acme-hvac.test"


class TestLogout:

    @pytest.mark.asyncio
    async def test_logout_revokes_and_clears_cookie(self, authenticated_client: AsyncClient, fake_supabase):
        response = await authenticated_client.post(f"{AUTH_PREFIX}/logout")

        assert response.status_code == 200
        assert "/auth/v1/logout" in fake_supabase.paths()
        assert 'session=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]

    @pytest.mark.asyncio
    async def test_logout_without_token(self, client: AsyncClient, fake_supabase):
        response = await client.post(f"{AUTH_PREFIX}/logout")

        assert response.status_code == 200
        assert fake_supabase.requests == []


class TestGoogle:

    @pytest.mark.asyncio
    async def test_google_returns_provider_url(self, client: AsyncClient):
        response = await client.post(f"{AUTH_PREFIX}/google")

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith("https://project-ref.supabase.test/auth/v1/authorize?")
        assert "provider=google" in url
        assert "redirect_to=" in url


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_get_user_profile(self, authenticated_client: AsyncClient, test_user: User):
        response = await authenticated_client.get(f"{AUTH_PREFIX}/user")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == test_user.id
        assert data["companyId"] == test_user.company_id
        assert data["role"] == "admin"
        assert data["isOwner"] is True
        assert data["hasCompletedOnboarding"] is True
        assert data["name"] == "Test Owner"

    @pytest.mark.asyncio
    async def test_profile_matches_user(self, authenticated_client: AsyncClient):
        user = await authenticated_client.get(f"{AUTH_PREFIX}/user")
        profile = await authenticated_client.get(f"{AUTH_PREFIX}/profile")

        assert profile.status_code == 200
        assert profile.json() == user.json()

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get(f"{AUTH_PREFIX}/user")

        assert response.status_code == 401
        assert response.json()["detail"] == "Could not validate credentials"

    @pytest.mark.asyncio
    async def test_invalid_and_expired_tokens_look_the_same(self, client: AsyncClient, test_user: User):
        garbage = await client.get(
            f"{AUTH_PREFIX}/user", headers={"Authorization": "Bearer not-a-jwt"}
        )
        expired = await client.get(
            f"{AUTH_PREFIX}/user",
            headers={"Authorization": f"Bearer {make_access_token(test_user.id, expires_in=timedelta(minutes=-5))}"},
        )
        forged = await client.get(
            f"{AUTH_PREFIX}/user",
            headers={"Authorization": f"Bearer {make_access_token(test_user.id, secret='x' * 40)}"},
        )

        for response in (garbage, expired, forged):
            assert response.status_code == 401
            assert response.json()["detail"] == "Could not validate credentials"

    @pytest.mark.asyncio
    async def test_unknown_identity_is_provisioned(self, client: AsyncClient, test_db):
        response = await client.get(
            f"{AUTH_PREFIX}/user",
            headers=bearer("google-user-1", "first.timer@gmail.test"),
        )

        assert response.status_code == 200
        assert response.json()["companyId"] is None
        count = await test_db.execute(select(func.count(User.id)).where(User.id == "google-user-1"))
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_company_less_user_blocked_from_tenant_data(self, client: AsyncClient):
        response = await client.get("/api/customers", headers=bearer("new-user-1", "new@example.com"))

        assert response.status_code == 400
        assert response.json()["detail"] == "User not associated with a company"


class TestOnboarding:

    @pytest.mark.asyncio
    async def test_solo_onboarding(self, client: AsyncClient, test_db):
        headers = bearer("new-user-1", "jamie@example.com")

        response = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"teamSize": "solo", "companyName": "Acme HVAC"},
            headers=headers,
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "solo_owner"
        assert user["isOwner"] is True
        assert user["hasCompletedOnboarding"] is True
        assert user["companyId"] == "company_new-user-1"

        companies = (await test_db.execute(select(Company))).scalars().all()
        assert len(companies) == 1
        assert companies[0].id == "company_new-user-1"
        assert companies[0].name == "Acme HVAC"
        assert companies[0].is_solo is True

    @pytest.mark.asyncio
    async def test_team_onboarding_defaults(self, client: AsyncClient, test_db):
        response = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"teamSize": "small", "fullName": "Jamie Lee Ortiz"},
            headers=bearer("new-user-2", "jamie.ortiz@example.com"),
        )

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["role"] == "admin"
        assert user["firstName"] == "Jamie"
        assert user["lastName"] == "Lee Ortiz"

        company = (await test_db.execute(select(Company))).scalar_one()
        assert company.name == "jamie.ortiz HVAC Services"
        assert company.is_solo is False

    @pytest.mark.asyncio
    async def test_is_solo_flag_accepted(self, client: AsyncClient):
        response = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"isSolo": True},
            headers=bearer("new-user-3", "solo@example.com"),
        )

        assert response.status_code == 200
        assert response.json()["user"]["role"] == "solo_owner"

    @pytest.mark.asyncio
    async def test_rerun_is_rejected_without_second_company(self, client: AsyncClient, test_db):
        headers = bearer("new-user-1", "jamie@example.com")
        first = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"teamSize": "solo", "companyName": "Acme HVAC"},
            headers=headers,
        )
        assert first.status_code == 200

        second = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"teamSize": "large", "companyName": "Acme HVAC Again"},
            headers=headers,
        )

        assert second.status_code == 409
        count = await test_db.execute(select(func.count(Company.id)))
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_team_size_or_is_solo_required(self, client: AsyncClient):
        response = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding",
            json={"companyName": "Acme HVAC"},
            headers=bearer("new-user-4", "x@example.com"),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_onboarding_requires_auth(self, client: AsyncClient):
        response = await client.post(
            f"{AUTH_PREFIX}/complete-onboarding", json={"teamSize": "solo"}
        )

        assert response.status_code == 401
