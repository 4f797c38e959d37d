from pydantic import EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional, Literal

from app.models.user import UserRole
from app.schemas.types import CamelModel


TeamSize = Literal["solo", "small", "large"]


class SignupRequest(CamelModel):
    """Credential sign-up; the identity itself is created by Supabase."""

    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """Profile returned by /auth/user, signup, login and onboarding."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None
    role: UserRole
    company_id: Optional[str] = None
    is_owner: bool
    has_completed_onboarding: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_db_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.full_name or None,
            role=user.role,
            company_id=user.company_id,
            is_owner=user.is_owner,
            has_completed_onboarding=user.has_completed_onboarding,
            created_at=user.created_at,
        )


class SessionTokens(CamelModel):
    """Provider session handed back to the SPA."""

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"


class SignupResponse(CamelModel):
    message: str = "User created successfully"
    user: UserResponse


class LoginResponse(CamelModel):
    message: str = "Login successful"
    user: UserResponse
    session: SessionTokens


class OAuthUrlResponse(CamelModel):
    url: str


class CompleteOnboardingRequest(CamelModel):
    """Onboarding form.

    Either ``team_size`` or ``is_solo`` must be given; ``team_size`` wins when
    both are present.
    """

    team_size: Optional[TeamSize] = None
    is_solo: Optional[bool] = None
    company_name: Optional[str] = Field(None, min_length=1, max_length=255)
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)

    @model_validator(mode="after")
    def require_team_size(self) -> "CompleteOnboardingRequest":
        if self.team_size is None and self.is_solo is None:
            raise ValueError("teamSize or isSolo is required")
        return self

    @property
    def solo(self) -> bool:
        if self.team_size is not None:
            return self.team_size == "solo"
        return bool(self.is_solo)


class CompleteOnboardingResponse(CamelModel):
    success: bool = True
    user: UserResponse
