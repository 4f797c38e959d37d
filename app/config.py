from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator
from functools import lru_cache


PRODUCTION_ENVIRONMENTS = {"production", "staging"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/hvac_dispatch"

    @field_validator('DATABASE_URL', mode='before')
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgresql:// to postgresql+asyncpg:// for async support."""
        if v and v.startswith('postgresql://'):
            return v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    # Identity provider (Supabase Auth)
    SUPABASE_URL: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_AUDIENCE: str = "authenticated"
    AUTH_PROVIDER_TIMEOUT_SECONDS: float = 10.0

    @field_validator('SUPABASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        if v:
            return v.rstrip('/')
        return v

    # Request handling
    REQUEST_TIMEOUT_SECONDS: float = 30.0

    # Invoicing
    INVOICE_DUE_DAYS: int = 30
    INVOICE_NUMBER_MAX_ATTEMPTS: int = 5

    # Business calendar (IANA name). Unset means the server's local timezone.
    TIMEZONE: str | None = None

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    DOCS_ENABLED: bool | None = None

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @model_validator(mode='after')
    def validate_production(self) -> "Settings":
        """Production must talk to a real identity provider and never run in debug."""
        if self.is_production:
            missing = [
                name for name in ("SUPABASE_URL", "SUPABASE_ANON_KEY")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(f"{', '.join(missing)} must be set in {self.ENVIRONMENT}")
            self.DEBUG = False
        if self.DOCS_ENABLED is None:
            self.DOCS_ENABLED = not self.is_production
        if self.INVOICE_NUMBER_MAX_ATTEMPTS < 1:
            raise ValueError("INVOICE_NUMBER_MAX_ATTEMPTS must be at least 1")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in PRODUCTION_ENVIRONMENTS

    @property
    def sqlalchemy_echo(self) -> bool:
        return self.DEBUG and not self.is_production

    @property
    def supabase_configured(self) -> bool:
        return bool(self.SUPABASE_URL and self.SUPABASE_ANON_KEY)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
