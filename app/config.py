from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    # Environment
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # Database - PostgreSQL for production, SQLite for development
    database_url: str = Field(
        default="sqlite:///./nomadhub.db",
        alias="DATABASE_URL"
    )

    # Upper bound for a single store call (lock wait / statement time)
    store_timeout_seconds: float = Field(default=5.0, alias="STORE_TIMEOUT_SECONDS")

    # Session token
    secret_key: str = Field(
        default="dev-secret-key-at-least-32-characters-long-for-development",
        alias="ACCESS_TOKEN_SECRET"
    )
    algorithm: str = "HS256"
    access_token_expire_days: int = Field(default=365, alias="ACCESS_TOKEN_EXPIRE_DAYS")

    # Cookie settings
    cookie_name: str = "token"

    # CORS - Frontend URLs from environment (comma-separated)
    allowed_origins: str = Field(
        default="http://localhost:5173,http://localhost:5174",
        alias="ALLOWED_ORIGINS"
    )

    # ==============================================
    # Payment processor (Stripe)
    # ==============================================
    stripe_secret_key: str = Field(default="", alias="STRIPE_SECRET_KEY")
    payment_currency: str = Field(default="usd", alias="PAYMENT_CURRENCY")
    payment_timeout_seconds: int = Field(default=20, alias="PAYMENT_TIMEOUT_SECONDS")

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")

    # Rate limiting ("memory://" or "redis://host:6379")
    rate_limit_storage_uri: str = Field(default="memory://", alias="RATE_LIMIT_STORAGE_URI")

    @field_validator('secret_key')
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Validate ACCESS_TOKEN_SECRET is strong enough"""
        if not v:
            raise ValueError("ACCESS_TOKEN_SECRET is required and cannot be empty")
        if len(v) < 32:
            raise ValueError("ACCESS_TOKEN_SECRET must be at least 32 characters long")
        return v

    @field_validator('payment_currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def has_payment_config(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def cors_origins(self) -> List[str]:
        """
        Parse allowed origins from comma-separated string.
        Returns a list suitable for CORSMiddleware.
        """
        if not self.allowed_origins:
            return ["http://localhost:5173"]

        origins = []
        for origin in self.allowed_origins.split(","):
            origin = origin.strip().rstrip("/")
            if origin and origin not in origins:
                origins.append(origin)

        return origins if origins else ["http://localhost:5173"]

    class Config:
        env_file = ".env"
        extra = "ignore"
        populate_by_name = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


# Initialize settings on module load
settings = get_settings()
