"""Application configuration loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Allowed URL schemes for DATABASE_URL (module-level so validators can use it).
VALID_DATABASE_URL_PREFIXES = (
    "postgresql://",
    "postgresql+psycopg2://",
    "postgres://",
)

# HS256 wants a key at least as long as the hash output.
JWT_SECRET_MIN_LEN = 32


class Settings(BaseSettings):
    """Validated application settings from env and optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    APP_ENV: Literal["dev", "prod"] = "dev"
    DEBUG: bool = False
    API_PREFIX: str = "/api"
    # Extra allowed CORS origins in prod (comma-separated); dev allows all.
    CORS_ORIGINS: str = ""

    # Postgres: required, no fallback
    DATABASE_URL: str
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 45
    DB_CONNECT_TIMEOUT_SEC: int = 15
    DB_STATEMENT_TIMEOUT_SEC: int = 30
    DB_SSLMODE: Literal[
        "disable", "allow", "prefer", "require", "verify-ca", "verify-full"
    ] = "verify-full"
    DB_CHANNEL_BINDING: Literal["disable", "prefer", "require"] = "require"

    # JWT authentication
    JWT_SECRET: SecretStr
    JWT_ISSUER: str
    JWT_AUDIENCE: str
    JWT_ALGORITHM: Literal["HS256", "HS384", "HS512"] = "HS256"
    JWT_EXPIRE_MINUTES: int = 720
    JWT_LEEWAY_SECONDS: int = 30

    # Where password verification happens: in the app (argon2/bcrypt) or in Postgres (pgcrypto crypt()).
    PASSWORD_VERIFIER: Literal["application", "pgcrypto"] = "application"
    ARGON2_TIME_COST: int = 3
    ARGON2_MEMORY_COST_KIB: int = 65536
    ARGON2_PARALLELISM: int = 4

    @field_validator("DATABASE_URL")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("DATABASE_URL must be set and non-empty")
        v = v.strip()
        if not any(v.startswith(prefix) for prefix in VALID_DATABASE_URL_PREFIXES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL (e.g. postgresql:// or postgresql+psycopg2://)"
            )
        # Pin the psycopg2 driver; a bare "postgresql" dialect may resolve to psycopg 3.
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                v = "postgresql+psycopg2://" + v[len(prefix):]
                break
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_db_pool_size(cls, v: int) -> int:
        if v < 1 or v > 100:
            raise ValueError("DB_POOL_SIZE must be between 1 and 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_db_max_overflow(cls, v: int) -> int:
        if v < 0 or v > 200:
            raise ValueError("DB_MAX_OVERFLOW must be between 0 and 200")
        return v

    @field_validator("DB_CONNECT_TIMEOUT_SEC", "DB_STATEMENT_TIMEOUT_SEC")
    @classmethod
    def validate_db_timeouts(cls, v: int) -> int:
        if v < 1 or v > 600:
            raise ValueError("Database timeouts must be between 1 and 600 seconds")
        return v

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: SecretStr) -> SecretStr:
        secret = v.get_secret_value()
        if not secret or not secret.strip():
            raise ValueError("JWT_SECRET must be set and non-empty")
        if len(secret) < JWT_SECRET_MIN_LEN:
            raise ValueError(
                f"JWT_SECRET must be at least {JWT_SECRET_MIN_LEN} characters"
            )
        return v

    @field_validator("JWT_ISSUER", "JWT_AUDIENCE")
    @classmethod
    def validate_jwt_claim_setting(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("JWT_ISSUER and JWT_AUDIENCE must be set and non-empty")
        return v.strip()

    @field_validator("JWT_EXPIRE_MINUTES")
    @classmethod
    def validate_jwt_expire_minutes(cls, v: int) -> int:
        if v < 1 or v > 10080:
            raise ValueError(
                "JWT_EXPIRE_MINUTES must be between 1 and 10080 (1 min to 7 days)"
            )
        return v

    @field_validator("JWT_LEEWAY_SECONDS")
    @classmethod
    def validate_jwt_leeway(cls, v: int) -> int:
        if v < 0 or v > 300:
            raise ValueError("JWT_LEEWAY_SECONDS must be between 0 and 300")
        return v

    @field_validator("ARGON2_TIME_COST", "ARGON2_PARALLELISM")
    @classmethod
    def validate_argon2_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("ARGON2_TIME_COST and ARGON2_PARALLELISM must be at least 1")
        return v

    @field_validator("ARGON2_MEMORY_COST_KIB")
    @classmethod
    def validate_argon2_memory(cls, v: int) -> int:
        if v < 8 or v > 4194304:
            raise ValueError("ARGON2_MEMORY_COST_KIB must be between 8 and 4194304 (4 GiB)")
        return v

    @property
    def cors_origins(self) -> list[str]:
        """Allowed CORS origins: everything in dev, CORS_ORIGINS in prod."""
        if self.APP_ENV == "dev":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance (safe to call from dependencies)."""
    return Settings()


settings = get_settings()
