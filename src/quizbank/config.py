from datetime import timedelta

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str
    host: str
    port: int
    debug: bool
    jwt_secret: str  # HS256 signing secret for access tokens, no default on purpose
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_minutes: int = 10
    max_sessions_per_account: int = 10  # oldest sessions are evicted beyond this
    database_timeout_ms: int = 5000  # default deadline for every MongoDB operation
    bcrypt_rounds: int = 12
    cors_origins: list[str] = []

    model_config = {
        "env_file": [".env"],
        "env_prefix": "QUIZBANK_",
        "extra": "ignore",
    }

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, value: str) -> str:
        if len(value) < 32:
            raise ValueError("jwt_secret must be at least 32 characters long")
        return value

    @field_validator("access_token_ttl_minutes", "refresh_token_ttl_minutes", "max_sessions_per_account")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @property
    def access_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.access_token_ttl_minutes)

    @property
    def refresh_token_ttl(self) -> timedelta:
        return timedelta(minutes=self.refresh_token_ttl_minutes)
