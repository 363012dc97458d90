import os
from dataclasses import dataclass, field
from typing import List


def _split(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass(frozen=True)
class Settings:
    """Runtime settings, read from the environment."""

    database_url: str = "mongodb://localhost:27017"
    database_name: str = "habits"
    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_days: int = 30
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"
    port: int = 8000
    app_version: str = "0.1.0"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            database_name=os.getenv("DATABASE_NAME", cls.database_name),
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            access_token_expire_days=int(os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", cls.access_token_expire_days)),
            cors_origins=_split(os.getenv("CORS_ORIGINS", "*")),
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            port=int(os.getenv("PORT", cls.port)),
            app_version=os.getenv("APP_VERSION", cls.app_version),
        )


settings = Settings.from_env()
