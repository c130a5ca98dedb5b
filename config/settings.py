"""
Configuration for the scheduler server.

Values come from the environment (a .env file is loaded first when present).
"""

import hashlib
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings read from TODO_* environment variables"""

    def __init__(self):
        # Server
        self.HOST: str = os.getenv("TODO_HOST", "127.0.0.1")
        self.PORT: int = _int_env("TODO_PORT", 7540)
        self.WEB_DIR: str = os.getenv("TODO_WEBDIR", "web")
        self.DB_FILE: str = os.getenv("TODO_DBFILE", "scheduler.db")

        # Limits
        self.TASKS_LIMIT: int = _int_env("TODO_TASKS_LIMIT", 50)
        self.MAX_UPLOAD_SIZE: int = _int_env("TODO_MAX_UPLOAD_SIZE", 8 << 20)
        self.SIGNIN_RATE_LIMIT: str = os.getenv("TODO_SIGNIN_RATE_LIMIT", "5/minute")

        # Authentication
        self.PASSWORD: str = os.getenv("TODO_PASSWORD", "")
        self.SECRET_KEY: str = os.getenv("TODO_SECRETKEY", "")
        self.TOKEN_TTL_HOURS: int = _int_env("TODO_TOKEN_TTL_HOURS", 8)

        if self.PASSWORD and not self.SECRET_KEY:
            raise ValueError(
                "password is set via TODO_PASSWORD, but secret key TODO_SECRETKEY is missing"
            )

    @property
    def PASSWORD_HASH(self) -> str:
        """Hex SHA-512 of the password, empty when auth is disabled"""
        if not self.PASSWORD:
            return ""
        return hashlib.sha512(self.PASSWORD.encode()).hexdigest()

    @property
    def AUTH_ENABLED(self) -> bool:
        return bool(self.PASSWORD)

    @property
    def DATABASE_URL(self) -> str:
        return f"sqlite:///{self.DB_FILE}"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"invalid integer value in {name}: {raw!r}")


# Create global settings instance
settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the global settings."""
    return settings

