from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

class SessionConfig(BaseSettings):
    """Connection parameters handed to a `Session` at construction."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="SQLSESSION_", extra="ignore"
    )

    host: str = Field(":memory:", description="Database URL: http(s)://, file: or a SQLite path")
    user: str = Field("", description="User name, if the backend has accounts")
    credential: SecretStr = Field(SecretStr(""), description="Password or auth token")

@lru_cache
def get_config() -> SessionConfig:
    """Load the session configuration from the environment and `.env`."""
    return SessionConfig()
