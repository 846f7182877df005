from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Client settings."""

    # Backend
    api_base_url: str = Field(default="http://localhost:8080/api")
    request_timeout: float = Field(default=10.0)

    # Local cache, empty path keeps everything in memory
    cache_path: str = Field(default="")

    # Navigation targets handed to the host application
    login_route: str = Field(default="/login")
    landing_route: str = Field(default="/dashboard")

    # Logging
    log_level: str = Field(default="INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
