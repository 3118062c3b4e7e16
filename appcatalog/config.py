"""
Configuration Management
Environment-based settings for the database, sessions, admin credentials and branding
"""

from typing import List, Literal, Optional

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(RuntimeError):
    """Raised when required environment configuration is missing"""


class Settings(BaseSettings):
    # App config
    app_name: str = "App Catalog"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    # Required
    database_url: str = Field(..., min_length=1)
    session_secret: str = Field(..., min_length=1)
    admin_username: str = Field(..., min_length=1)
    admin_password: str = Field(..., min_length=1)

    # Database pool
    db_pool_min_size: int = Field(default=1, ge=1)
    db_pool_max_size: int = Field(default=10, ge=1)

    # Sessions
    session_backend: Literal["memory", "redis"] = "memory"
    redis_url: str = "redis://localhost:6379/0"
    session_cookie_name: str = "appcatalog.sid"
    session_max_age: int = Field(default=86400, ge=1)

    # Health proxy (unset means no timeout)
    health_proxy_timeout: Optional[float] = None

    # Branding
    company_name: str = "Default Company"
    company_icon_url: str = "https://via.placeholder.com/40"

    # CORS
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(case_sensitive=False)


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment

    Raises:
        ConfigurationError: naming every missing or empty variable
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        names = sorted({str(err["loc"][0]).upper() for err in e.errors() if err["loc"]})
        raise ConfigurationError(
            f"Missing or invalid environment variables: {', '.join(names)}"
        ) from e
