"""
API configuration settings.
Reads every setting from environment variables (or a .env file) with validation and defaults.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError, validator
from pydantic_settings import BaseSettings

from library_api.errors import ConfigurationError


class Settings(BaseSettings):
    """
    Configuration class for the Library API.
    Uses pydantic BaseSettings for environment variable management.
    """

    # API Settings
    api_title: str = "Library API"
    api_version: str = "1.0.0"
    api_description: str = "A REST API for managing books and authors"

    # Server Settings
    host: str = Field(default="0.0.0.0", env="HOST")
    port: int = Field(default=8080, env="PORT")
    debug: bool = Field(default=False, env="DEBUG")

    # MongoDB Configuration
    mongodb_uri: str = Field(..., env="MONGODB_URI")
    mongodb_database: str = Field(default="library", env="MONGODB_DATABASE")

    # Session Settings
    session_secret: str = Field(default="your_session_secret", env="SESSION_SECRET")
    session_cookie: str = "library_session"

    # GitHub OAuth Settings
    github_client_id: str = Field(..., env="GITHUB_CLIENT_ID")
    github_client_secret: str = Field(..., env="GITHUB_CLIENT_SECRET")
    github_callback_url: str = Field(..., env="GITHUB_CALLBACK_URL")
    github_scope: str = "user:email"

    # Redirect targets after the OAuth flow
    login_redirect: str = "/"
    failure_redirect: str = "/"
    logout_redirect: str = "/"

    # Access control
    protect_author_writes: bool = Field(default=False, env="PROTECT_AUTHOR_WRITES")

    # CORS Settings
    cors_origins: List[str] = ["*"]

    # Logging
    log_level: str = Field(default="INFO", env="LOG_LEVEL")
    log_format: str = Field(default="json", env="LOG_FORMAT")
    log_file: Optional[str] = Field(default=None, env="LOG_FILE")

    @validator('log_level')
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('log_format')
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    @validator('mongodb_uri')
    def validate_mongodb_uri(cls, v):
        """Reject a blank connection string."""
        if not v.strip():
            raise ValueError('mongodb_uri must not be empty')
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }


def load_settings(**overrides) -> Settings:
    """
    Build settings from the environment.

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        fields = [str(error["loc"][0]).upper() for error in e.errors() if error.get("loc")]
        raise ConfigurationError(
            f"Invalid or missing configuration: {', '.join(fields)}"
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return load_settings()
