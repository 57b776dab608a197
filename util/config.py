"""
Settings for the tool adapters.

Each adapter takes an explicit settings object in its constructor; the
from_env() constructors below are the only place the process environment is
read. When ENVIRONMENT_NAME is set, secrets missing from the environment are
looked up in SSM Parameter Store as "<environment>-<parameter>".
"""

import os
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field

from util.ssm import read_secret


def get_secret_setting(env_var: str, ssm_name: str) -> Optional[str]:
    """
    Read a secret from the environment, falling back to SSM.

    Args:
        env_var: Environment variable holding the secret.
        ssm_name: Parameter name suffix used when ENVIRONMENT_NAME is set.

    Returns:
        The secret, or None if it is configured nowhere.
    """
    value = os.getenv(env_var)
    if value:
        return value

    environment = os.getenv("ENVIRONMENT_NAME")
    return read_secret(environment, ssm_name) if environment else None


class CWASettings(BaseModel):
    """Central Weather Administration open data API settings."""

    auth_key: Optional[str] = None
    base_url: str = "https://opendata.cwa.gov.tw/api"
    timeout: int = 30
    cache_ttl: int = 600

    @classmethod
    def from_env(cls) -> "CWASettings":
        auth_key = get_secret_setting("CWA_AUTH_KEY", "cwa-auth-key") or os.getenv(
            "AUTH_KEY"
        )
        return cls(
            auth_key=auth_key,
            base_url=os.getenv("CWA_URL", cls.model_fields["base_url"].default),
            timeout=int(os.getenv("CWA_TIMEOUT", "30")),
            cache_ttl=int(os.getenv("CWA_CACHE_TTL", "600")),
        )


class GooglePlacesSettings(BaseModel):
    """Google Places API (New) settings."""

    api_key: Optional[str] = None
    base_url: str = "https://places.googleapis.com/v1"
    timeout: int = 30

    @classmethod
    def from_env(cls) -> "GooglePlacesSettings":
        return cls(
            api_key=get_secret_setting("GOOGLE_MAPS_API_KEY", "google-maps-api-key"),
            timeout=int(os.getenv("GOOGLE_PLACES_TIMEOUT", "30")),
        )


class GoogleOAuthSettings(BaseModel):
    """OAuth installed-app settings for a Google API client."""

    credentials_file: Optional[str] = None
    token_file: str
    port: int
    scopes: list[str]

    @classmethod
    def for_gmail(cls) -> "GoogleOAuthSettings":
        return cls(
            credentials_file=os.getenv("GMAIL_CREDENTIALS_FILE_PATH"),
            token_file=os.getenv("GMAIL_TOKEN_FILE", "gmail_tokens/token.json"),
            port=int(os.getenv("GMAIL_OAUTH_PORT", "8889")),
            scopes=[
                "https://www.googleapis.com/auth/gmail.send",
                "https://www.googleapis.com/auth/gmail.readonly",
                "https://www.googleapis.com/auth/gmail.modify",
            ],
        )

    @classmethod
    def for_drive(cls) -> "GoogleOAuthSettings":
        return cls(
            credentials_file=os.getenv("CREDENTIALS_FILE_PATH"),
            token_file=os.getenv("DRIVE_TOKEN_FILE", "tokens/token.json"),
            port=int(os.getenv("DRIVE_OAUTH_PORT", "8888")),
            scopes=["https://www.googleapis.com/auth/drive.file"],
        )


class FileSystemSettings(BaseModel):
    """Directories the filesystem tools may touch."""

    allowed_paths: list[Path] = Field(default_factory=list)

    @classmethod
    def from_env(cls) -> "FileSystemSettings":
        return cls.from_paths(os.getenv("FILESYSTEM_ALLOWED_PATHS", "").split(","))

    @classmethod
    def from_paths(cls, paths: list[str]) -> "FileSystemSettings":
        """Build settings from raw path strings, dropping blanks and resolving the rest."""
        return cls(
            allowed_paths=[Path(p.strip()).resolve() for p in paths if p.strip()]
        )


class CacheSettings(BaseModel):
    """Response cache settings; the Redis fields apply to the redis backend only."""

    backend: Literal["redis", "memory", "none"] = "redis"
    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    ssl: bool = True

    @classmethod
    def from_env(cls) -> "CacheSettings":
        return cls(
            backend=os.getenv("CACHE_BACKEND", "redis").lower(),
            host=os.getenv("REDIS_HOST", "localhost"),
            port=int(os.getenv("REDIS_PORT", "6379")),
            password=os.getenv("REDIS_PASSWORD"),
            ssl=os.getenv("REDIS_SSL", "true").lower() == "true",
        )
