"""OAuth installed-app credentials and API service construction for Google APIs."""

import logging
import os
from pathlib import Path

from google.auth.exceptions import GoogleAuthError as _GoogleLibraryAuthError
from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from util.config import GoogleOAuthSettings

logger = logging.getLogger(__name__)


class GoogleAuthError(Exception):
    """Raised when usable Google credentials cannot be obtained."""


def _load_token(settings: GoogleOAuthSettings) -> Credentials | None:
    token_path = Path(settings.token_file)
    if not token_path.exists():
        return None
    try:
        return Credentials.from_authorized_user_file(str(token_path), settings.scopes)
    except ValueError as e:
        logger.warning("Ignoring unreadable token file %s: %s", token_path, e)
        return None


def save_credentials(credentials: Credentials, token_file: str) -> None:
    """Store credentials in the token file, readable by the owner only."""
    token_path = Path(token_file)
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(credentials.to_json(), encoding="utf-8")
    os.chmod(token_path, 0o600)


def load_credentials(settings: GoogleOAuthSettings) -> Credentials:
    """
    Load stored credentials, refreshing or re-authorizing as needed.

    A missing or unusable token starts the installed-app flow, which opens a
    browser and listens on settings.port for the redirect.

    Raises:
        GoogleAuthError: If no client secrets file is configured or the flow fails.
    """
    credentials = _load_token(settings)
    if credentials and credentials.valid:
        return credentials

    if credentials and credentials.expired and credentials.refresh_token:
        try:
            credentials.refresh(Request())
            save_credentials(credentials, settings.token_file)
            return credentials
        except RefreshError as e:
            logger.warning("Token refresh failed, re-authorizing: %s", e)

    if not settings.credentials_file:
        raise GoogleAuthError(
            "OAuth client secrets file is not configured; set the credentials file path"
        )

    try:
        flow = InstalledAppFlow.from_client_secrets_file(
            settings.credentials_file, settings.scopes
        )
        credentials = flow.run_local_server(port=settings.port, access_type="offline")
    except (OSError, ValueError, _GoogleLibraryAuthError) as e:
        raise GoogleAuthError(f"Google authorization failed: {e}") from e

    save_credentials(credentials, settings.token_file)
    logger.info("Stored new Google credentials in %s", settings.token_file)
    return credentials


def build_service(api: str, version: str, settings: GoogleOAuthSettings):
    """Build an authorized googleapiclient service, e.g. build_service("gmail", "v1", ...)."""
    credentials = load_credentials(settings)
    return build(api, version, credentials=credentials, cache_discovery=False)
