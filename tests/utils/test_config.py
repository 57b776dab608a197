"""Tests for adapter settings."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from util.config import (
    CacheSettings,
    CWASettings,
    FileSystemSettings,
    GoogleOAuthSettings,
    GooglePlacesSettings,
    get_secret_setting,
)


class TestGetSecretSetting:
    @patch.dict(os.environ, {"CWA_AUTH_KEY": "from-env"}, clear=True)
    @patch("util.config.read_secret")
    def test_environment_wins(self, mock_read_secret):
        assert get_secret_setting("CWA_AUTH_KEY", "cwa-auth-key") == "from-env"
        mock_read_secret.assert_not_called()

    @patch.dict(os.environ, {"ENVIRONMENT_NAME": "prod"}, clear=True)
    @patch("util.config.read_secret", return_value="from-ssm")
    def test_falls_back_to_ssm_when_deployed(self, mock_read_secret):
        assert get_secret_setting("CWA_AUTH_KEY", "cwa-auth-key") == "from-ssm"
        mock_read_secret.assert_called_once_with("prod", "cwa-auth-key")

    @patch.dict(os.environ, {}, clear=True)
    @patch("util.config.read_secret")
    def test_missing_everywhere_returns_none(self, mock_read_secret):
        assert get_secret_setting("CWA_AUTH_KEY", "cwa-auth-key") is None
        mock_read_secret.assert_not_called()


class TestCWASettings:
    @patch.dict(
        os.environ,
        {"CWA_AUTH_KEY": "key", "CWA_URL": "http://localhost:9000", "CWA_TIMEOUT": "5"},
        clear=True,
    )
    def test_from_env(self):
        settings = CWASettings.from_env()

        assert settings.auth_key == "key"
        assert settings.base_url == "http://localhost:9000"
        assert settings.timeout == 5
        assert settings.cache_ttl == 600

    @patch.dict(os.environ, {"AUTH_KEY": "legacy"}, clear=True)
    def test_legacy_auth_key_variable(self):
        assert CWASettings.from_env().auth_key == "legacy"

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = CWASettings.from_env()

        assert settings.auth_key is None
        assert settings.base_url == "https://opendata.cwa.gov.tw/api"


@patch.dict(os.environ, {"GOOGLE_MAPS_API_KEY": "maps"}, clear=True)
def test_places_settings_from_env():
    settings = GooglePlacesSettings.from_env()

    assert settings.api_key == "maps"
    assert settings.base_url == "https://places.googleapis.com/v1"


class TestGoogleOAuthSettings:
    @patch.dict(os.environ, {"GMAIL_CREDENTIALS_FILE_PATH": "/secrets/gmail.json"}, clear=True)
    def test_gmail(self):
        settings = GoogleOAuthSettings.for_gmail()

        assert settings.credentials_file == "/secrets/gmail.json"
        assert settings.port == 8889
        assert "https://www.googleapis.com/auth/gmail.send" in settings.scopes

    @patch.dict(os.environ, {"CREDENTIALS_FILE_PATH": "/secrets/drive.json"}, clear=True)
    def test_drive(self):
        settings = GoogleOAuthSettings.for_drive()

        assert settings.credentials_file == "/secrets/drive.json"
        assert settings.port == 8888
        assert settings.token_file == "tokens/token.json"
        assert settings.scopes == ["https://www.googleapis.com/auth/drive.file"]


class TestFileSystemSettings:
    def test_from_paths_resolves_and_drops_blanks(self, tmp_path):
        settings = FileSystemSettings.from_paths([f" {tmp_path} ", "", "  "])

        assert settings.allowed_paths == [tmp_path.resolve()]

    def test_from_env_splits_on_commas(self, tmp_path):
        first, second = tmp_path / "a", tmp_path / "b"
        with patch.dict(os.environ, {"FILESYSTEM_ALLOWED_PATHS": f"{first},{second}"}, clear=True):
            settings = FileSystemSettings.from_env()

        assert settings.allowed_paths == [first.resolve(), second.resolve()]

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_without_variable_allows_nothing(self):
        assert FileSystemSettings.from_env().allowed_paths == []


@patch.dict(
    os.environ,
    {"REDIS_HOST": "redis", "REDIS_PORT": "6380", "REDIS_SSL": "FALSE"},
    clear=True,
)
def test_cache_settings_from_env():
    settings = CacheSettings.from_env()

    assert settings.host == "redis"
    assert settings.port == 6380
    assert settings.ssl is False
    assert settings.password is None
    assert settings.backend == "redis"


@patch.dict(os.environ, {"CACHE_BACKEND": "Memory"}, clear=True)
def test_cache_backend_from_env():
    assert CacheSettings.from_env().backend == "memory"


@patch.dict(os.environ, {"CACHE_BACKEND": "memcached"}, clear=True)
def test_unknown_cache_backend_is_rejected():
    with pytest.raises(ValidationError):
        CacheSettings.from_env()
