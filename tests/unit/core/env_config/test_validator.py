"""
Tests for APIClientSettings validation.
"""

import pytest
from pydantic import ValidationError

from api_client.core.env_config import APIClientSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    import os
    for key in list(os.environ):
        if key.upper().startswith("API_CLIENT_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


class TestAPIClientSettings:

    def test_defaults(self):
        settings = APIClientSettings()
        assert settings.base_url is None
        assert settings.headers == {}
        assert settings.timeout == 30.0
        assert settings.max_retries == 3
        assert settings.retry_delay == 1.0
        assert settings.verify_ssl is True
        assert settings.rate_limit_max_requests is None

    def test_empty_base_url_is_none(self):
        assert APIClientSettings(base_url="  ").base_url is None

    def test_base_url_scheme(self):
        with pytest.raises(ValidationError):
            APIClientSettings(base_url="ftp://files.example.com")

    @pytest.mark.parametrize("kwargs", [
        {"timeout": 0},
        {"max_retries": 11},
        {"retry_delay": -1},
        {"rate_limit_max_requests": 0},
        {"log_level": "TRACE"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            APIClientSettings(**kwargs)

    def test_file_path_required_for_file_logging(self):
        with pytest.raises(ValidationError):
            APIClientSettings(log_enable_file=True)

    def test_logging_disabled_by_default(self):
        assert APIClientSettings().to_logging_config() is None

    def test_logging_config(self, tmp_path):
        settings = APIClientSettings(
            log_enable_file=True,
            log_file_path=str(tmp_path / "client.log"),
            log_format="colored",
        )
        config = settings.to_logging_config()
        assert config.enable_file is True
        assert config.enable_console is False
        assert config.format.value == "colored"

    def test_case_insensitive_env(self, monkeypatch):
        monkeypatch.setenv("api_client_verify_ssl", "false")
        assert APIClientSettings().verify_ssl is False
