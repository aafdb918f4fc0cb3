"""Unit tests for directory_client.auth module."""

import pytest

from roster_sync.directory_client.auth import DEFAULT_API_URL, Authenticator
from roster_sync.directory_client.errors import InvalidCredentialsError


class TestAuthenticator:
    """Test cases for Authenticator."""

    def test_get_credentials(self):
        auth = Authenticator("8675309", "s3cret", api_url="https://directory.test/api/")

        creds = auth.get_credentials()

        assert creds.url == "https://directory.test/api"
        assert creds.company_id == "8675309"
        assert creds.psk == "s3cret"

    def test_url_from_environment(self, monkeypatch):
        monkeypatch.setenv("ROSTER_SYNC_API_URL", "https://env.test/v2")

        assert Authenticator("1", "k").get_credentials().url == "https://env.test/v2"

    def test_explicit_url_beats_environment(self, monkeypatch):
        monkeypatch.setenv("ROSTER_SYNC_API_URL", "https://env.test/v2")

        creds = Authenticator("1", "k", api_url="https://explicit.test").get_credentials()

        assert creds.url == "https://explicit.test"

    def test_default_url(self):
        assert Authenticator("1", "k").get_credentials().url == DEFAULT_API_URL

    @pytest.mark.parametrize("company_id,psk", [("", "k"), ("1", ""), ("  ", "k"), (None, None)])
    def test_missing_values_raise(self, company_id, psk):
        with pytest.raises(InvalidCredentialsError):
            Authenticator(company_id, psk).get_credentials()

    def test_build_headers(self):
        headers = Authenticator("8675309", "s3cret").build_headers()

        assert headers["X-Company-Id"] == "8675309"
        assert headers["Authorization"] == "PSK s3cret"
        assert headers["Content-Type"] == "application/json"
