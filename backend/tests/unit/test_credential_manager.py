"""Tests for services.credential_manager."""

import sys
from unittest.mock import MagicMock, patch

from services.credential_manager import (
    CREDENTIAL_KEYS,
    SERVICE_NAME,
    delete_credential,
    get_credential,
    set_credential,
)


# ---------------------------------------------------------------------------
# get_credential
# ---------------------------------------------------------------------------


class TestGetCredential:
    def test_returns_value(self):
        mock_keyring = MagicMock()
        mock_keyring.get_password.return_value = "fh-secret"
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            result = get_credential("FINNHUB_API_KEY")
        assert result == "fh-secret"
        mock_keyring.get_password.assert_called_once_with(SERVICE_NAME, "FINNHUB_API_KEY")

    def test_returns_none_when_keyring_not_installed(self):
        with patch.dict(sys.modules, {"keyring": None}):
            assert get_credential("FINNHUB_API_KEY") is None

    def test_returns_none_on_keyring_exception(self):
        mock_keyring = MagicMock()
        mock_keyring.get_password.side_effect = Exception("locked keychain")
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert get_credential("ALPHAVANTAGE_API_KEY") is None


# ---------------------------------------------------------------------------
# set_credential
# ---------------------------------------------------------------------------


class TestSetCredential:
    def test_stores_value(self):
        mock_keyring = MagicMock()
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert set_credential("ALPHAVANTAGE_API_KEY", "av-secret") is True
        mock_keyring.set_password.assert_called_once_with(
            SERVICE_NAME, "ALPHAVANTAGE_API_KEY", "av-secret"
        )

    def test_rejects_non_credential_key(self):
        mock_keyring = MagicMock()
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert set_credential("DATABASE_URL", "sqlite://") is False
        mock_keyring.set_password.assert_not_called()

    def test_rejects_empty_value(self):
        mock_keyring = MagicMock()
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert set_credential("FINNHUB_API_KEY", "  ") is False
        mock_keyring.set_password.assert_not_called()

    def test_returns_false_on_keyring_exception(self):
        mock_keyring = MagicMock()
        mock_keyring.set_password.side_effect = Exception("keyring error")
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert set_credential("FINNHUB_API_KEY", "x") is False


# ---------------------------------------------------------------------------
# delete_credential
# ---------------------------------------------------------------------------


class TestDeleteCredential:
    def test_deletes_value(self):
        mock_keyring = MagicMock()
        with patch.dict(sys.modules, {"keyring": mock_keyring}):
            assert delete_credential("FINNHUB_API_KEY") is True
        mock_keyring.delete_password.assert_called_once_with(SERVICE_NAME, "FINNHUB_API_KEY")

    def test_returns_false_when_keyring_not_installed(self):
        with patch.dict(sys.modules, {"keyring": None}):
            assert delete_credential("FINNHUB_API_KEY") is False


class TestCredentialKeys:
    def test_contains_quote_provider_keys(self):
        assert CREDENTIAL_KEYS == {"FINNHUB_API_KEY", "ALPHAVANTAGE_API_KEY"}

    def test_excludes_non_secret_keys(self):
        assert "DATABASE_URL" not in CREDENTIAL_KEYS
        assert "FINNHUB_API_ENABLED" not in CREDENTIAL_KEYS
