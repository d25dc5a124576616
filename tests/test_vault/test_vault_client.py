"""Test reading secrets from Vault."""
from unittest.mock import MagicMock, patch

import pytest
import requests

from shipcat.errors import MissingSource, SecretNotFound
from shipcat.vault.client import VaultClient


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


class TestVaultClient:
    def test_read(self):
        """Test that a secret is read from the generic backend."""
        with patch('shipcat.vault.client.requests.get') as mock_get:
            mock_get.return_value = _response({"data": {"value": "hunter2"}})

            client = VaultClient("https://vault.example.com/", "tok", timeout=3)
            assert client.read("dev-uk/fake-ask/API_KEY") == "hunter2"

            mock_get.assert_called_once_with(
                "https://vault.example.com/v1/secret/dev-uk/fake-ask/API_KEY",
                headers={"X-Vault-Token": "tok"},
                timeout=3,
            )

    def test_read_non_string_value(self):
        with patch('shipcat.vault.client.requests.get') as mock_get:
            mock_get.return_value = _response({"data": {"value": 42}})
            assert VaultClient("https://vault", "tok").read("a/b/c") == "42"

    @pytest.mark.parametrize("payload", [{}, {"data": {}}, {"data": None}, {"data": {"other": "x"}}])
    def test_missing_value(self, payload):
        with patch('shipcat.vault.client.requests.get') as mock_get:
            mock_get.return_value = _response(payload)
            with pytest.raises(SecretNotFound):
                VaultClient("https://vault", "tok").read("a/b/c")

    def test_http_error(self):
        """Test that a 404 from vault means the secret is missing."""
        with patch('shipcat.vault.client.requests.get') as mock_get:
            response = _response({})
            response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Client Error")
            mock_get.return_value = response
            with pytest.raises(SecretNotFound, match="a/b/c"):
                VaultClient("https://vault", "tok").read("a/b/c")

    def test_connection_error(self):
        with patch('shipcat.vault.client.requests.get') as mock_get:
            mock_get.side_effect = requests.exceptions.ConnectionError("refused")
            with pytest.raises(SecretNotFound):
                VaultClient("https://vault", "tok").read("a/b/c")

    def test_invalid_json(self):
        with patch('shipcat.vault.client.requests.get') as mock_get:
            response = MagicMock()
            response.json.side_effect = ValueError("not json")
            mock_get.return_value = response
            with pytest.raises(SecretNotFound, match="invalid json"):
                VaultClient("https://vault", "tok").read("a/b/c")


class TestVaultClientFromEnv:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
        monkeypatch.setenv("VAULT_TOKEN", "tok")
        monkeypatch.setenv("VAULT_TIMEOUT", "2.5")
        client = VaultClient.from_env()
        assert client.addr == "https://vault.example.com"
        assert client.token == "tok"
        assert client.timeout == 2.5

    def test_token_file_fallback(self, monkeypatch, tmp_path):
        (tmp_path / ".vault-token").write_text("filetok\n")
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
        monkeypatch.delenv("VAULT_TOKEN", raising=False)
        monkeypatch.delenv("VAULT_TIMEOUT", raising=False)
        client = VaultClient.from_env()
        assert client.token == "filetok"
        assert client.timeout == 10.0

    def test_missing_addr(self, monkeypatch):
        monkeypatch.delenv("VAULT_ADDR", raising=False)
        with pytest.raises(MissingSource, match="VAULT_ADDR"):
            VaultClient.from_env()

    def test_missing_token(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("VAULT_ADDR", "https://vault.example.com")
        monkeypatch.delenv("VAULT_TOKEN", raising=False)
        with pytest.raises(MissingSource, match="VAULT_TOKEN"):
            VaultClient.from_env()
