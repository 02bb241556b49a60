"""Tests for the Azure Key Vault secret store."""

import json
from unittest.mock import MagicMock, patch

import pytest
from azure.core.exceptions import HttpResponseError, ResourceNotFoundError

from venafi_issuer.errors import SecretBackendError, SecretNotFoundError
from venafi_issuer.secretstore.keyvault import KeyVaultSecretStore, vault_secret_name


def _secret(value):
    secret = MagicMock()
    secret.value = value
    return secret


class TestVaultSecretName:
    def test_escapes_dashes_and_joins(self):
        assert vault_secret_name("team-a", "tpp-creds") == "team-da--tpp-dcreds"

    def test_escapes_dots(self):
        assert vault_secret_name("team.a", "tpp.creds") == "team-pa--tpp-pcreds"

    def test_dot_and_dash_names_do_not_collide(self):
        assert vault_secret_name("ns", "tpp.creds") != vault_secret_name("ns", "tpp-creds")

    def test_separator_does_not_collide(self):
        assert vault_secret_name("a", "b--c") != vault_secret_name("a--b", "c")

    @pytest.mark.parametrize("namespace", ["Team-A", "team_a", ""])
    def test_rejects_invalid_namespace(self, namespace):
        with pytest.raises(ValueError, match="invalid secret namespace"):
            vault_secret_name(namespace, "creds")

    def test_rejects_overlong_name(self):
        with pytest.raises(ValueError, match="exceeds 127 characters"):
            vault_secret_name("ns", "a" * 130)


class TestKeyVaultSecretStoreGet:
    def test_returns_json_values_as_bytes(self):
        mock_client = MagicMock()
        mock_client.get_secret.return_value = _secret(json.dumps({"username": "alice", "password": "s3cr3t"}))
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        data = store.get("team-a", "tpp-creds")

        assert data == {"username": b"alice", "password": b"s3cr3t"}
        mock_client.get_secret.assert_called_once_with("team-da--tpp-dcreds")

    def test_not_found(self):
        mock_client = MagicMock()
        mock_client.get_secret.side_effect = ResourceNotFoundError("SecretNotFound")
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        with pytest.raises(SecretNotFoundError) as exc_info:
            store.get("team-a", "missing")

        assert exc_info.value.namespace == "team-a"
        assert exc_info.value.name == "missing"

    def test_azure_error_is_backend_error(self):
        mock_client = MagicMock()
        mock_client.get_secret.side_effect = HttpResponseError("Forbidden")
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        with pytest.raises(SecretBackendError, match="Forbidden"):
            store.get("team-a", "tpp-creds")

    def test_non_json_value(self):
        mock_client = MagicMock()
        mock_client.get_secret.return_value = _secret("plain-text")
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        with pytest.raises(SecretBackendError, match="not a JSON object"):
            store.get("team-a", "tpp-creds")

    def test_non_string_values(self):
        mock_client = MagicMock()
        mock_client.get_secret.return_value = _secret(json.dumps({"api-key": 123}))
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        with pytest.raises(SecretBackendError, match="JSON object of strings"):
            store.get("team-a", "cloud-key")

    def test_json_array_rejected(self):
        mock_client = MagicMock()
        mock_client.get_secret.return_value = _secret("[]")
        store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

        with pytest.raises(SecretBackendError):
            store.get("team-a", "cloud-key")


@patch("venafi_issuer.secretstore.keyvault.SecretClient")
def test_builds_secret_client(mock_client_cls):
    credential = MagicMock()

    store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", credential=credential)
    store.close()

    mock_client_cls.assert_called_once_with("https://v.vault.azure.net", credential)
    mock_client_cls.return_value.close.assert_called_once()


def test_invalid_name_is_backend_error():
    mock_client = MagicMock()
    store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

    with pytest.raises(SecretBackendError, match="invalid secret name"):
        store.get("team-a", "TPP_Creds")

    mock_client.get_secret.assert_not_called()


def test_similar_names_read_different_vault_secrets():
    mock_client = MagicMock()
    mock_client.get_secret.side_effect = lambda vault_name: _secret(json.dumps({"vault_name": vault_name}))
    store = KeyVaultSecretStore(vault_url="https://v.vault.azure.net", _secret_client=mock_client)

    dotted = store.get("team-a", "tpp.creds")
    dashed = store.get("team-a", "tpp-creds")

    assert dotted != dashed


@patch("venafi_issuer.secretstore.keyvault.DefaultAzureCredential")
@patch("venafi_issuer.secretstore.keyvault.SecretClient")
def test_uses_shared_credential_by_default(mock_client_cls, mock_cred_cls):
    KeyVaultSecretStore(vault_url="https://v.vault.azure.net")
    KeyVaultSecretStore(vault_url="https://v.vault.azure.net")

    mock_cred_cls.assert_called_once_with()
    assert mock_client_cls.call_args.args == ("https://v.vault.azure.net", mock_cred_cls.return_value)
