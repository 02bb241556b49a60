"""Azure Key Vault secret store.

A namespaced secret ``<namespace>/<name>`` is stored as one Key Vault secret
whose value is a JSON object mapping each key to a string value.

Key Vault names only allow alphanumerics and dashes, so both parts are
escaped before joining: ``-`` becomes ``-d`` and ``.`` becomes ``-p``. An
escaped part never contains ``--``, which is used as the separator, so every
``(namespace, name)`` pair maps to a distinct vault name::

    ("team-a", "tpp.creds")  ->  "team-da--tpp-pcreds"
    ("team-a", "tpp-creds")  ->  "team-da--tpp-dcreds"
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping

from azure.core.exceptions import AzureError, ResourceNotFoundError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

from venafi_issuer.errors import SecretBackendError, SecretNotFoundError
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)

_NAME_PART = re.compile(r"^[a-z0-9.-]+$")
_MAX_VAULT_NAME_LENGTH = 127
_ESCAPES = str.maketrans({"-": "-d", ".": "-p"})

_credential: DefaultAzureCredential | None = None


def get_credential() -> DefaultAzureCredential:
    """Return the process-wide Key Vault credential, created on first use."""
    global _credential
    if _credential is None:
        _credential = DefaultAzureCredential()
    return _credential


def vault_secret_name(namespace: str, name: str) -> str:
    """Map a namespaced secret to its Key Vault secret name.

    Raises:
        ValueError: A part is not a lowercase Kubernetes object name, or the
            result exceeds Key Vault's name length limit.
    """
    for label, part in (("namespace", namespace), ("name", name)):
        if not _NAME_PART.match(part):
            raise ValueError(f"invalid secret {label} {part!r}: only lowercase alphanumerics, '-' and '.' allowed")
    vault_name = f"{namespace.translate(_ESCAPES)}--{name.translate(_ESCAPES)}"
    if len(vault_name) > _MAX_VAULT_NAME_LENGTH:
        raise ValueError(f"Key Vault name for {namespace}/{name} exceeds {_MAX_VAULT_NAME_LENGTH} characters")
    return vault_name


class KeyVaultSecretStore(SecretStore):
    """Secret store backed by Azure Key Vault secrets."""

    def __init__(
        self,
        vault_url: str,
        credential=None,
        _secret_client: SecretClient | None = None,
    ) -> None:
        self._client = _secret_client or SecretClient(vault_url, credential or get_credential())

    def get(self, namespace: str, name: str) -> Mapping[str, bytes]:
        try:
            vault_name = vault_secret_name(namespace, name)
        except ValueError as err:
            raise SecretBackendError(str(err)) from err

        try:
            secret = self._client.get_secret(vault_name)
        except ResourceNotFoundError:
            raise SecretNotFoundError(namespace, name) from None
        except AzureError as err:
            raise SecretBackendError(f"error fetching Key Vault secret '{vault_name}': {err}") from err

        try:
            payload = json.loads(secret.value or "{}")
        except json.JSONDecodeError as err:
            raise SecretBackendError(f"Key Vault secret '{vault_name}' is not a JSON object: {err}") from err
        if not isinstance(payload, dict) or not all(isinstance(v, str) for v in payload.values()):
            raise SecretBackendError(f"Key Vault secret '{vault_name}' must be a JSON object of strings")

        logger.debug("Read Key Vault secret '%s' (%d keys)", vault_name, len(payload))
        return {key: value.encode() for key, value in payload.items()}

    def close(self) -> None:
        self._client.close()
