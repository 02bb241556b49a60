"""Secret store factory: resolve store name to concrete implementation."""

from __future__ import annotations

from pathlib import Path

from venafi_issuer.config import AppConfig
from venafi_issuer.secretstore.base import SecretStore
from venafi_issuer.secretstore.keyvault import KeyVaultSecretStore
from venafi_issuer.secretstore.keyvault import get_credential as _get_credential
from venafi_issuer.secretstore.kubernetes import KubernetesSecretStore
from venafi_issuer.secretstore.memory import InMemorySecretStore

__all__ = ["InMemorySecretStore", "KeyVaultSecretStore", "KubernetesSecretStore", "SecretStore", "get_secret_store"]


def get_secret_store(config: AppConfig, store_name: str | None = None) -> SecretStore:
    """Instantiate a secret store by name.

    Args:
        config: Application configuration.
        store_name: Override the store selected by ``SECRET_STORE``.

    Returns:
        A configured SecretStore instance.
    """
    name = (store_name or config.secret_store).lower()

    if name == "kubernetes":
        token_path = Path(config.kubernetes_token_path)
        if not token_path.is_file():
            raise ValueError(f"Kubernetes service account token not found at {token_path}")
        ca_path = config.kubernetes_ca_path if Path(config.kubernetes_ca_path).is_file() else None
        return KubernetesSecretStore(
            api_url=config.kubernetes_api_url,
            token=token_path.read_text().strip(),
            ca_path=ca_path,
        )

    if name == "keyvault":
        if not config.keyvault_url:
            raise ValueError("AZURE_KEYVAULT_URL is required when SECRET_STORE=keyvault")
        return KeyVaultSecretStore(vault_url=config.keyvault_url, credential=_get_credential())

    raise ValueError(f"Unknown secret store: '{name}'")
