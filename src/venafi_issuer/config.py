"""Configuration loading and validation from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

_DEFAULT_CLUSTER_RESOURCE_NAMESPACE = "kube-system"
_DEFAULT_KUBERNETES_API_URL = "https://kubernetes.default.svc"
_SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no", ""}


@dataclass(frozen=True)
class AppConfig:
    """Application configuration loaded from environment variables."""

    secret_store: str
    cluster_resource_namespace: str = _DEFAULT_CLUSTER_RESOURCE_NAMESPACE
    strict_credentials: bool = False
    kubernetes_api_url: str = _DEFAULT_KUBERNETES_API_URL
    kubernetes_token_path: str = f"{_SERVICE_ACCOUNT_DIR}/token"
    kubernetes_ca_path: str = f"{_SERVICE_ACCOUNT_DIR}/ca.crt"
    keyvault_url: str | None = None


def _require_env(name: str) -> str:
    value = os.environ.get(name)
    if not value:
        raise ValueError(f"Required environment variable {name} is not set")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got: {raw!r}")


def load_config() -> AppConfig:
    """Load and validate application configuration from environment variables."""
    secret_store = _require_env("SECRET_STORE")
    cluster_resource_namespace = os.environ.get("CLUSTER_RESOURCE_NAMESPACE") or _DEFAULT_CLUSTER_RESOURCE_NAMESPACE
    strict_credentials = _parse_bool("VENAFI_STRICT_CREDENTIALS", os.environ.get("VENAFI_STRICT_CREDENTIALS", ""))

    return AppConfig(
        secret_store=secret_store,
        cluster_resource_namespace=cluster_resource_namespace,
        strict_credentials=strict_credentials,
        kubernetes_api_url=os.environ.get("KUBERNETES_API_URL", _DEFAULT_KUBERNETES_API_URL),
        kubernetes_token_path=os.environ.get("KUBERNETES_TOKEN_PATH", f"{_SERVICE_ACCOUNT_DIR}/token"),
        kubernetes_ca_path=os.environ.get("KUBERNETES_CA_PATH", f"{_SERVICE_ACCOUNT_DIR}/ca.crt"),
        keyvault_url=os.environ.get("AZURE_KEYVAULT_URL"),
    )
