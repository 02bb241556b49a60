"""Turn a Venafi issuer spec into a client configuration.

The issuer names one of two backends. For TPP the referenced secret holds a
username and password; for Venafi Cloud it holds an API key under a
configurable key (``api-key`` by default). Secrets are read from the issuer's
resource namespace and are never written.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from venafi_issuer.errors import ConfigurationError, MissingCredentialsError, SecretLookupError, SecretStoreError
from venafi_issuer.models import (
    ApiKey,
    ClientConfig,
    CloudConfig,
    ConnectorType,
    IssuerSpec,
    TPPConfig,
    UserPassword,
)
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)

TPP_USERNAME_KEY = "username"
TPP_PASSWORD_KEY = "password"
DEFAULT_API_KEY_KEY = "api-key"


def _read_key(secret: Mapping[str, bytes], secret_name: str, key: str, strict: bool) -> str:
    """Decode one value of a secret. Missing keys read as "" unless ``strict``."""
    value = secret.get(key, b"")
    if strict and not value:
        raise MissingCredentialsError(f"secret '{secret_name}' has no value for key '{key}'")
    try:
        return value.decode()
    except UnicodeDecodeError as err:
        raise ConfigurationError(f"secret '{secret_name}' key '{key}' is not valid UTF-8 (offset {err.start})") from err


def _tpp_config(namespace: str, spec: IssuerSpec, tpp: TPPConfig, store: SecretStore, strict: bool) -> ClientConfig:
    secret_name = tpp.credentials_ref.name
    try:
        secret = store.get(namespace, secret_name)
    except SecretStoreError as err:
        raise SecretLookupError(f"error loading TPP credentials: {err}") from err

    username = _read_key(secret, secret_name, TPP_USERNAME_KEY, strict)
    password = _read_key(secret, secret_name, TPP_PASSWORD_KEY, strict)

    ca_bundle = ""
    if tpp.ca_bundle:
        try:
            ca_bundle = tpp.ca_bundle.decode()
        except UnicodeDecodeError as err:
            raise ConfigurationError(f"tpp.caBundle is not valid UTF-8 PEM data: {err}") from err

    return ClientConfig(
        connector_type=ConnectorType.TPP,
        base_url=tpp.url,
        zone=spec.zone,
        verbose=spec.verbose,
        trust_bundle=ca_bundle,
        credentials=UserPassword(user=username, password=password),
    )


def _cloud_config(
    namespace: str, spec: IssuerSpec, cloud: CloudConfig, store: SecretStore, strict: bool
) -> ClientConfig:
    secret_name = cloud.api_key_secret_ref.name
    try:
        secret = store.get(namespace, secret_name)
    except SecretStoreError as err:
        raise SecretLookupError(f"error loading Cloud credentials: {err}") from err

    key = cloud.api_key_secret_ref.key or DEFAULT_API_KEY_KEY
    api_key = _read_key(secret, secret_name, key, strict)

    return ClientConfig(
        connector_type=ConnectorType.CLOUD,
        base_url=cloud.url,
        zone=spec.zone,
        verbose=spec.verbose,
        trust_bundle="",
        credentials=ApiKey(value=api_key),
    )


def config_for_issuer(
    namespace: str,
    spec: IssuerSpec,
    store: SecretStore,
    *,
    strict_credentials: bool = False,
) -> ClientConfig:
    """Resolve the credentials an issuer references and build its client configuration.

    Args:
        namespace: Namespace to read referenced secrets from.
        spec: The issuer's Venafi configuration.
        store: Read-only secret lookup.
        strict_credentials: Reject secrets that lack an expected key or hold an
            empty value for it, instead of passing empty credentials through.

    Raises:
        ConfigurationError: Neither backend is configured, or (strict mode) a
            credential key is missing.
        SecretLookupError: The referenced secret could not be read.
    """
    backend = spec.backend
    if isinstance(backend, TPPConfig):
        config = _tpp_config(namespace, spec, backend, store, strict_credentials)
    elif isinstance(backend, CloudConfig):
        config = _cloud_config(namespace, spec, backend, store, strict_credentials)
    else:
        raise ConfigurationError("neither Venafi Cloud or TPP configuration found")

    logger.info("Resolved %s client configuration in namespace %s", config.connector_type.value, namespace)
    return config
