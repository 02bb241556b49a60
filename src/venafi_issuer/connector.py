"""Connector factory: build HTTP clients for a resolved Venafi client configuration."""

from __future__ import annotations

import logging
import ssl
from abc import ABC, abstractmethod
from typing import Self

import httpx
from cryptography import x509

from venafi_issuer.errors import ConnectorCreationError
from venafi_issuer.models import ApiKey, ClientConfig, ConnectorType

logger = logging.getLogger(__name__)

DEFAULT_CLOUD_URL = "https://api.venafi.cloud/v1/"
_TPP_API_PATH = "vedsdk/"
_CLOUD_API_PATH = "v1/"
_CLOUD_API_KEY_HEADER = "tppl-api-key"
_USER_AGENT = "venafi-issuer"
_TIMEOUT = 30


class Connector:
    """A live client bound to one Venafi backend."""

    def __init__(self, config: ClientConfig, http_client: httpx.Client) -> None:
        self.config = config
        self.http_client = http_client

    @property
    def connector_type(self) -> ConnectorType:
        return self.config.connector_type

    @property
    def zone(self) -> str:
        return self.config.zone

    def close(self) -> None:
        self.http_client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class ConnectorFactory(ABC):
    """Creates connectors from client configuration."""

    @abstractmethod
    def create(self, config: ClientConfig) -> Connector:
        """Create a connector.

        Raises:
            ConnectorCreationError: The configuration cannot be used to reach the backend.
        """


def _normalize_url(url: str, api_path: str) -> str:
    """Force https and make sure the URL ends with the backend's API path."""
    if url.startswith("http://"):
        url = "https://" + url.removeprefix("http://")
    elif not url.startswith("https://"):
        url = "https://" + url
    if not url.endswith("/"):
        url += "/"
    if not url.endswith(api_path):
        url += api_path
    return url


def _trust_context(trust_bundle: str) -> ssl.SSLContext:
    """Build a TLS context that trusts only the certificates in a PEM bundle."""
    try:
        certs = x509.load_pem_x509_certificates(trust_bundle.encode())
    except ValueError as err:
        raise ConnectorCreationError(f"CA bundle is not a valid PEM certificate bundle: {err}") from err
    logger.debug("Using %d certificate(s) from CA bundle as trust roots", len(certs))
    return ssl.create_default_context(cadata=trust_bundle)


def _log_request(request: httpx.Request) -> None:
    logger.info("Venafi request: %s %s", request.method, request.url)


class HttpConnectorFactory(ConnectorFactory):
    """Builds httpx-backed connectors for TPP and Venafi Cloud."""

    def __init__(self, timeout: float = _TIMEOUT) -> None:
        self._timeout = timeout

    def create(self, config: ClientConfig) -> Connector:
        headers = {"User-Agent": _USER_AGENT}

        if config.connector_type is ConnectorType.TPP:
            if not config.base_url:
                raise ConnectorCreationError("TPP URL is required")
            base_url = _normalize_url(config.base_url, _TPP_API_PATH)
        else:
            base_url = _normalize_url(config.base_url or DEFAULT_CLOUD_URL, _CLOUD_API_PATH)
            if isinstance(config.credentials, ApiKey):
                headers[_CLOUD_API_KEY_HEADER] = config.credentials.value

        verify: ssl.SSLContext | bool = True
        if config.trust_bundle:
            verify = _trust_context(config.trust_bundle)

        event_hooks = {"request": [_log_request]} if config.verbose else {}
        try:
            client = httpx.Client(
                base_url=base_url,
                headers=headers,
                verify=verify,
                timeout=self._timeout,
                event_hooks=event_hooks,
            )
        except (httpx.InvalidURL, ssl.SSLError, ValueError) as err:
            raise ConnectorCreationError(f"invalid Venafi connection settings: {err}") from err

        logger.info("Created %s connector for %s", config.connector_type.value, base_url)
        return Connector(config, client)
