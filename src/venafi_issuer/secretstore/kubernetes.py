"""Kubernetes secret store: read Secrets through the API server REST interface."""

from __future__ import annotations

import binascii
import logging
import ssl
from base64 import b64decode
from collections.abc import Mapping

import httpx

from venafi_issuer.errors import SecretBackendError, SecretNotFoundError
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)

_TIMEOUT = 30


class KubernetesSecretStore(SecretStore):
    """Secret store backed by the Kubernetes core/v1 Secrets API."""

    def __init__(
        self,
        api_url: str,
        token: str,
        ca_path: str | None = None,
        _http_client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        if _http_client is None:
            verify: ssl.SSLContext | bool = ssl.create_default_context(cafile=ca_path) if ca_path else True
            _http_client = httpx.Client(
                headers={"Authorization": f"Bearer {token}"},
                verify=verify,
                timeout=_TIMEOUT,
            )
        self._client = _http_client

    def get(self, namespace: str, name: str) -> Mapping[str, bytes]:
        url = f"{self._api_url}/api/v1/namespaces/{namespace}/secrets/{name}"
        try:
            resp = self._client.get(url)
        except httpx.HTTPError as err:
            raise SecretBackendError(f"error fetching secret {namespace}/{name}: {err}") from err

        if resp.status_code == 404:
            raise SecretNotFoundError(namespace, name)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as err:
            raise SecretBackendError(f"error fetching secret {namespace}/{name}: {err}") from err

        try:
            body = resp.json()
        except ValueError as err:
            raise SecretBackendError(f"secret {namespace}/{name}: response is not JSON: {err}") from err
        if not isinstance(body, dict):
            raise SecretBackendError(f"secret {namespace}/{name}: response is not a Secret object")
        encoded = body.get("data") or {}
        if not isinstance(encoded, dict):
            raise SecretBackendError(f"secret {namespace}/{name} has malformed data: expected an object")
        try:
            data = {key: b64decode(value, validate=True) for key, value in encoded.items()}
        except (binascii.Error, TypeError) as err:
            raise SecretBackendError(f"secret {namespace}/{name} has malformed data: {err}") from err
        logger.debug("Read secret %s/%s (%d keys)", namespace, name, len(data))
        return data

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
