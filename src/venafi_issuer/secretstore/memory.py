"""In-memory secret store for tests and local runs."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from venafi_issuer.errors import SecretNotFoundError
from venafi_issuer.secretstore.base import SecretStore


class InMemorySecretStore(SecretStore):
    """Secret store backed by a dict keyed on ``(namespace, name)``."""

    def __init__(self, secrets: Mapping[tuple[str, str], Mapping[str, bytes]] | None = None) -> None:
        self._secrets: dict[tuple[str, str], dict[str, bytes]] = {}
        for (namespace, name), data in (secrets or {}).items():
            self.put(namespace, name, data)

    def put(self, namespace: str, name: str, data: Mapping[str, bytes | str]) -> None:
        """Create or replace a secret. String values are stored UTF-8 encoded."""
        self._secrets[(namespace, name)] = {
            key: value.encode() if isinstance(value, str) else bytes(value) for key, value in data.items()
        }

    def get(self, namespace: str, name: str) -> Mapping[str, bytes]:
        try:
            data = self._secrets[(namespace, name)]
        except KeyError:
            raise SecretNotFoundError(namespace, name) from None
        return MappingProxyType(data)
