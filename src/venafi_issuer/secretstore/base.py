"""Abstract base class for secret stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Self


class SecretStore(ABC):
    """Read-only access to namespaced secrets holding key/value byte data."""

    def close(self) -> None:
        """Release resources. Override in subclasses that hold open connections."""

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @abstractmethod
    def get(self, namespace: str, name: str) -> Mapping[str, bytes]:
        """Return the data of a secret.

        Args:
            namespace: Namespace the secret lives in.
            name: Secret name.

        Raises:
            SecretNotFoundError: The secret does not exist.
            SecretBackendError: The backing store failed or returned malformed data.
        """
