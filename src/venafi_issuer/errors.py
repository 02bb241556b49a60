"""Exception types raised while setting up a Venafi issuer."""

from __future__ import annotations


class IssuerError(Exception):
    """Base class for failures to build an issuer."""


class ConfigurationError(IssuerError):
    """The issuer resource is misconfigured. Not retryable until the resource changes."""


class MissingCredentialsError(ConfigurationError):
    """A referenced secret is missing one of the expected credential keys."""


class SecretLookupError(IssuerError):
    """The secret referenced by the issuer could not be read."""


class ConnectorCreationError(IssuerError):
    """The connector factory rejected the resolved client configuration."""


class RegistryError(Exception):
    """Invalid use of an issuer registry."""


class UnregisteredIssuerTypeError(RegistryError, KeyError):
    """No constructor is registered for the requested issuer type."""

    def __init__(self, issuer_type: str) -> None:
        super().__init__(issuer_type)
        self.issuer_type = issuer_type

    def __str__(self) -> str:
        return f"Unregistered issuer type: '{self.issuer_type}'"


class SecretStoreError(Exception):
    """Base class for secret store failures."""


class SecretNotFoundError(SecretStoreError):
    """The requested secret does not exist."""

    def __init__(self, namespace: str, name: str) -> None:
        super().__init__(f'secret "{name}" not found in namespace "{namespace}"')
        self.namespace = namespace
        self.name = name


class SecretBackendError(SecretStoreError):
    """The secret store could not be reached or returned an unexpected response."""
