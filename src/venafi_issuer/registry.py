"""Issuer registry: map issuer type names to constructors.

A registry is filled during startup, frozen, and then only read::

    registry = default_registry()
    constructor = registry.get("venafi")
    issuer = constructor(namespace, spec, store, connector_factory, event_sink)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import Any

from venafi_issuer.connector import ConnectorFactory
from venafi_issuer.errors import RegistryError, UnregisteredIssuerTypeError
from venafi_issuer.events import EventSink
from venafi_issuer.issuer import new_venafi_issuer
from venafi_issuer.models import IssuerSpec
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)

ISSUER_VENAFI = "venafi"

IssuerConstructor = Callable[[str, IssuerSpec, SecretStore, ConnectorFactory, EventSink], Any]


class IssuerRegistry:
    """Write-once mapping from issuer type to constructor. Type names are case-insensitive."""

    def __init__(self) -> None:
        self._constructors: dict[str, IssuerConstructor] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, issuer_type: str, constructor: IssuerConstructor) -> None:
        name = issuer_type.lower()
        if self._frozen:
            raise RegistryError(f"Cannot register issuer type '{name}': registry is frozen")
        if name in self._constructors:
            raise RegistryError(f"Issuer type '{name}' is already registered")
        self._constructors[name] = constructor
        logger.debug("Registered issuer type '%s'", name)

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    def get(self, issuer_type: str) -> IssuerConstructor:
        try:
            return self._constructors[issuer_type.lower()]
        except KeyError:
            raise UnregisteredIssuerTypeError(issuer_type) from None

    def types(self) -> list[str]:
        return sorted(self._constructors)

    def __contains__(self, issuer_type: object) -> bool:
        return isinstance(issuer_type, str) and issuer_type.lower() in self._constructors


def default_registry(strict_credentials: bool = False) -> IssuerRegistry:
    """Return a frozen registry holding every built-in issuer type."""
    registry = IssuerRegistry()
    registry.register(ISSUER_VENAFI, partial(new_venafi_issuer, strict_credentials=strict_credentials))
    registry.freeze()
    return registry
