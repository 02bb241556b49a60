"""Build a Venafi issuer: resolve its configuration, then connect to the backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from venafi_issuer.connector import Connector, ConnectorFactory
from venafi_issuer.errors import ConnectorCreationError
from venafi_issuer.events import EventSink, EventType
from venafi_issuer.models import IssuerSpec
from venafi_issuer.resolver import config_for_issuer
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)

ISSUER_KIND = "Issuer"
CLUSTER_ISSUER_KIND = "ClusterIssuer"
FAILED_INIT_REASON = "FailedInit"


@dataclass(frozen=True)
class VenafiIssuer:
    """An issuer bound to a live Venafi connector."""

    spec: IssuerSpec
    resource_namespace: str
    secret_store: SecretStore
    client: Connector


def resource_namespace(kind: str, namespace: str, cluster_resource_namespace: str) -> str:
    """Namespace to read an issuer's secrets from.

    Issuers use their own namespace; ClusterIssuers are not namespaced and use
    the configured cluster resource namespace.
    """
    if kind == CLUSTER_ISSUER_KIND:
        return cluster_resource_namespace
    if kind == ISSUER_KIND:
        return namespace
    raise ValueError(f"Unknown issuer kind: '{kind}'")


def new_venafi_issuer(
    namespace: str,
    spec: IssuerSpec,
    store: SecretStore,
    connector_factory: ConnectorFactory,
    event_sink: EventSink,
    *,
    strict_credentials: bool = False,
) -> VenafiIssuer:
    """Create a Venafi issuer.

    A ``FailedInit`` warning event is recorded before any error is raised.

    Raises:
        ConfigurationError: The issuer names no backend, or credentials are
            incomplete in strict mode.
        SecretLookupError: The credentials secret could not be read.
        ConnectorCreationError: The connector factory rejected the configuration.
    """
    try:
        config = config_for_issuer(namespace, spec, store, strict_credentials=strict_credentials)
    except Exception as err:
        event_sink.record(EventType.WARNING, FAILED_INIT_REASON, "Failed to initialise issuer: %s", err)
        raise

    try:
        client = connector_factory.create(config)
    except Exception as err:
        event_sink.record(EventType.WARNING, FAILED_INIT_REASON, "Failed to create Venafi client: %s", err)
        raise ConnectorCreationError(f"error creating Venafi client: {err}") from err

    logger.info("Initialised Venafi issuer in namespace %s: %s", namespace, config.to_dict())
    return VenafiIssuer(spec=spec, resource_namespace=namespace, secret_store=store, client=client)
