"""Entry points used by the surrounding controller to build issuers from resources."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from venafi_issuer.config import AppConfig, load_config
from venafi_issuer.connector import ConnectorFactory, HttpConnectorFactory
from venafi_issuer.errors import ConfigurationError
from venafi_issuer.events import EventSink, EventType, LoggingEventSink
from venafi_issuer.issuer import FAILED_INIT_REASON, resource_namespace
from venafi_issuer.models import IssuerSpec
from venafi_issuer.registry import ISSUER_VENAFI, IssuerRegistry, default_registry
from venafi_issuer.secretstore import get_secret_store
from venafi_issuer.secretstore.base import SecretStore

logger = logging.getLogger(__name__)


def issuer_type_of(spec: dict) -> str:
    """Name of the issuer type configured in an issuer ``spec`` mapping."""
    if "venafi" in spec:
        return ISSUER_VENAFI
    raise ConfigurationError("issuer spec does not configure a supported issuer type")


@dataclass
class IssuerBuilder:
    """Capabilities needed to build issuers, assembled once at startup."""

    config: AppConfig
    secret_store: SecretStore
    registry: IssuerRegistry
    connector_factory: ConnectorFactory = field(default_factory=HttpConnectorFactory)

    @classmethod
    def from_env(cls) -> IssuerBuilder:
        config = load_config()
        return cls(
            config=config,
            secret_store=get_secret_store(config),
            registry=default_registry(strict_credentials=config.strict_credentials),
        )

    def build(self, resource: dict, event_sink: EventSink | None = None):
        """Build the issuer described by an Issuer or ClusterIssuer resource.

        Args:
            resource: The resource as a mapping with ``kind``, ``metadata`` and ``spec``.
            event_sink: Where to record events; defaults to logging them against
                the resource.
        """
        metadata = resource.get("metadata", {})
        kind = resource["kind"]
        name = metadata.get("name", "")
        namespace = resource_namespace(kind, metadata.get("namespace", ""), self.config.cluster_resource_namespace)

        if event_sink is None:
            event_sink = LoggingEventSink(involved_object=f"{kind}/{name}")

        issuer_type = issuer_type_of(resource["spec"])
        constructor = self.registry.get(issuer_type)
        try:
            spec = IssuerSpec.from_dict(resource["spec"])
        except ConfigurationError as err:
            event_sink.record(EventType.WARNING, FAILED_INIT_REASON, "Failed to initialise issuer: %s", err)
            raise
        logger.info("Building %s issuer %s/%s from namespace %s", issuer_type, kind, name, namespace)
        return constructor(namespace, spec, self.secret_store, self.connector_factory, event_sink)
