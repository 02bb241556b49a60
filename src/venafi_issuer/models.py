"""Data classes describing Venafi issuer resources and resolved client configuration."""

from __future__ import annotations

import binascii
from base64 import b64decode, b64encode
from dataclasses import dataclass, field
from enum import Enum

from venafi_issuer.errors import ConfigurationError


@dataclass(frozen=True)
class SecretRef:
    """Reference to a secret in the issuer's resource namespace, optionally to one key in it."""

    name: str
    key: str = ""

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.key:
            data["key"] = self.key
        return data

    @classmethod
    def from_dict(cls, data: dict) -> SecretRef:
        return cls(name=data["name"], key=data.get("key", ""))


@dataclass(frozen=True)
class TPPConfig:
    """Connection details for an on-premises Trust Protection Platform."""

    url: str
    credentials_ref: SecretRef
    ca_bundle: bytes = b""

    def to_dict(self) -> dict:
        data = {"url": self.url, "credentialsRef": self.credentials_ref.to_dict()}
        if self.ca_bundle:
            data["caBundle"] = b64encode(self.ca_bundle).decode()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> TPPConfig:
        raw_bundle = data.get("caBundle") or ""
        try:
            ca_bundle = b64decode(raw_bundle, validate=True)
        except binascii.Error as err:
            raise ConfigurationError(f"tpp.caBundle is not valid base64: {err}") from err
        return cls(
            url=data["url"],
            credentials_ref=SecretRef.from_dict(data["credentialsRef"]),
            ca_bundle=ca_bundle,
        )


@dataclass(frozen=True)
class CloudConfig:
    """Connection details for Venafi Cloud. An empty URL selects the public service."""

    api_key_secret_ref: SecretRef
    url: str = ""

    def to_dict(self) -> dict:
        data = {"apiKeySecretRef": self.api_key_secret_ref.to_dict()}
        if self.url:
            data["url"] = self.url
        return data

    @classmethod
    def from_dict(cls, data: dict) -> CloudConfig:
        return cls(
            api_key_secret_ref=SecretRef.from_dict(data["apiKeySecretRef"]),
            url=data.get("url", ""),
        )


@dataclass(frozen=True)
class IssuerSpec:
    """The ``venafi`` section of an Issuer or ClusterIssuer.

    ``backend`` holds whichever of the two backend variants is configured, or
    ``None`` when the resource names neither.
    """

    backend: TPPConfig | CloudConfig | None
    zone: str = ""
    verbose: bool = False

    def to_dict(self) -> dict:
        venafi: dict = {"zone": self.zone}
        if self.verbose:
            venafi["verbose"] = True
        if isinstance(self.backend, TPPConfig):
            venafi["tpp"] = self.backend.to_dict()
        elif isinstance(self.backend, CloudConfig):
            venafi["cloud"] = self.backend.to_dict()
        return {"venafi": venafi}

    @classmethod
    def from_dict(cls, data: dict) -> IssuerSpec:
        """Build from an issuer ``spec`` mapping.

        Raises:
            ConfigurationError: The ``venafi`` section is absent, both
                ``tpp`` and ``cloud`` are set, or a required field is missing.
        """
        venafi = data.get("venafi")
        if venafi is None:
            raise ConfigurationError("issuer spec has no venafi configuration")

        tpp = venafi.get("tpp")
        cloud = venafi.get("cloud")
        if tpp is not None and cloud is not None:
            raise ConfigurationError("only one of Venafi Cloud or TPP may be configured")

        backend: TPPConfig | CloudConfig | None = None
        try:
            if tpp is not None:
                backend = TPPConfig.from_dict(tpp)
            elif cloud is not None:
                backend = CloudConfig.from_dict(cloud)
        except KeyError as err:
            variant = "tpp" if tpp is not None else "cloud"
            raise ConfigurationError(f"venafi.{variant} is missing required field {err}") from err

        return cls(
            backend=backend,
            zone=venafi.get("zone", ""),
            verbose=bool(venafi.get("verbose", False)),
        )


class ConnectorType(Enum):
    TPP = "tpp"
    CLOUD = "cloud"


@dataclass(frozen=True)
class UserPassword:
    """TPP username/password credentials."""

    user: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ApiKey:
    """Venafi Cloud API key."""

    value: str = field(repr=False)


Credentials = UserPassword | ApiKey


@dataclass(frozen=True)
class ClientConfig:
    """Everything a connector factory needs to talk to one Venafi backend."""

    connector_type: ConnectorType
    base_url: str
    zone: str
    verbose: bool
    trust_bundle: str
    credentials: Credentials

    def to_dict(self) -> dict:
        """Log-safe representation; secret material is never included."""
        if isinstance(self.credentials, UserPassword):
            credentials = {"type": "user_password", "user": self.credentials.user}
        else:
            credentials = {"type": "api_key"}
        return {
            "connector_type": self.connector_type.value,
            "base_url": self.base_url,
            "zone": self.zone,
            "verbose": self.verbose,
            "has_trust_bundle": bool(self.trust_bundle),
            "credentials": credentials,
        }
