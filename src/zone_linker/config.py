"""Configuration management with validation.

Configuration is read from the environment exactly once per invocation
by Config.from_env(). The linking workflow only ever sees the resulting
Config instance, never the process environment.

Values that are only needed by one authentication strategy, and the
target virtual network list, are checked by the step that consumes
them so that events which are skipped never fail on configuration.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from .errors import ConfigurationError, InvalidTargetListEncodingError, MissingConfigurationError

ENV_PREFIX = "PRIVATE_AKS_DNS_ZONE_LINKER_"

ENV_AUTHENTICATION_TYPE = f"{ENV_PREFIX}AUTHENTICATION_TYPE"
ENV_SP_TENANT_ID = f"{ENV_PREFIX}SP_TENANT_ID"
ENV_SP_CLIENT_ID = f"{ENV_PREFIX}SP_CLIENT_ID"
ENV_SP_SECRET = f"{ENV_PREFIX}SP_SECRET"
ENV_MSI_CLIENT_ID = f"{ENV_PREFIX}MSI_CLIENT_ID"
ENV_TARGET_VNETS = f"{ENV_PREFIX}TARGET_VNETS"
ENV_LOG_LEVEL = f"{ENV_PREFIX}LOG_LEVEL"

# Supplied by the App Service / Functions host, not by our own configuration
ENV_MSI_ENDPOINTS: tuple[str, ...] = ("IDENTITY_ENDPOINT", "MSI_ENDPOINT")

DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AuthenticationType(str, Enum):
    """Supported credential acquisition strategies."""

    SERVICE_PRINCIPAL_SECRET = "SERVICE_PRINCIPAL_SECRET"
    APP_SERVICE_MSI = "APP_SERVICE_MSI"


@dataclass(frozen=True)
class Config:
    """Zone linker configuration loaded from environment variables.

    authentication_type is kept as the raw configured string; it is
    resolved to an AuthenticationType when a credential is requested.
    """

    authentication_type: str | None = None

    # Service principal strategy
    tenant_id: str | None = None
    client_id: str | None = None
    client_secret: str | None = field(default=None, repr=False)

    # Managed identity strategy
    msi_endpoint: str | None = None
    msi_client_id: str | None = None

    # Base64 encoded JSON array of virtual network resource ids
    target_vnets_encoded: str | None = None

    log_level: str = DEFAULT_LOG_LEVEL

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"{ENV_LOG_LEVEL} must be one of {list(VALID_LOG_LEVELS)}: {self.log_level}"
            )

    def target_virtual_networks(self) -> list[str]:
        """Decode the configured target virtual network resource ids.

        Returns:
            Raw resource id strings in configured order.

        Raises:
            MissingConfigurationError: If no target list is configured.
            InvalidTargetListEncodingError: If the value is not base64 encoded
                JSON holding an array of strings.
        """
        if self.target_vnets_encoded is None:
            raise MissingConfigurationError(
                ENV_TARGET_VNETS,
                "Target vnets have to be set as a base64 encoded JSON array "
                "of resource id strings.",
            )

        # base64 tools wrap long output across lines
        compact = "".join(self.target_vnets_encoded.split())
        try:
            decoded = base64.b64decode(compact, validate=True).decode("utf-8")
        except (binascii.Error, ValueError) as e:
            raise InvalidTargetListEncodingError(ENV_TARGET_VNETS, f"invalid base64: {e}") from e

        try:
            target_ids = json.loads(decoded)
        except json.JSONDecodeError as e:
            raise InvalidTargetListEncodingError(ENV_TARGET_VNETS, f"invalid JSON: {e}") from e

        if not isinstance(target_ids, list):
            raise InvalidTargetListEncodingError(
                ENV_TARGET_VNETS, f"expected a JSON array, got {type(target_ids).__name__}"
            )

        for index, target_id in enumerate(target_ids):
            if not isinstance(target_id, str):
                raise InvalidTargetListEncodingError(
                    ENV_TARGET_VNETS, f"entry {index} is not a string: {target_id!r}"
                )

        return target_ids

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level.upper())

    @classmethod
    def from_env(cls) -> Config:
        """Load configuration from environment variables.

        Environment Variables:
            PRIVATE_AKS_DNS_ZONE_LINKER_AUTHENTICATION_TYPE: SERVICE_PRINCIPAL_SECRET
                or APP_SERVICE_MSI
            PRIVATE_AKS_DNS_ZONE_LINKER_SP_TENANT_ID: Service principal tenant
            PRIVATE_AKS_DNS_ZONE_LINKER_SP_CLIENT_ID: Service principal client id
            PRIVATE_AKS_DNS_ZONE_LINKER_SP_SECRET: Service principal secret
            PRIVATE_AKS_DNS_ZONE_LINKER_MSI_CLIENT_ID: Optional user-assigned
                managed identity client id
            PRIVATE_AKS_DNS_ZONE_LINKER_TARGET_VNETS: Base64 encoded JSON array
                of virtual network resource ids
            PRIVATE_AKS_DNS_ZONE_LINKER_LOG_LEVEL: Log level (default: INFO)

        Host Variables:
            IDENTITY_ENDPOINT / MSI_ENDPOINT: Managed identity endpoint
        """
        msi_endpoint = None
        for key in ENV_MSI_ENDPOINTS:
            msi_endpoint = os.environ.get(key)
            if msi_endpoint:
                break

        return cls(
            authentication_type=os.environ.get(ENV_AUTHENTICATION_TYPE),
            tenant_id=os.environ.get(ENV_SP_TENANT_ID),
            client_id=os.environ.get(ENV_SP_CLIENT_ID),
            client_secret=os.environ.get(ENV_SP_SECRET),
            msi_endpoint=msi_endpoint,
            msi_client_id=os.environ.get(ENV_MSI_CLIENT_ID) or None,
            target_vnets_encoded=os.environ.get(ENV_TARGET_VNETS),
            log_level=os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL),
        )


def encode_target_virtual_networks(target_ids: list[str]) -> str:
    """Encode resource ids into the PRIVATE_AKS_DNS_ZONE_LINKER_TARGET_VNETS format."""
    return base64.b64encode(json.dumps(target_ids).encode("utf-8")).decode("ascii")
