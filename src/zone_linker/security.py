"""Credential acquisition for the Azure management plane.

Two strategies are supported, selected by configuration:
- SERVICE_PRINCIPAL_SECRET: client credentials flow with tenant id,
  client id and client secret
- APP_SERVICE_MSI: managed identity of the hosting App Service or
  Function App, reached through the endpoint the host provides

Both strategies return an azure.core TokenCredential, which is the only
credential type the management clients accept. A token is requested
immediately so identity failures surface at the authentication step
instead of on the first link call. Nothing is cached; every invocation
acquires a fresh credential.
"""

from __future__ import annotations

import logging

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.identity import ClientSecretCredential, ManagedIdentityCredential

from .config import (
    ENV_AUTHENTICATION_TYPE,
    ENV_SP_CLIENT_ID,
    ENV_SP_SECRET,
    ENV_SP_TENANT_ID,
    AuthenticationType,
    Config,
)
from .errors import (
    CredentialAcquisitionError,
    MissingConfigurationError,
    UnsupportedAuthenticationTypeError,
)

logger = logging.getLogger(__name__)

ARM_SCOPE = "https://management.azure.com/.default"


def resolve_authentication_type(config: Config) -> AuthenticationType:
    """Resolve the configured strategy name.

    Raises:
        UnsupportedAuthenticationTypeError: If the name is not a known strategy.
    """
    try:
        return AuthenticationType(config.authentication_type)
    except ValueError as e:
        raise UnsupportedAuthenticationTypeError(
            config.authentication_type, ENV_AUTHENTICATION_TYPE
        ) from e


def _redact(value: str | None) -> str | None:
    if value and len(value) > 8:
        return value[:8] + "..."
    return value


def _service_principal_credential(config: Config) -> ClientSecretCredential:
    required = (
        (ENV_SP_TENANT_ID, config.tenant_id),
        (ENV_SP_CLIENT_ID, config.client_id),
        (ENV_SP_SECRET, config.client_secret),
    )
    for variable, value in required:
        if not value:
            raise MissingConfigurationError(
                variable,
                f"It is required when {ENV_AUTHENTICATION_TYPE} is "
                f"{AuthenticationType.SERVICE_PRINCIPAL_SECRET.value}.",
            )

    logger.info(
        "Using service principal secret",
        extra={"tenant_id": _redact(config.tenant_id), "client_id": _redact(config.client_id)},
    )
    return ClientSecretCredential(
        tenant_id=config.tenant_id,
        client_id=config.client_id,
        client_secret=config.client_secret,
    )


def _managed_identity_credential(config: Config) -> ManagedIdentityCredential:
    if config.msi_client_id:
        client_id = config.msi_client_id
        logger.info(
            "Using user-assigned managed identity",
            extra={
                "client_id": _redact(client_id),
                "msi_endpoint": config.msi_endpoint,
            },
        )
        return ManagedIdentityCredential(client_id=client_id)

    logger.info(
        "Using system-assigned managed identity",
        extra={"msi_endpoint": config.msi_endpoint},
    )
    return ManagedIdentityCredential()


def authenticate(config: Config) -> TokenCredential:
    """Acquire a credential for the Azure management plane.

    Args:
        config: Zone linker configuration.

    Returns:
        A credential that has successfully issued an ARM token.

    Raises:
        UnsupportedAuthenticationTypeError: If the strategy is unknown. No
            network call is made in that case.
        MissingConfigurationError: If a value the strategy needs is missing.
        CredentialAcquisitionError: If the credential cannot be built from
            the configured values or the identity exchange fails.
    """
    authentication_type = resolve_authentication_type(config)

    # azure-identity rejects malformed tenant or client ids with ValueError
    try:
        match authentication_type:
            case AuthenticationType.SERVICE_PRINCIPAL_SECRET:
                credential = _service_principal_credential(config)
            case AuthenticationType.APP_SERVICE_MSI:
                credential = _managed_identity_credential(config)
            case _:
                raise UnsupportedAuthenticationTypeError(
                    config.authentication_type, ENV_AUTHENTICATION_TYPE
                )

        credential.get_token(ARM_SCOPE)
    except (AzureError, ValueError) as e:
        raise CredentialAcquisitionError(authentication_type.value, str(e)) from e

    logger.info(
        "Credential acquired",
        extra={"authentication_type": authentication_type.value},
    )
    return credential
