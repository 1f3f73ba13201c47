"""Service principal authentication against an Azure environment."""

from __future__ import annotations

import asyncio

import structlog
from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError
from azure.identity import ClientSecretCredential

from storage_sample.config.models import RunConfig
from storage_sample.management.environment import AZURE_PUBLIC_CLOUD, AzureEnvironment

logger = structlog.get_logger()


class AuthenticationError(Exception):
    """Raised when the client credential exchange fails."""


def build_credential(
    config: RunConfig, environment: AzureEnvironment = AZURE_PUBLIC_CLOUD
) -> ClientSecretCredential:
    """Build a service principal credential for *environment*.

    ADFS environments override the tenant and turn off authority validation.
    """
    return ClientSecretCredential(
        tenant_id=environment.tenant_for(config.tenant_id),
        client_id=config.client_id,
        client_secret=config.client_secret.get_secret_value(),
        authority=environment.authority_host,
        disable_instance_discovery=not environment.validate_authority,
    )


async def authenticate(
    config: RunConfig, environment: AzureEnvironment = AZURE_PUBLIC_CLOUD
) -> TokenCredential:
    """Exchange client credentials for a token and return the live credential.

    The credential is lazy, so a token is requested up front to surface bad
    credentials before any pipeline step runs.
    """
    loop = asyncio.get_running_loop()
    try:
        credential = build_credential(config, environment)
        await loop.run_in_executor(
            None, lambda: credential.get_token(environment.credential_scope)
        )
    except (AzureError, ValueError) as exc:
        logger.error(
            "auth.failed",
            environment=environment.name,
            client_id=config.client_id,
            error=str(exc),
        )
        raise AuthenticationError(f"Authentication failed: {exc}") from exc
    logger.info(
        "auth.succeeded",
        environment=environment.name,
        tenant=environment.tenant_for(config.tenant_id),
    )
    return credential
