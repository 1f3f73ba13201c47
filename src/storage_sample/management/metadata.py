"""Endpoint discovery for Azure Stack (hybrid) Resource Manager deployments."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from storage_sample.management.environment import ADFS_TENANT, AzureEnvironment

logger = structlog.get_logger()

METADATA_PATH = "/metadata/endpoints"
METADATA_API_VERSION = "1.0"
HYBRID_ENVIRONMENT_NAME = "AzureStack"


class EndpointDiscoveryError(Exception):
    """Raised when the metadata endpoint cannot be fetched or parsed."""


def domain_suffix(arm_endpoint: str) -> str:
    """Return *arm_endpoint* from its first ``.`` onwards.

    An endpoint without a dot is returned whole.
    """
    idx = arm_endpoint.find(".")
    return arm_endpoint if idx == -1 else arm_endpoint[idx:]


def authority_host(login_endpoint: str) -> str:
    """Strip everything after the last ``/`` of the login endpoint."""
    return login_endpoint[: login_endpoint.rfind("/") + 1]


def is_adfs(login_endpoint: str) -> bool:
    return login_endpoint.endswith(ADFS_TENANT)


def environment_from_metadata(
    arm_endpoint: str, metadata: dict[str, Any]
) -> AzureEnvironment:
    """Derive an AzureEnvironment from a ``/metadata/endpoints`` response body."""
    try:
        auth = metadata["authentication"]
        login_endpoint: str = auth["loginEndpoint"]
        audience: str = auth["audiences"][0]
    except (KeyError, IndexError, TypeError) as exc:
        msg = f"Malformed endpoint metadata from {arm_endpoint}: missing {exc}"
        raise EndpointDiscoveryError(msg) from exc

    suffix = domain_suffix(arm_endpoint)
    adfs = is_adfs(login_endpoint)
    return AzureEnvironment(
        name=HYBRID_ENVIRONMENT_NAME,
        resource_manager_url=arm_endpoint,
        authority_host=authority_host(login_endpoint),
        audience=audience,
        portal_url=metadata.get("portalEndpoint", ""),
        gallery_url=metadata.get("galleryEndpoint", ""),
        graph_url=metadata.get("graphEndpoint", ""),
        storage_endpoint_suffix=f".{suffix}",
        key_vault_dns_suffix=f".vault{suffix}",
        tenant_override=ADFS_TENANT if adfs else None,
        validate_authority=not adfs,
    )


async def discover_environment(
    arm_endpoint: str,
    client: httpx.AsyncClient | None = None,
) -> AzureEnvironment:
    """Fetch endpoint metadata (unauthenticated) and build the environment record."""
    base = arm_endpoint.rstrip("/")
    url = f"{base}{METADATA_PATH}"
    owns_client = client is None
    http = client or httpx.AsyncClient()
    try:
        resp = await http.get(url, params={"api-version": METADATA_API_VERSION})
        resp.raise_for_status()
        metadata = resp.json()
    except httpx.HTTPError as exc:
        logger.error("metadata.request_failed", url=url, error=str(exc))
        msg = f"Failed to fetch endpoint metadata from {url}: {exc}"
        raise EndpointDiscoveryError(msg) from exc
    except ValueError as exc:
        logger.error("metadata.invalid_json", url=url, error=str(exc))
        msg = f"Endpoint metadata from {url} is not valid JSON: {exc}"
        raise EndpointDiscoveryError(msg) from exc
    finally:
        if owns_client:
            await http.aclose()

    if not isinstance(metadata, dict):
        msg = f"Expected a JSON object from {url}, got {type(metadata).__name__}"
        raise EndpointDiscoveryError(msg)

    environment = environment_from_metadata(base, metadata)
    logger.info(
        "metadata.discovered",
        arm_endpoint=base,
        authority=environment.authority_host,
        adfs=environment.is_adfs,
    )
    return environment
