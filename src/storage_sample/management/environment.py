"""Cloud environment records passed to authentication and client setup."""

from __future__ import annotations

from dataclasses import dataclass

from azure.identity import AzureAuthorityHosts

ADFS_TENANT = "adfs"


@dataclass(frozen=True)
class AzureEnvironment:
    """Endpoints and authority settings for one Azure cloud.

    ``tenant_override`` replaces the configured tenant when set (ADFS
    deployments authenticate against the fixed ``adfs`` tenant).
    """

    name: str
    resource_manager_url: str
    authority_host: str
    audience: str
    portal_url: str = ""
    gallery_url: str = ""
    graph_url: str = ""
    storage_endpoint_suffix: str = ""
    key_vault_dns_suffix: str = ""
    tenant_override: str | None = None
    validate_authority: bool = True

    @property
    def is_adfs(self) -> bool:
        return self.tenant_override == ADFS_TENANT

    @property
    def credential_scope(self) -> str:
        """OAuth scope for Resource Manager tokens in this cloud."""
        return f"{self.audience.rstrip('/')}/.default"

    def tenant_for(self, configured_tenant: str) -> str:
        return self.tenant_override or configured_tenant


AZURE_PUBLIC_CLOUD = AzureEnvironment(
    name="AzureCloud",
    resource_manager_url="https://management.azure.com",
    authority_host=f"https://{AzureAuthorityHosts.AZURE_PUBLIC_CLOUD}/",
    audience="https://management.core.windows.net/",
    portal_url="https://portal.azure.com",
    gallery_url="https://gallery.azure.com/",
    graph_url="https://graph.windows.net/",
    storage_endpoint_suffix=".core.windows.net",
    key_vault_dns_suffix=".vault.azure.net",
)
