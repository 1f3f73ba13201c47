"""Async wrappers around the Azure resource and storage management clients."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from azure.core.credentials import TokenCredential
from azure.mgmt.resource import ResourceManagementClient
from azure.mgmt.storage import StorageManagementClient
from azure.mgmt.storage.models import (
    Sku,
    StorageAccountCheckNameAvailabilityParameters,
    StorageAccountCreateParameters,
    StorageAccountRegenerateKeyParameters,
    StorageAccountUpdateParameters,
)

from storage_sample.config.models import RunConfig, SampleSettings
from storage_sample.management.environment import AZURE_PUBLIC_CLOUD, AzureEnvironment

logger = structlog.get_logger()

T = TypeVar("T")


def build_clients(
    credential: TokenCredential,
    config: RunConfig,
    environment: AzureEnvironment = AZURE_PUBLIC_CLOUD,
) -> tuple[ResourceManagementClient, StorageManagementClient]:
    """Create management clients bound to *environment*'s Resource Manager."""
    kwargs: dict[str, Any] = {
        "base_url": environment.resource_manager_url,
        "credential_scopes": [environment.credential_scope],
    }
    resource_client = ResourceManagementClient(
        credential, config.subscription_id, **kwargs
    )
    storage_client = StorageManagementClient(
        credential, config.subscription_id, **kwargs
    )
    return resource_client, storage_client


class StorageOperations:
    """The remote calls of the sample, one coroutine per management operation.

    The SDK clients are synchronous; each call runs in the default executor so
    the pipeline can await it. Paged results are drained into lists.
    """

    def __init__(
        self,
        resource_client: ResourceManagementClient,
        storage_client: StorageManagementClient,
        settings: SampleSettings,
        location: str,
    ) -> None:
        self._resources = resource_client
        self._storage = storage_client
        self._settings = settings
        self._location = location

    async def _call(self, fn: Callable[[], T]) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, fn)

    # -- Parameters ------------------------------------------------------------

    def resource_group_parameters(self) -> dict[str, Any]:
        return {
            "location": self._location,
            "tags": dict(self._settings.resource_group_tags),
        }

    def create_parameters(self) -> StorageAccountCreateParameters:
        return StorageAccountCreateParameters(
            sku=Sku(name=self._settings.account_sku),
            kind=self._settings.account_kind,
            location=self._location,
            tags=dict(self._settings.account_tags),
        )

    def update_parameters(self) -> StorageAccountUpdateParameters:
        return StorageAccountUpdateParameters(sku=Sku(name=self._settings.updated_sku))

    # -- Resource groups -------------------------------------------------------

    async def create_resource_group(self, name: str) -> Any:
        result = await self._call(
            lambda: self._resources.resource_groups.create_or_update(
                name, self.resource_group_parameters()
            )
        )
        logger.info("resource_group.created", resource_group=name)
        return result

    # -- Storage accounts ------------------------------------------------------

    async def create_storage_account(self, resource_group: str, name: str) -> Any:
        """Create the account and wait for the long-running operation."""
        params = self.create_parameters()
        result = await self._call(
            lambda: self._storage.storage_accounts.begin_create(
                resource_group, name, params
            ).result()
        )
        logger.info(
            "storage_account.created", resource_group=resource_group, account=name
        )
        return result

    async def get_storage_account(self, resource_group: str, name: str) -> Any:
        return await self._call(
            lambda: self._storage.storage_accounts.get_properties(resource_group, name)
        )

    async def list_by_resource_group(self, resource_group: str) -> list[Any]:
        return await self._call(
            lambda: list(
                self._storage.storage_accounts.list_by_resource_group(resource_group)
            )
        )

    async def list_storage_accounts(self) -> list[Any]:
        return await self._call(lambda: list(self._storage.storage_accounts.list()))

    async def list_keys(self, resource_group: str, name: str) -> Any:
        return await self._call(
            lambda: self._storage.storage_accounts.list_keys(resource_group, name)
        )

    async def regenerate_key(self, resource_group: str, name: str) -> Any:
        key_name = self._settings.regenerate_key_name
        result = await self._call(
            lambda: self._storage.storage_accounts.regenerate_key(
                resource_group,
                name,
                StorageAccountRegenerateKeyParameters(key_name=key_name),
            )
        )
        logger.info("storage_account.key_regenerated", account=name, key=key_name)
        return result

    async def update_storage_account(self, resource_group: str, name: str) -> Any:
        params = self.update_parameters()
        result = await self._call(
            lambda: self._storage.storage_accounts.update(resource_group, name, params)
        )
        logger.info(
            "storage_account.updated", account=name, sku=self._settings.updated_sku
        )
        return result

    async def check_name_availability(self, name: str) -> Any:
        return await self._call(
            lambda: self._storage.storage_accounts.check_name_availability(
                StorageAccountCheckNameAvailabilityParameters(name=name)
            )
        )

    # -- Usage -----------------------------------------------------------------

    async def list_usage(self) -> list[Any]:
        return await self._call(
            lambda: list(self._storage.usages.list_by_location(self._location))
        )
