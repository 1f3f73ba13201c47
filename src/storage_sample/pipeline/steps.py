"""The ordered steps of the storage sample workflow."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from storage_sample.management.operations import StorageOperations
from storage_sample.naming import ResourceNames


@dataclass(frozen=True)
class Step:
    """One remote operation of the pipeline.

    ``banner`` is printed before the call, ``parameters`` (when set) right
    after it, and ``title`` heads the dump of the result.
    """

    name: str
    banner: str
    action: Callable[[], Awaitable[Any]]
    title: str = ""
    parameters: Any = None


def build_steps(
    ops: StorageOperations,
    names: ResourceNames,
    *,
    include_usage: bool = True,
) -> list[Step]:
    """Build the fixed step list.

    The hybrid variant passes ``include_usage=False``; usage listing is not
    available on Azure Stack.
    """
    rg = names.resource_group
    account = names.storage_account
    steps = [
        Step(
            name="create_resource_group",
            banner=f"Creating resource group: {rg}",
            action=lambda: ops.create_resource_group(rg),
        ),
        Step(
            name="create_storage_account",
            banner=f"-->Creating storage account: {account} with parameters:",
            parameters=ops.create_parameters(),
            action=lambda: ops.create_storage_account(rg, account),
            title="The created storage account result is:",
        ),
        Step(
            name="get_storage_account",
            banner=f"-->Getting info of storage account: {account}",
            action=lambda: ops.get_storage_account(rg, account),
        ),
        Step(
            name="list_by_resource_group",
            banner=f"-->Listing storage accounts in the resourceGroup : {rg}",
            action=lambda: ops.list_by_resource_group(rg),
        ),
        Step(
            name="list_storage_accounts",
            banner="-->Listing storage accounts in the current subscription.",
            action=ops.list_storage_accounts,
        ),
        Step(
            name="list_keys",
            banner=f"-->Listing storage account keys for account: {account}",
            action=lambda: ops.list_keys(rg, account),
        ),
        Step(
            name="regenerate_key",
            banner=f"-->Regenerating storage account keys for account: {account}",
            action=lambda: ops.regenerate_key(rg, account),
        ),
        Step(
            name="update_storage_account",
            banner=f"-->Updating storage account : {account} with parameters:",
            parameters=ops.update_parameters(),
            action=lambda: ops.update_storage_account(rg, account),
            title="Updated result is:",
        ),
        Step(
            name="check_name_availability",
            banner=f"-->Checking if the storage account name : {account} is available.",
            action=lambda: ops.check_name_availability(account),
        ),
    ]
    if include_usage:
        steps.append(
            Step(
                name="list_usage",
                banner=(
                    "-->List Usage for Storage Accounts in the current subscription:"
                ),
                action=ops.list_usage,
            )
        )
    return steps
