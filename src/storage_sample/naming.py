"""Ephemeral resource naming for sample runs."""

from __future__ import annotations

import random
from dataclasses import dataclass

from storage_sample.config.models import SampleSettings

MAX_SUFFIX = 9999


def generate_random_id(prefix: str, existing: set[str] | None = None) -> str:
    """Return ``<prefix><0-9999>`` not already present in *existing*.

    The new name is added to *existing* so later calls in the same run
    cannot return it again. Uniqueness is local to the set; names from
    earlier runs are not checked.
    """
    while True:
        name = f"{prefix}{random.randint(0, MAX_SUFFIX)}"
        if existing is None or name not in existing:
            break
    if existing is not None:
        existing.add(name)
    return name


@dataclass(frozen=True)
class ResourceNames:
    """The resource group and storage account created by one run."""

    resource_group: str
    storage_account: str

    @classmethod
    def generate(
        cls, settings: SampleSettings, existing: set[str] | None = None
    ) -> ResourceNames:
        used = set() if existing is None else existing
        return cls(
            resource_group=generate_random_id(settings.resource_group_prefix, used),
            storage_account=generate_random_id(settings.storage_account_prefix, used),
        )
