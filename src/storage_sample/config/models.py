"""Pydantic configuration models for the storage sample."""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class Variant(StrEnum):
    """Supported cloud variants."""

    PUBLIC = "public"
    HYBRID = "hybrid"


class RunConfig(BaseModel):
    """Credentials and placement for a single sample run.

    Built once from the environment at startup and passed explicitly into
    the pipeline. ``arm_endpoint`` is only set for the hybrid variant, where
    it replaces the public Resource Manager endpoint.
    """

    model_config = ConfigDict(frozen=True)

    variant: Variant = Variant.PUBLIC
    client_id: str
    tenant_id: str
    client_secret: SecretStr
    subscription_id: str
    location: str
    arm_endpoint: str | None = None

    @field_validator("arm_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v


class SampleSettings(BaseModel):
    """Fixed parameters of the sample workflow (names, SKUs, tags)."""

    resource_group_prefix: str = "testrg"
    storage_account_prefix: str = "testacc"
    # Only used by the public variant; hybrid runs take LOCATION from the env.
    location: str = "westus"
    account_sku: str = "Standard_LRS"
    account_kind: str = "Storage"
    updated_sku: str = "Standard_GRS"
    regenerate_key_name: str = "key1"
    resource_group_tags: dict[str, str] = Field(
        default_factory=lambda: {"sampletag": "sampleValue"}
    )
    account_tags: dict[str, str] = Field(
        default_factory=lambda: {"tag1": "val1", "tag2": "val2"}
    )
    cleanup_hint: str = "node cleanup.js {resource_group} {storage_account}"

    @field_validator("resource_group_prefix", "storage_account_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        """Storage account names only allow lowercase letters and digits.

        A prefix longer than 20 characters would push ``<prefix><0-9999>``
        past the 24-character account name limit.
        """
        if not re.fullmatch(r"[a-z0-9]{1,20}", v):
            msg = f"Name prefix '{v}' must be 1-20 lowercase letters or digits"
            raise ValueError(msg)
        return v

    @field_validator("cleanup_hint")
    @classmethod
    def validate_cleanup_hint(cls, v: str) -> str:
        for placeholder in ("{resource_group}", "{storage_account}"):
            if placeholder not in v:
                msg = f"cleanup_hint must contain {placeholder}"
                raise ValueError(msg)
        return v
