"""Environment + YAML config loader."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError

from storage_sample.config.defaults import load_defaults, merge_configs
from storage_sample.config.models import RunConfig, SampleSettings, Variant

SETTINGS_ENV_VAR = "STORAGE_SAMPLE_SETTINGS"

# (RunConfig field, environment variable) in the order they are checked.
PUBLIC_ENV_VARS: tuple[tuple[str, str], ...] = (
    ("client_id", "CLIENT_ID"),
    ("tenant_id", "DOMAIN"),
    ("client_secret", "APPLICATION_SECRET"),
    ("subscription_id", "AZURE_SUBSCRIPTION_ID"),
)

HYBRID_ENV_VARS: tuple[tuple[str, str], ...] = (
    ("client_id", "CLIENT_ID"),
    ("tenant_id", "TENANT_ID"),
    ("client_secret", "CLIENT_SECRET"),
    ("subscription_id", "SUBSCRIPTION_ID"),
    ("arm_endpoint", "ARM_ENDPOINT"),
    ("location", "LOCATION"),
)

_ENV_VARS_BY_VARIANT = {
    Variant.PUBLIC: PUBLIC_ENV_VARS,
    Variant.HYBRID: HYBRID_ENV_VARS,
}


class ConfigurationError(Exception):
    """Raised when required environment variables are not set."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "please set/export the following environment variables: "
            + ",".join(missing)
        )


def required_env_vars(variant: Variant) -> list[str]:
    """Names of the environment variables a variant needs, in check order."""
    return [name for _, name in _ENV_VARS_BY_VARIANT[variant]]


def validate_environment(
    variant: Variant, environ: Mapping[str, str] | None = None
) -> None:
    """Raise ConfigurationError naming every missing (or empty) variable."""
    env = os.environ if environ is None else environ
    missing = [name for name in required_env_vars(variant) if not env.get(name)]
    if missing:
        raise ConfigurationError(missing)


def load_run_config(
    variant: Variant,
    settings: SampleSettings | None = None,
    environ: Mapping[str, str] | None = None,
) -> RunConfig:
    """Capture the environment once into an immutable RunConfig."""
    env = os.environ if environ is None else environ
    validate_environment(variant, env)
    values: dict[str, Any] = {
        field: env[name] for field, name in _ENV_VARS_BY_VARIANT[variant]
    }
    if variant == Variant.PUBLIC:
        values["location"] = (settings or SampleSettings()).location
    return RunConfig(variant=variant, **values)


def read_settings_file(path: str | Path) -> dict[str, Any]:
    """Parse a settings override file into a mapping.

    Errors carry the file name and, for syntax errors, the position.
    """
    settings_path = Path(path)
    if not settings_path.is_file():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")
    try:
        data = yaml.safe_load(settings_path.read_text())
    except yaml.YAMLError as exc:
        where = ""
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            where = f" at line {mark.line + 1}, column {mark.column + 1}"
        raise ValueError(
            f"Failed to parse YAML in {settings_path}{where}: {exc}"
        ) from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(
            f"Settings file {settings_path} must hold a mapping, "
            f"not {type(data).__name__}"
        )
    return cast(dict[str, Any], data)


def load_settings(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> SampleSettings:
    """Built-in sample settings, with an optional override file merged on top.

    Without *path*, ``STORAGE_SAMPLE_SETTINGS`` names the override file.
    """
    env = os.environ if environ is None else environ
    override = path if path is not None else env.get(SETTINGS_ENV_VAR) or None
    data = load_defaults("sample")
    if override is not None:
        data = merge_configs(data, read_settings_file(override))
    try:
        return SampleSettings.model_validate(data)
    except ValidationError as exc:
        source = override or "built-in defaults"
        raise ValueError(f"Invalid sample settings ({source}):\n{exc}") from exc
