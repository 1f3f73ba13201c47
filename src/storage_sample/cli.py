"""Typer CLI for the storage sample."""

from __future__ import annotations

import asyncio

import structlog
import typer
from rich.console import Console

from storage_sample.config.loader import (
    ConfigurationError,
    load_run_config,
    load_settings,
)
from storage_sample.config.models import RunConfig, SampleSettings, Variant
from storage_sample.pipeline.sample import run_sample

logger = structlog.get_logger()
console = Console()
app = typer.Typer(
    name="storage-sample",
    help="Provision, inspect and update a throwaway Azure storage account.",
    no_args_is_help=True,
)


def _load(variant: Variant) -> tuple[RunConfig, SampleSettings]:
    try:
        settings = load_settings()
        config = load_run_config(variant, settings)
    except ConfigurationError as exc:
        logger.error("config.missing_env", variant=variant, missing=exc.missing)
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(1) from exc
    except (ValueError, TypeError, FileNotFoundError) as exc:
        console.print(f"[red]Invalid settings:[/red] {exc}")
        raise typer.Exit(1) from exc
    return config, settings


def _run(variant: Variant) -> None:
    config, settings = _load(variant)
    asyncio.run(run_sample(config, settings, console=console))


@app.command()
def public() -> None:
    """Run the sample against the public Azure cloud."""
    _run(Variant.PUBLIC)


@app.command()
def hybrid() -> None:
    """Run the sample against an Azure Stack endpoint (ARM_ENDPOINT)."""
    _run(Variant.HYBRID)
