#!/usr/bin/env python3
"""Runnable demo: run the public-cloud sample and summarise the outcome.

Prerequisites:
    export CLIENT_ID=... DOMAIN=... APPLICATION_SECRET=... AZURE_SUBSCRIPTION_ID=...
    uv run python examples/storage_sample_demo.py
"""

from __future__ import annotations

import asyncio
import sys

from rich.console import Console

from storage_sample.config.loader import (
    ConfigurationError,
    load_run_config,
    load_settings,
)
from storage_sample.config.models import Variant
from storage_sample.pipeline.sample import run_sample

console = Console()


def main() -> None:
    # 1. Settings + environment
    settings = load_settings()
    try:
        config = load_run_config(Variant.PUBLIC, settings)
    except ConfigurationError as exc:
        console.print(f"[red]{exc}[/red]")
        sys.exit(1)

    # 2. Run every step
    outcome = asyncio.run(run_sample(config, settings, console=console))

    # 3. Summary
    if outcome.setup_error is not None:
        console.print(f"[red]Setup failed:[/red] {outcome.setup_error}")
        return
    assert outcome.pipeline is not None
    for result in outcome.pipeline.results:
        mark = "[green]ok[/green]" if result.ok else "[red]failed[/red]"
        console.print(f"  {result.step}: {mark}")


if __name__ == "__main__":
    main()
