"""End-to-end sample run: discover, authenticate, then provision and inspect."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog
from rich.console import Console

from storage_sample.config.models import RunConfig, SampleSettings, Variant
from storage_sample.management.auth import AuthenticationError, authenticate
from storage_sample.management.environment import AZURE_PUBLIC_CLOUD, AzureEnvironment
from storage_sample.management.metadata import (
    EndpointDiscoveryError,
    discover_environment,
)
from storage_sample.management.operations import StorageOperations, build_clients
from storage_sample.naming import ResourceNames
from storage_sample.pipeline.runner import PipelineOutcome, ProvisioningPipeline
from storage_sample.pipeline.steps import build_steps

logger = structlog.get_logger()


@dataclass
class SampleOutcome:
    """What a sample run did.

    ``setup_error`` is set when endpoint discovery or authentication failed;
    in that case no step ran and ``pipeline`` is None.
    """

    names: ResourceNames
    environment: AzureEnvironment | None = None
    pipeline: PipelineOutcome | None = None
    setup_error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return (
            self.setup_error is None
            and self.pipeline is not None
            and self.pipeline.succeeded
        )


async def resolve_environment(
    config: RunConfig, http_client: httpx.AsyncClient | None = None
) -> AzureEnvironment:
    """Public runs use the built-in cloud; hybrid runs query ARM_ENDPOINT."""
    if config.variant == Variant.PUBLIC:
        return AZURE_PUBLIC_CLOUD
    assert config.arm_endpoint is not None
    return await discover_environment(config.arm_endpoint, client=http_client)


async def run_sample(
    config: RunConfig,
    settings: SampleSettings | None = None,
    *,
    names: ResourceNames | None = None,
    console: Console | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> SampleOutcome:
    """Run the whole sample for *config*'s variant.

    Setup failures (discovery, authentication) are logged and reported on
    the outcome; no cleanup hint is printed since nothing was created.
    """
    settings = settings or SampleSettings()
    console = console or Console()
    names = names or ResourceNames.generate(settings)
    outcome = SampleOutcome(names=names)
    logger.info(
        "sample.starting",
        variant=config.variant,
        resource_group=names.resource_group,
        storage_account=names.storage_account,
    )

    try:
        environment = await resolve_environment(config, http_client)
        outcome.environment = environment
        credential = await authenticate(config, environment)
    except (EndpointDiscoveryError, AuthenticationError) as exc:
        console.print(f"\n{exc}", markup=False)
        outcome.setup_error = exc
        return outcome

    resource_client, storage_client = build_clients(credential, config, environment)
    ops = StorageOperations(resource_client, storage_client, settings, config.location)
    steps = build_steps(
        ops, names, include_usage=config.variant == Variant.PUBLIC
    )
    pipeline = ProvisioningPipeline(
        steps, names, console=console, cleanup_hint=settings.cleanup_hint
    )
    outcome.pipeline = await pipeline.run()
    return outcome
