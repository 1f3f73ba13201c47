"""Pipeline orchestrator: ordered, fail-fast execution of sample steps."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from azure.core.exceptions import AzureError
from rich.console import Console
from rich.pretty import Pretty

from storage_sample.config.models import SampleSettings
from storage_sample.naming import ResourceNames
from storage_sample.pipeline.result import StepResult
from storage_sample.pipeline.steps import Step

logger = structlog.get_logger()


def to_plain(value: Any) -> Any:
    """Convert SDK models (and lists/dicts of them) to plain data for dumping."""
    if hasattr(value, "as_dict"):
        return value.as_dict()
    if isinstance(value, list | tuple):
        return [to_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: to_plain(v) for k, v in value.items()}
    return value


def describe_error(error: BaseException) -> dict[str, Any]:
    """Structural view of an error: type, message and any HTTP detail."""
    detail: dict[str, Any] = {"type": type(error).__name__, "message": str(error)}
    for attr in ("status_code", "reason", "error_code"):
        val = getattr(error, attr, None)
        if val is not None:
            detail[attr] = val
    inner = getattr(error, "error", None)
    if inner is not None:
        detail["error"] = str(inner)
    return detail


@dataclass
class PipelineOutcome:
    """Results of every step that ran; ``failed`` is the step that stopped the run."""

    names: ResourceNames
    results: list[StepResult] = field(default_factory=list)

    @property
    def failed(self) -> StepResult | None:
        return next((r for r in self.results if not r.ok), None)

    @property
    def succeeded(self) -> bool:
        return self.failed is None


class ProvisioningPipeline:
    """Runs steps strictly in order and stops at the first failure.

    Only Azure SDK errors count as step failures; anything else is a bug and
    propagates. Nothing is rolled back: the run ends by printing the cleanup
    command for the generated resource names.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        names: ResourceNames,
        console: Console | None = None,
        cleanup_hint: str | None = None,
    ) -> None:
        self._steps = list(steps)
        self._names = names
        self._console = console or Console()
        self._cleanup_hint = cleanup_hint or SampleSettings().cleanup_hint

    @property
    def steps(self) -> list[Step]:
        return list(self._steps)

    async def run(self) -> PipelineOutcome:
        outcome = PipelineOutcome(names=self._names)
        try:
            for index, step in enumerate(self._steps, start=1):
                result = await self._run_step(index, step)
                outcome.results.append(result)
                if not result.ok:
                    break

            failed = outcome.failed
            if failed is not None:
                assert failed.error is not None
                self._console.print(
                    "\n??????Error occurred in one of the operations.", markup=False
                )
                self._console.print(Pretty(describe_error(failed.error)))
        finally:
            self._finish()
        return outcome

    async def _run_step(self, index: int, step: Step) -> StepResult:
        self._console.print(f"\n{step.banner}", markup=False)
        if step.parameters is not None:
            self._console.print(Pretty(to_plain(step.parameters)))
        logger.info("pipeline.step_started", step=step.name, index=index)
        try:
            value = await step.action()
        except AzureError as exc:
            logger.error(
                "pipeline.step_failed",
                step=step.name,
                index=index,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return StepResult.failure(step.name, exc)

        self._console.print(f"\n{step.title}" if step.title else "", markup=False)
        self._console.print(Pretty(to_plain(value)))
        logger.info("pipeline.step_completed", step=step.name, index=index)
        return StepResult.success(step.name, value)

    def cleanup_command(self) -> str:
        return self._cleanup_hint.format(
            resource_group=self._names.resource_group,
            storage_account=self._names.storage_account,
        )

    def _finish(self) -> None:
        self._console.print("\n###### Exit ######\n", markup=False)
        self._console.print(
            "Please execute the following script for cleanup:", markup=False
        )
        self._console.print(
            self.cleanup_command(), markup=False, highlight=False, soft_wrap=True
        )
        logger.info(
            "pipeline.finished",
            resource_group=self._names.resource_group,
            storage_account=self._names.storage_account,
        )
