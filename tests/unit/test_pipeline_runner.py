"""Unit tests for the fail-fast pipeline orchestrator."""

from __future__ import annotations

import io
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError
from rich.console import Console

from storage_sample.config.models import SampleSettings
from storage_sample.naming import ResourceNames
from storage_sample.pipeline.result import StepResult
from storage_sample.pipeline.runner import (
    ProvisioningPipeline,
    describe_error,
    to_plain,
)
from storage_sample.pipeline.steps import Step, build_steps

NAMES = ResourceNames(resource_group="testrg42", storage_account="testacc7")


def _console() -> Console:
    return Console(file=io.StringIO(), width=200)


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


def _step(name: str, action: AsyncMock, **kwargs) -> Step:
    return Step(name=name, banner=f"-->{name}", action=action, **kwargs)


class TestStepResult:
    def test_success(self):
        result = StepResult.success("s", 1)
        assert result.ok
        assert result.value == 1

    def test_failure(self):
        err = HttpResponseError(message="boom")
        result = StepResult.failure("s", err)
        assert not result.ok
        assert result.error is err


class TestDumpHelpers:
    def test_to_plain_uses_as_dict(self):
        model = MagicMock()
        model.as_dict.return_value = {"name": "acc"}
        assert to_plain([model, {"k": model}]) == [
            {"name": "acc"},
            {"k": {"name": "acc"}},
        ]

    def test_to_plain_passthrough(self):
        assert to_plain("x") == "x"
        assert to_plain(None) is None

    def test_describe_error(self):
        detail = describe_error(ResourceExistsError("conflict"))
        assert detail["type"] == "ResourceExistsError"
        assert detail["message"] == "conflict"


@pytest.mark.asyncio
class TestProvisioningPipeline:
    async def test_runs_all_steps_in_order(self):
        calls: list[str] = []

        def _action(name: str) -> AsyncMock:
            async def _run():
                calls.append(name)
                return {"step": name}

            return AsyncMock(side_effect=_run)

        steps = [_step(n, _action(n)) for n in ("one", "two", "three")]
        console = _console()
        outcome = await ProvisioningPipeline(steps, NAMES, console=console).run()

        assert calls == ["one", "two", "three"]
        assert outcome.succeeded
        assert [r.value for r in outcome.results] == [
            {"step": "one"},
            {"step": "two"},
            {"step": "three"},
        ]
        out = _output(console)
        assert out.index("-->one") < out.index("-->two") < out.index("-->three")
        assert "'step': 'three'" in out

    async def test_stops_at_first_failure(self):
        first = AsyncMock(return_value="ok")
        second = AsyncMock(side_effect=ResourceExistsError("conflict"))
        third = AsyncMock()
        steps = [_step("one", first), _step("two", second), _step("three", third)]
        console = _console()

        outcome = await ProvisioningPipeline(steps, NAMES, console=console).run()

        first.assert_awaited_once()
        second.assert_awaited_once()
        third.assert_not_called()
        assert len(outcome.results) == 2
        assert outcome.failed is not None
        assert outcome.failed.step == "two"
        out = _output(console)
        assert "Error occurred in one of the operations." in out
        assert "conflict" in out
        assert "-->three" not in out

    async def test_non_azure_errors_propagate_after_cleanup_hint(self):
        first = AsyncMock(return_value={"name": "testrg42"})
        steps = [
            _step("one", first),
            _step("two", AsyncMock(side_effect=TypeError("bug"))),
        ]
        console = _console()
        with pytest.raises(TypeError, match="bug"):
            await ProvisioningPipeline(steps, NAMES, console=console).run()
        first.assert_awaited_once()
        out = _output(console)
        assert "###### Exit ######" in out
        assert "node cleanup.js testrg42 testacc7" in out

    async def test_prints_cleanup_hint_on_success(self):
        console = _console()
        await ProvisioningPipeline(
            [_step("one", AsyncMock(return_value=None))], NAMES, console=console
        ).run()
        out = _output(console)
        assert "###### Exit ######" in out
        assert "node cleanup.js testrg42 testacc7" in out

    async def test_prints_cleanup_hint_on_failure(self):
        console = _console()
        await ProvisioningPipeline(
            [_step("one", AsyncMock(side_effect=HttpResponseError(message="nope")))],
            NAMES,
            console=console,
        ).run()
        assert "node cleanup.js testrg42 testacc7" in _output(console)

    async def test_custom_cleanup_hint(self):
        pipeline = ProvisioningPipeline(
            [],
            NAMES,
            console=_console(),
            cleanup_hint="az group delete -n {resource_group}  # {storage_account}",
        )
        assert pipeline.cleanup_command() == "az group delete -n testrg42  # testacc7"

    async def test_title_and_parameters_printed(self):
        console = _console()
        step = _step(
            "create",
            AsyncMock(return_value={"provisioning_state": "Succeeded"}),
            title="The created storage account result is:",
            parameters={"sku": {"name": "Standard_LRS"}},
        )
        await ProvisioningPipeline([step], NAMES, console=console).run()
        out = _output(console)
        assert out.index("-->create") < out.index("Standard_LRS")
        assert out.index("Standard_LRS") < out.index(
            "The created storage account result is:"
        )
        assert "Succeeded" in out


class TestBuildSteps:
    def _ops(self) -> MagicMock:
        ops = MagicMock()
        ops.create_parameters.return_value = {"sku": "Standard_LRS"}
        ops.update_parameters.return_value = {"sku": "Standard_GRS"}
        return ops

    def test_public_step_order(self):
        steps = build_steps(self._ops(), NAMES)
        assert [s.name for s in steps] == [
            "create_resource_group",
            "create_storage_account",
            "get_storage_account",
            "list_by_resource_group",
            "list_storage_accounts",
            "list_keys",
            "regenerate_key",
            "update_storage_account",
            "check_name_availability",
            "list_usage",
        ]

    def test_hybrid_omits_usage(self):
        steps = build_steps(self._ops(), NAMES, include_usage=False)
        assert len(steps) == 9
        assert "list_usage" not in [s.name for s in steps]

    def test_banners_name_resources(self):
        steps = {s.name: s for s in build_steps(self._ops(), NAMES)}
        assert steps["create_resource_group"].banner == (
            "Creating resource group: testrg42"
        )
        assert "testacc7" in steps["create_storage_account"].banner
        assert steps["update_storage_account"].title == "Updated result is:"

    @pytest.mark.asyncio
    async def test_actions_bind_generated_names(self):
        ops = self._ops()
        ops.regenerate_key = AsyncMock(return_value="keys")
        steps = {s.name: s for s in build_steps(ops, NAMES)}
        assert await steps["regenerate_key"].action() == "keys"
        ops.regenerate_key.assert_awaited_once_with("testrg42", "testacc7")


def test_cleanup_hint_defaults_to_sample_settings():
    pipeline = ProvisioningPipeline([], NAMES, console=_console())
    assert pipeline.cleanup_command() == SampleSettings().cleanup_hint.format(
        resource_group="testrg42", storage_account="testacc7"
    )
    assert pipeline.cleanup_command() == "node cleanup.js testrg42 testacc7"
