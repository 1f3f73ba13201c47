"""Outcome of a single pipeline step."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class StepResult:
    """Either a success value or the error that stopped the step."""

    step: str
    value: Any = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, step: str, value: Any) -> StepResult:
        return cls(step=step, value=value)

    @classmethod
    def failure(cls, step: str, error: BaseException) -> StepResult:
        return cls(step=step, error=error)
