# application/services/execution_deps.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional, Protocol, Sequence

from application.outcome import StepOutcome
from application.ports.logger import LoggerPort
from application.services.execution_settings import ExecutionSettings
from application.services.selector_resolver import SelectorResolver

if TYPE_CHECKING:
    from application.services.binary_fetcher import BinaryFetcher
    from application.services.result_emitter import ResultEmitter
    from domain.run import RunContext
    from domain.steps.base import Step


class StepRunnerPort(Protocol):
    def run_step(self, step: "Step", ctx: "RunContext", deps: "ExecutionDeps") -> StepOutcome:
        ...

    def run_steps(self, steps: Sequence["Step"], ctx: "RunContext", deps: "ExecutionDeps") -> list:
        ...


@dataclass(frozen=True)
class ExecutionDeps:
    logger: LoggerPort
    fetcher: Optional["BinaryFetcher"] = None
    settings: ExecutionSettings = field(default_factory=ExecutionSettings)
    selectors: SelectorResolver = field(default_factory=SelectorResolver)
    emitter: Optional["ResultEmitter"] = None
    runner: Optional[StepRunnerPort] = None

    def with_logger(self, logger: LoggerPort) -> "ExecutionDeps":
        return replace(self, logger=logger)

    def with_runner(self, runner: StepRunnerPort) -> "ExecutionDeps":
        return replace(self, runner=runner)

    def with_emitter(self, emitter: Optional["ResultEmitter"]) -> "ExecutionDeps":
        return replace(self, emitter=emitter)

    def require_runner(self) -> StepRunnerPort:
        if self.runner is None:
            raise RuntimeError("ExecutionDeps has no step runner; run steps through StepExecutor")
        return self.runner
