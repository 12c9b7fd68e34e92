from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from application.outcome import StepOutcome
from domain.exceptions import TransientDriverFailure
from domain.steps.base import Step

if TYPE_CHECKING:
    from domain.run import RunContext
    from application.services.execution_deps import ExecutionDeps


class StepHandler(ABC):
    @abstractmethod
    def supports(self, step: Step) -> bool: ...

    @abstractmethod
    def handle(self, step: Step, ctx: "RunContext", deps: "ExecutionDeps") -> StepOutcome: ...


def contain_failure(step: Step, deps: "ExecutionDeps", event: str, exc: Exception, **fields: Any) -> StepOutcome:
    """
    Log a driver failure and keep going, unless the step asks to terminate.
    """
    deps.logger.warning(event, step_id=step.id, action=step.action, error=str(exc), **fields)
    if step.terminate_on_error:
        raise TransientDriverFailure(f"{step.action} step {step.id} failed: {exc}", step_id=step.id) from exc
    return StepOutcome(ok=False, error_message=str(exc))
