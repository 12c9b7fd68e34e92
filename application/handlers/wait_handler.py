from __future__ import annotations

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunContext
from domain.steps.base import Step


class WaitStepHandler(StepHandler):
    def supports(self, step) -> bool:
        return step.action == "wait"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        if step.value:
            try:
                wait_ms = int(step.value)
            except ValueError:
                raise ConfigurationError(
                    f"wait step {step.id} value must be milliseconds, got {step.value!r}",
                    step_id=step.id,
                )
        elif step.wait_after_ms:
            wait_ms = step.wait_after_ms
        else:
            deps.logger.warning("wait.skipped", step_id=step.id, reason="no duration")
            return StepOutcome(ok=True)

        ctx.page.wait_for_timeout(wait_ms)
        return StepOutcome(ok=True)
