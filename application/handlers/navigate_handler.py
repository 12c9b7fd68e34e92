from __future__ import annotations

from application.handlers.base import StepHandler, contain_failure
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step


class NavigateStepHandler(StepHandler):
    def supports(self, step) -> bool:
        return step.action == "navigate"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        try:
            ctx.page.goto(
                step.value,
                wait_until="networkidle",
                timeout=deps.settings.navigation_timeout_ms,
            )
        except Exception as exc:
            return contain_failure(step, deps, "navigate.failed", exc, url=step.value)

        deps.logger.info("navigate.done", step_id=step.id, url=step.value)
        return StepOutcome(ok=True)
