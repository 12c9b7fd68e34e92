from __future__ import annotations

from application.handlers.base import StepHandler, contain_failure
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step


class ClickStepHandler(StepHandler):
    def supports(self, step) -> bool:
        return step.action == "click"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        try:
            target = deps.selectors.locate_in_scope(ctx, step.selector_kind, step.selector_value or "")
            if target.count() == 0:
                # nothing to click is not an error
                deps.logger.warning("click.not_found", step_id=step.id, selector=step.selector_value)
                return StepOutcome(ok=True)
            target.first.click()
        except Exception as exc:
            return contain_failure(step, deps, "click.failed", exc, selector=step.selector_value)

        return StepOutcome(ok=True)
