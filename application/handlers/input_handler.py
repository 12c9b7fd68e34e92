from __future__ import annotations

from application.handlers.base import StepHandler, contain_failure
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step


class InputStepHandler(StepHandler):
    """Types value into the matched element. Missing elements surface as driver errors."""

    def supports(self, step) -> bool:
        return step.action == "input"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        try:
            target = deps.selectors.locate_in_scope(ctx, step.selector_kind, step.selector_value or "")
            target.first.fill(step.value or "")
        except Exception as exc:
            return contain_failure(step, deps, "input.failed", exc, selector=step.selector_value)

        deps.logger.debug("input.done", step_id=step.id, selector=step.selector_value)
        return StepOutcome(ok=True)
