from __future__ import annotations

from application.handlers.base import StepHandler, contain_failure
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunContext
from domain.steps.base import Step


def scroll_by(page, offset=None) -> int:
    """Scroll the viewport by offset pixels, one viewport height when offset is None."""
    if offset is None:
        offset = page.evaluate("() => window.innerHeight")
    page.evaluate("(y) => window.scrollBy(0, y)", offset)
    return offset


class ScrollStepHandler(StepHandler):
    def supports(self, step) -> bool:
        return step.action == "scroll"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        offset = None
        if step.value:
            try:
                offset = int(step.value)
            except ValueError:
                raise ConfigurationError(
                    f"scroll step {step.id} value must be an integer, got {step.value!r}",
                    step_id=step.id,
                )

        try:
            scrolled = scroll_by(ctx.page, offset)
        except Exception as exc:
            return contain_failure(step, deps, "scroll.failed", exc)

        deps.logger.debug("scroll.done", step_id=step.id, offset=scrolled)
        return StepOutcome(ok=True)
