from __future__ import annotations

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step

LOAD_MILESTONES = ("load", "domcontentloaded", "networkidle", "commit")


class ReloadStepHandler(StepHandler):
    """
    Reloads the page. value may name the load milestone to wait for;
    otherwise the configured default applies. Failures never propagate.
    """

    def supports(self, step) -> bool:
        return step.action == "reload"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        wait_until = step.value if step.value in LOAD_MILESTONES else deps.settings.reload_wait_until
        try:
            ctx.page.reload(wait_until=wait_until, timeout=deps.settings.reload_timeout_ms)
        except Exception as exc:
            deps.logger.warning("reload.failed", step_id=step.id, wait_until=wait_until, error=str(exc))
            return StepOutcome(ok=False, error_message=str(exc))

        return StepOutcome(ok=True)
