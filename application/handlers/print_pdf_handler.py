from __future__ import annotations

from pathlib import Path

from application.handlers.base import StepHandler
from application.handlers.capture import locate_target, resolve_target_path
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.run import RunContext
from domain.steps.base import Step


class PrintPdfStepHandler(StepHandler):
    """
    Renders the current page to a PDF at value, after clicking the optional
    trigger element and letting the page settle.
    """

    def supports(self, step) -> bool:
        return step.action == "printToPDF"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        key = step.output_key("file")
        target_path = resolve_target_path(step, ctx)
        settings = deps.settings

        try:
            trigger = locate_target(step, ctx, deps)
            if trigger is not None:
                trigger.click()
            elif step.selector_value:
                deps.logger.warning("printpdf.trigger_not_found", step_id=step.id, selector=step.selector_value)

            try:
                ctx.page.wait_for_load_state("networkidle", timeout=settings.network_idle_timeout_ms)
            except Exception as exc:
                deps.logger.debug("printpdf.settle_timeout", step_id=step.id, error=str(exc))

            Path(target_path).parent.mkdir(parents=True, exist_ok=True)
            ctx.page.pdf(path=target_path, format=settings.pdf_format, margin=settings.pdf_margin)
        except Exception as exc:
            ctx.collector[key] = None
            deps.logger.warning("printpdf.failed", step_id=step.id, error=str(exc))
            return StepOutcome(ok=False, error_message=str(exc))

        ctx.collector[key] = target_path
        deps.logger.info("capture.saved", step_id=step.id, strategy="print", path=target_path)
        return StepOutcome(ok=True)
