from __future__ import annotations

from typing import Any

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.binary_fetcher import to_absolute_url
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import OpenNavigationError
from domain.run import RunContext
from domain.steps.base import Step


class OpenStepHandler(StepHandler):
    """
    Opens the target link in a child page, runs sub_steps there with a
    collector seeded from the parent's context, merges the child collector
    back and closes the child page.

    The child page is opened from the link's href when there is one;
    otherwise a modified click is simulated and the new page event awaited.
    Failing to open or load the child page raises OpenNavigationError.
    """

    def supports(self, step) -> bool:
        return step.action == "open"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        runner = deps.require_runner()
        link = deps.selectors.locate_in_scope(ctx, step.selector_kind, step.selector_value)

        if link.count() == 0:
            deps.logger.warning("open.not_found", step_id=step.id, selector=step.selector_value)
            return StepOutcome(ok=True)

        child_page = self._open_child(step, ctx, deps, link.first)
        deps.logger.info("open.child_opened", step_id=step.id, url=child_page.url)

        child = ctx.collector.child()
        try:
            runner.run_steps(
                list(step.sub_steps),
                ctx.child(page=child_page, collector=child, scope_element=None),
                deps,
            )
        finally:
            ctx.collector.merge(child)
            child_page.close()
            deps.logger.info("open.child_closed", step_id=step.id)

        return StepOutcome(ok=True)

    def _open_child(self, step: Step, ctx: RunContext, deps: ExecutionDeps, link: Any) -> Any:
        context = ctx.page.context
        timeout = deps.settings.navigation_timeout_ms

        try:
            href = to_absolute_url(link.get_attribute("href"), ctx.page.url)
            if href:
                child_page = context.new_page()
                try:
                    child_page.goto(href, wait_until="networkidle", timeout=timeout)
                except Exception:
                    child_page.close()
                    raise
                return child_page

            with context.expect_page(timeout=timeout) as page_info:
                link.click(modifiers=["ControlOrMeta"])
            child_page = page_info.value
            child_page.wait_for_load_state("networkidle", timeout=timeout)
            return child_page
        except Exception as exc:
            raise OpenNavigationError(
                f"open step {step.id} could not load child page: {exc}",
                step_id=step.id,
            ) from exc
