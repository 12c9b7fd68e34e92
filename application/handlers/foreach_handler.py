from __future__ import annotations

from application.handlers.base import StepHandler
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.placeholders import clone_step_with_index
from domain.run import RunContext
from domain.steps.base import Step


class ForeachStepHandler(StepHandler):
    """
    Runs sub_steps once per matched element, in document order.

    Each iteration gets its own item collector seeded with the parent's
    context keys, a copy of sub_steps with the loop's index token
    substituted, and selector lookups scoped to the matched element. The
    item collector is stored at the iteration's index in the parent. When
    a result emitter is registered, the finished item is streamed at once.

    A sub-step failure stays inside its iteration unless that sub-step has
    terminate_on_error, which aborts the whole loop.
    """

    def supports(self, step) -> bool:
        return step.action == "foreach"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        runner = deps.require_runner()
        matches = deps.selectors.locate_in_scope(ctx, step.selector_kind, step.selector_value)

        try:
            matches.first.wait_for(state="attached", timeout=deps.settings.attach_timeout_ms)
        except Exception as exc:
            # zero matches is a normal outcome; count() below decides
            deps.logger.debug("foreach.attach_timeout", step_id=step.id, error=str(exc))

        count = matches.count()
        deps.logger.info("foreach.matched", step_id=step.id, selector=step.selector_value, count=count)

        token = step.index_token_name or "i"
        for idx in range(count):
            current = matches.nth(idx)
            if step.auto_scroll:
                try:
                    current.scroll_into_view_if_needed()
                except Exception as exc:
                    deps.logger.debug("foreach.scroll_failed", step_id=step.id, index=idx, error=str(exc))

            item = ctx.collector.child()
            item_ctx = ctx.child(collector=item, scope_element=current)
            sub_steps = [clone_step_with_index(sub, idx, token) for sub in step.sub_steps]

            failed = runner.run_steps(sub_steps, item_ctx, deps)
            ctx.collector.set_item(idx, item)

            deps.logger.debug(
                "foreach.item",
                step_id=step.id,
                index=idx,
                keys=sorted(item.fields.keys()),
                failed_sub_steps=failed,
            )

            if deps.emitter is not None and not item.is_empty():
                deps.emitter.emit_pending(item, idx)

        return StepOutcome(ok=True)
