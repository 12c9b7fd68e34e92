# application/executor/step_executor.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple
import time
import uuid

from application.executor.handler_registry import HandlerRegistry
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunContext
from domain.steps.base import Step


@dataclass(frozen=True)
class ExecutionResult:
    ok: bool
    failed_step_ids: Tuple[str, ...] = field(default_factory=tuple)


class StepExecutor:
    """
    Interprets step lists against a page.

    A step list is an error boundary: a failing step is logged and the list
    moves on, unless the step has terminate_on_error, in which case the
    error propagates to the enclosing list. ConfigurationError always
    propagates out of the top-level list.
    """

    def __init__(self, registry: HandlerRegistry):
        self._registry = registry

    def execute(self, steps: Sequence[Step], ctx: RunContext, deps: ExecutionDeps) -> ExecutionResult:
        if not getattr(ctx, "run_id", ""):
            ctx.run_id = uuid.uuid4().hex

        deps = deps.with_logger(deps.logger.bind(run_id=ctx.run_id)).with_runner(self)

        failed = self._run_list(steps, ctx, deps, top_level=True)
        return ExecutionResult(ok=not failed, failed_step_ids=tuple(failed))

    def run_steps(self, steps: Sequence[Step], ctx: RunContext, deps: ExecutionDeps) -> List[str]:
        """Nested list (foreach/open sub-steps). Returns ids of contained failures."""
        return self._run_list(steps, ctx, deps.with_runner(self), top_level=False)

    def _run_list(self, steps: Sequence[Step], ctx: RunContext, deps: ExecutionDeps, top_level: bool) -> List[str]:
        deps.logger.debug("steps.start", count=len(steps), top_level=top_level)
        failed: List[str] = []

        for step in steps:
            try:
                outcome = self.run_step(step, ctx, deps)
            except ConfigurationError as exc:
                if top_level or step.terminate_on_error:
                    raise
                deps.logger.error("step.failed", step_id=step.id, action=step.action, error=str(exc))
                failed.append(step.id)
                continue
            except Exception as exc:
                if step.terminate_on_error:
                    raise
                deps.logger.error("step.failed", step_id=step.id, action=step.action, error=str(exc))
                failed.append(step.id)
                continue

            if not outcome.ok:
                deps.logger.info(
                    "step.contained_failure",
                    step_id=step.id,
                    error=outcome.error_message,
                )
                failed.append(step.id)

        return failed

    def run_step(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        step.validate()
        handler = self._registry.get_handler(step)

        deps.logger.info(
            "step.start",
            step_id=step.id,
            action=step.action,
            scoped=ctx.scope_element is not None,
        )
        t0 = time.perf_counter()

        outcome: StepOutcome = handler.handle(step, ctx, deps)

        if outcome is None:
            raise RuntimeError(
                f"Handler returned None: handler={type(handler).__name__}, step={step.id} ({step.action})"
            )

        deps.logger.info(
            "step.end",
            step_id=step.id,
            ok=outcome.ok,
            elapsed_ms=int((time.perf_counter() - t0) * 1000),
        )

        # the wait action consumes wait_after_ms as its own duration
        if step.wait_after_ms and step.wait_after_ms > 0 and step.action != "wait":
            deps.logger.debug("step.post_wait", step_id=step.id, wait_ms=step.wait_after_ms)
            ctx.page.wait_for_timeout(step.wait_after_ms)

        return outcome
