from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
import uuid

from application.executor.pagination import PaginationController
from application.executor.step_executor import StepExecutor
from application.services.execution_deps import ExecutionDeps
from domain.collector import Collector
from domain.run import RunContext
from domain.steps.base import Step
from domain.tab import TabTemplate


class TabRunner:
    """
    Runs one tab: init steps once, then per-page steps under pagination.

    Every page iteration starts from a fresh root collector. Its flattened
    records are appended to the tab's results in order and, when an emitter
    is registered, streamed unless a foreach already streamed them.
    """

    def __init__(self, executor: StepExecutor):
        self._executor = executor

    def run(self, page: Any, template: TabTemplate, deps: ExecutionDeps, run_id: str = "") -> List[Dict[str, Any]]:
        run_id = run_id or uuid.uuid4().hex
        deps = deps.with_logger(deps.logger.bind(tab=template.tab))
        logger = deps.logger
        logger.info("tab.start", run_id=run_id)

        pagination: Optional[PaginationController] = None
        if template.pagination is not None:
            pagination = PaginationController(template.pagination, deps)
            if template.pagination.strategy == "scroll" and not template.pagination.bounded:
                logger.warning("pagination.unbounded_scroll", reason="scroll never signals an end; set maxPages")

        if template.init_steps:
            logger.info("tab.init_steps", count=len(template.init_steps))
            self._executor.execute(template.init_steps, RunContext(page=page, run_id=run_id), deps)

        steps = template.steps_for_page()
        results: List[Dict[str, Any]] = []

        if pagination is not None and pagination.config.paginate_all_first:
            page_index = 0
            while not pagination.reached_max(page_index):
                if not pagination.advance(page, mode="paginateAllFirst"):
                    break
                page_index += 1
            self._collect_page(page, steps, deps, run_id, results)
            logger.info("tab.end", records=len(results))
            return results

        page_index = 0
        while True:
            logger.info("page.iteration", page_index=page_index)

            if pagination is not None and pagination.config.pagination_first and page_index > 0:
                if not pagination.advance(page, mode="paginationFirst"):
                    break

            self._collect_page(page, steps, deps, run_id, results)

            if pagination is None:
                break

            page_index += 1
            if pagination.reached_max(page_index):
                break

            if not pagination.config.pagination_first:
                if not pagination.advance(page):
                    break

        logger.info("tab.end", records=len(results))
        return results

    def _collect_page(
        self,
        page: Any,
        steps: Sequence[Step],
        deps: ExecutionDeps,
        run_id: str,
        results: List[Dict[str, Any]],
    ) -> None:
        collector = Collector()
        self._executor.execute(steps, RunContext(page=page, collector=collector, run_id=run_id), deps)

        for leaf, record in collector.leaves():
            index = len(results)
            results.append(record)
            if deps.emitter is not None:
                deps.emitter.deliver(leaf, record, index)
