from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence
import uuid

from application.executor.tab_runner import TabRunner
from application.ports.browser_launcher import BrowserLauncherPort
from application.ports.logger import LoggerPort
from application.services.execution_deps import ExecutionDeps
from application.services.result_emitter import build_emitter
from domain.run import ResultCallback, RunOptions
from domain.tab import TabTemplate


class Scraper:
    """
    Runs tab templates in one browser context, each tab in its own page,
    sequentially. Batch mode returns every record; streaming mode delivers
    records to a callback as soon as they are final.
    """

    def __init__(
        self,
        launcher: BrowserLauncherPort,
        tab_runner: TabRunner,
        deps_factory: Callable[[LoggerPort], ExecutionDeps],
        logger: LoggerPort,
    ):
        self._launcher = launcher
        self._tab_runner = tab_runner
        self._deps_factory = deps_factory
        self._logger = logger

    def run(self, templates: Sequence[TabTemplate], options: Optional[RunOptions] = None) -> List[Dict[str, Any]]:
        options = options or RunOptions()
        return self._run(templates, options, options.on_result)

    def run_with_callback(
        self,
        templates: Sequence[TabTemplate],
        on_result: ResultCallback,
        options: Optional[RunOptions] = None,
    ) -> None:
        self._run(templates, options or RunOptions(), on_result)

    def _run(
        self,
        templates: Sequence[TabTemplate],
        options: RunOptions,
        on_result: Optional[ResultCallback],
    ) -> List[Dict[str, Any]]:
        run_id = options.run_id or uuid.uuid4().hex
        logger = self._logger.bind(run_id=run_id)
        deps = self._deps_factory(logger).with_emitter(build_emitter(on_result, logger))

        all_results: List[Dict[str, Any]] = []
        logger.info("run.start", tabs=len(templates), streaming=on_result is not None)

        with self._launcher.open(options) as context:
            for template in templates:
                page = context.new_page()
                try:
                    all_results.extend(self._tab_runner.run(page, template, deps, run_id=run_id))
                finally:
                    page.close()

        logger.info("run.end", records=len(all_results))
        return all_results
