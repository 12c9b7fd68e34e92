# infrastructure/bootstrap.py
"""
Default wiring: handlers, executor, Playwright launcher and loguru-backed
logging. Callers that need different parts build a Scraper themselves.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from application.executor.handler_registry import HandlerRegistry
from application.executor.step_executor import StepExecutor
from application.executor.tab_runner import TabRunner
from application.handlers.base import StepHandler
from application.handlers.click_handler import ClickStepHandler
from application.handlers.data_handler import DataStepHandler
from application.handlers.download_handler import DownloadStepHandler
from application.handlers.foreach_handler import ForeachStepHandler
from application.handlers.input_handler import InputStepHandler
from application.handlers.navigate_handler import NavigateStepHandler
from application.handlers.open_handler import OpenStepHandler
from application.handlers.print_pdf_handler import PrintPdfStepHandler
from application.handlers.reload_handler import ReloadStepHandler
from application.handlers.save_pdf_handler import SavePdfStepHandler
from application.handlers.scroll_handler import ScrollStepHandler
from application.handlers.wait_handler import WaitStepHandler
from application.ports.browser_launcher import BrowserLauncherPort
from application.ports.logger import LoggerPort
from application.ports.requests_client import RequestsSessionHttpClient
from application.scraper import Scraper
from application.services.binary_fetcher import BinaryFetcher
from application.services.execution_deps import ExecutionDeps
from application.services.execution_settings import ExecutionSettings
from domain.run import ResultCallback, RunOptions
from domain.tab import TabTemplate
from infrastructure.browser.playwright_launcher import PlaywrightLauncher
from infrastructure.config.env_settings import load_settings
from infrastructure.logging.loguru_logger import LoguruLogger


def build_handlers() -> List[StepHandler]:
    return [
        NavigateStepHandler(),
        InputStepHandler(),
        ClickStepHandler(),
        DataStepHandler(),
        ScrollStepHandler(),
        WaitStepHandler(),
        ReloadStepHandler(),
        ForeachStepHandler(),
        OpenStepHandler(),
        DownloadStepHandler(),
        SavePdfStepHandler(),
        PrintPdfStepHandler(),
    ]


def build_executor(handlers: Optional[List[StepHandler]] = None) -> StepExecutor:
    return StepExecutor(HandlerRegistry(handlers if handlers is not None else build_handlers()))


def build_scraper(
    logger: Optional[LoggerPort] = None,
    settings: Optional[ExecutionSettings] = None,
    launcher: Optional[BrowserLauncherPort] = None,
) -> Scraper:
    logger = logger or LoguruLogger()
    settings = settings or load_settings()
    fetcher = BinaryFetcher(RequestsSessionHttpClient(timeout_sec=settings.http_timeout_sec))

    def deps_factory(run_logger: LoggerPort) -> ExecutionDeps:
        return ExecutionDeps(logger=run_logger, fetcher=fetcher, settings=settings)

    return Scraper(
        launcher=launcher or PlaywrightLauncher(logger),
        tab_runner=TabRunner(build_executor()),
        deps_factory=deps_factory,
        logger=logger,
    )


def run_scraper(
    templates: Sequence[TabTemplate],
    options: Optional[RunOptions] = None,
    logger: Optional[LoggerPort] = None,
) -> List[Dict[str, Any]]:
    return build_scraper(logger=logger).run(templates, options)


def run_scraper_with_callback(
    templates: Sequence[TabTemplate],
    on_result: ResultCallback,
    options: Optional[RunOptions] = None,
    logger: Optional[LoggerPort] = None,
) -> None:
    build_scraper(logger=logger).run_with_callback(templates, on_result, options)
