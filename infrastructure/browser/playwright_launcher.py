from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import BrowserContext, sync_playwright

from application.ports.browser_launcher import BrowserLauncherPort
from application.ports.logger import LoggerPort
from domain.run import RunOptions


class PlaywrightLauncher(BrowserLauncherPort):
    """Chromium through the Playwright sync API; one context per run."""

    def __init__(self, logger: LoggerPort):
        self._logger = logger

    @contextmanager
    def open(self, options: RunOptions) -> Iterator[BrowserContext]:
        launch_kwargs = options.launch_kwargs()
        with sync_playwright() as pw:
            browser = pw.chromium.launch(**launch_kwargs)
            self._logger.info("browser.launched", headless=launch_kwargs.get("headless"))
            try:
                context = browser.new_context(**options.context)
                try:
                    yield context
                finally:
                    context.close()
            finally:
                browser.close()
                self._logger.info("browser.closed")
