from __future__ import annotations

from typing import Any

from application.handlers.scroll_handler import scroll_by
from application.services.execution_deps import ExecutionDeps
from domain.tab import PaginationConfig


class PaginationController:
    """
    Advances a tab to its next page.

    strategy "next": click the next control; a missing or disabled control,
    or a failing click, ends pagination. strategy "scroll": scroll and wait;
    scrolling never ends pagination by itself, so max_pages is what bounds it.
    """

    def __init__(self, config: PaginationConfig, deps: ExecutionDeps):
        config.validate()
        self._config = config
        self._deps = deps

    @property
    def config(self) -> PaginationConfig:
        return self._config

    def reached_max(self, page_index: int) -> bool:
        return self._config.reached_max(page_index)

    def advance(self, page: Any, mode: str = "default") -> bool:
        if self._config.strategy == "next":
            advanced = self._advance_next(page, mode)
        else:
            advanced = self._advance_scroll(page, mode)
        if not advanced:
            self._deps.logger.info("pagination.end", strategy=self._config.strategy, mode=mode)
        return advanced

    def _advance_next(self, page: Any, mode: str) -> bool:
        button = self._config.next_button
        logger = self._deps.logger
        logger.info("pagination.advance", strategy="next", mode=mode, selector=button.selector_value)

        try:
            control = self._deps.selectors.locate(page, button.selector_kind, button.selector_value)
            if control.count() == 0:
                logger.info("pagination.next_missing", selector=button.selector_value)
                return False

            try:
                disabled = control.first.is_disabled()
            except Exception:
                disabled = False
            if disabled:
                logger.info("pagination.next_disabled", selector=button.selector_value)
                return False

            control.first.click()
            if button.wait_ms:
                page.wait_for_timeout(button.wait_ms)
            else:
                page.wait_for_load_state("networkidle", timeout=self._deps.settings.network_idle_timeout_ms)
            return True
        except Exception as exc:
            logger.warning("pagination.next_failed", selector=button.selector_value, error=str(exc))
            return False

    def _advance_scroll(self, page: Any, mode: str) -> bool:
        scroll = self._config.scroll
        offset = scroll.offset if scroll else None
        delay = scroll.delay_ms if scroll and scroll.delay_ms is not None else self._deps.settings.default_scroll_delay_ms

        scrolled = scroll_by(page, offset)
        self._deps.logger.info("pagination.advance", strategy="scroll", mode=mode, offset=scrolled)
        page.wait_for_timeout(delay)
        return True
