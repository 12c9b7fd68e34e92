from __future__ import annotations

from application.handlers.base import StepHandler
from application.handlers.capture import (
    CaptureContext,
    DownloadWatcher,
    locate_target,
    resolve_target_path,
    save_download,
)
from application.outcome import StepOutcome
from application.services.binary_fetcher import to_absolute_url
from application.services.execution_deps import ExecutionDeps
from application.services.strategy_ladder import (
    CaptureStrategy,
    NotApplicable,
    Saved,
    StrategyLadder,
    StrategyResult,
)
from domain.run import RunContext
from domain.steps.base import DOWNLOAD_ACTIONS, Step


def direct_href(cap: CaptureContext) -> StrategyResult:
    if cap.element is None:
        return NotApplicable("no target element")
    url = to_absolute_url(cap.element.get_attribute("href"), cap.page.url)
    if not url:
        return NotApplicable("no usable href")
    if cap.deps.fetcher is None:
        return NotApplicable("no http fetcher configured")
    return Saved(cap.deps.fetcher.fetch_to_file(cap.page, url, cap.target_path))


def new_tab(cap: CaptureContext) -> StrategyResult:
    """
    Script-driven links: let the page open its tab, then take the file from
    wherever the tab ended up. A tab showing a document is fetched over HTTP;
    a tab whose navigation turned into a download is saved from that download.
    """
    if cap.element is None:
        return NotApplicable("no target element")
    timeout = cap.settings.download_timeout_ms

    with DownloadWatcher(cap.page) as watcher:
        try:
            with cap.page.context.expect_page(timeout=timeout) as page_info:
                cap.element.click(modifiers=["ControlOrMeta"])
            child = page_info.value
            if not watcher.downloads:
                try:
                    child.wait_for_load_state("load", timeout=timeout)
                except Exception as exc:
                    # a tab that turns into a download never finishes loading
                    cap.deps.logger.debug("download.new_tab_load", step_id=cap.step.id, error=str(exc))

            url = to_absolute_url(child.url, cap.page.url)
            if url and not url.startswith("about:") and not watcher.downloads:
                if cap.deps.fetcher is None:
                    return NotApplicable("no http fetcher configured")
                return Saved(cap.deps.fetcher.fetch_to_file(cap.page, url, cap.target_path))

            download = watcher.wait(timeout)
            if download is None:
                return NotApplicable(f"new tab neither showed nor downloaded a file: {child.url}")
            return Saved(save_download(download, cap.target_path))
        finally:
            watcher.close_popups()


def download_event(cap: CaptureContext) -> StrategyResult:
    """Plain click; the download may fire on the page itself or on a popup it opens."""
    if cap.element is None:
        return NotApplicable("no target element")
    with DownloadWatcher(cap.page) as watcher:
        try:
            cap.element.click()
            download = watcher.wait(cap.settings.download_timeout_ms)
            if download is None:
                return NotApplicable("click fired no download")
            return Saved(save_download(download, cap.target_path))
        finally:
            watcher.close_popups()


DOWNLOAD_LADDER = StrategyLadder(
    [
        CaptureStrategy("direct_href", direct_href),
        CaptureStrategy("new_tab", new_tab),
        CaptureStrategy("download_event", download_event),
    ]
)


class DownloadStepHandler(StepHandler):
    """
    eventBaseDownload / downloadFile / downloadPDF.

    Saves the file behind the target element to value (with {{key}}
    placeholders resolved from the collector). The saved path, or None when
    every strategy failed, is stored under key, id, or "file".
    """

    def __init__(self, ladder: StrategyLadder = DOWNLOAD_LADDER):
        self._ladder = ladder

    def supports(self, step) -> bool:
        return step.action in DOWNLOAD_ACTIONS

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        key = step.output_key("file")
        cap = CaptureContext(step=step, ctx=ctx, deps=deps, target_path=resolve_target_path(step, ctx))

        try:
            cap.element = locate_target(step, ctx, deps)
        except Exception as exc:
            deps.logger.warning("download.locate_failed", step_id=step.id, error=str(exc))

        if cap.element is None:
            deps.logger.warning("download.not_found", step_id=step.id, selector=step.selector_value)

        saved = self._ladder.run(cap, deps.logger, step_id=step.id)
        ctx.collector[key] = saved.path if saved else None
        if saved is None:
            return StepOutcome(ok=False, error_message=f"no strategy saved {cap.target_path}")
        return StepOutcome(ok=True)
