from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from application.handlers.base import StepHandler
from application.handlers.capture import CaptureContext, resolve_target_path, save_download
from application.outcome import StepOutcome
from application.services.binary_fetcher import to_absolute_url, write_bytes
from application.services.execution_deps import ExecutionDeps
from application.services.strategy_ladder import (
    CaptureStrategy,
    NotApplicable,
    Saved,
    StrategyLadder,
    StrategyResult,
)
from domain.run import RunContext
from domain.steps.base import Step

VIEWER_SELECTORS = (
    ("embed[type='application/pdf']", "src"),
    ("object[type='application/pdf']", "data"),
    ("iframe[src*='.pdf' i]", "src"),
    ("embed[src*='.pdf' i]", "src"),
    ("object[data*='.pdf' i]", "data"),
)

# CSS engine pierces open shadow roots, so viewer toolbars are reachable
DOWNLOAD_CONTROL_SELECTORS = (
    "cr-icon-button#download",
    "#download",
    "button[aria-label='Download' i]",
    "button[title*='download' i]",
    "a[download]",
)


def looks_like_pdf(url: str, content_type: str = "") -> bool:
    if "application/pdf" in (content_type or "").lower():
        return True
    return urlparse(url or "").path.lower().endswith(".pdf")


def pdf_url_in(url: str) -> Optional[str]:
    """The URL itself when it names a .pdf, else the first query value that does."""
    if looks_like_pdf(url):
        return url
    for _, value in parse_qsl(urlparse(url or "").query):
        candidate = unquote(value)
        if urlparse(candidate).path.lower().endswith(".pdf"):
            return to_absolute_url(candidate, url)
    return None


def direct_pdf_url(cap: CaptureContext) -> StrategyResult:
    url = pdf_url_in(cap.page.url)
    if not url:
        return NotApplicable("current url is not a pdf resource")
    if cap.deps.fetcher is None:
        return NotApplicable("no http fetcher configured")
    return Saved(cap.deps.fetcher.fetch_to_file(cap.page, url, cap.target_path))


def embedded_viewer(cap: CaptureContext) -> StrategyResult:
    if cap.deps.fetcher is None:
        return NotApplicable("no http fetcher configured")
    for selector, attr in VIEWER_SELECTORS:
        viewer = cap.page.locator(selector)
        if viewer.count() == 0:
            continue
        url = to_absolute_url(viewer.first.get_attribute(attr), cap.page.url)
        if url:
            return Saved(cap.deps.fetcher.fetch_to_file(cap.page, url, cap.target_path))
    return NotApplicable("no embedded pdf viewer")


def response_interception(cap: CaptureContext) -> StrategyResult:
    """Reload with every response routed through us; keep the first one that is a PDF."""
    captured: Dict[str, str] = {}
    logger = cap.deps.logger

    def _on_route(route: Any) -> None:
        try:
            response = route.fetch()
        except Exception as exc:
            logger.debug("savepdf.route_fetch_failed", step_id=cap.step.id, error=str(exc))
            route.continue_()
            return
        if "path" not in captured and looks_like_pdf(response.url, response.headers.get("content-type", "")):
            captured["path"] = write_bytes(cap.target_path, response.body())
        route.fulfill(response=response)

    cap.page.route("**/*", _on_route)
    try:
        try:
            cap.page.reload(wait_until="load", timeout=cap.settings.reload_timeout_ms)
        except Exception as exc:
            # pdf navigations are often aborted once the body is handed to a viewer or a download
            logger.debug("savepdf.reload_interrupted", step_id=cap.step.id, error=str(exc))
    finally:
        cap.page.unroute("**/*", _on_route)

    if "path" in captured:
        return Saved(captured["path"])
    return NotApplicable("no pdf response observed during reload")


def viewer_download_control(cap: CaptureContext) -> StrategyResult:
    for frame in cap.page.frames:
        for selector in DOWNLOAD_CONTROL_SELECTORS:
            control = frame.locator(selector)
            if control.count() == 0:
                continue
            with cap.page.expect_download(timeout=cap.settings.download_timeout_ms) as download_info:
                control.first.click()
            return Saved(save_download(download_info.value, cap.target_path))
    return NotApplicable("no download control in page")


def print_render(cap: CaptureContext) -> StrategyResult:
    Path(cap.target_path).parent.mkdir(parents=True, exist_ok=True)
    cap.page.pdf(path=cap.target_path, format=cap.settings.pdf_format)
    return Saved(cap.target_path)


SAVE_PDF_LADDER = StrategyLadder(
    [
        CaptureStrategy("direct_pdf_url", direct_pdf_url),
        CaptureStrategy("embedded_viewer", embedded_viewer),
        CaptureStrategy("response_interception", response_interception),
        CaptureStrategy("viewer_download_control", viewer_download_control),
        CaptureStrategy("print_render", print_render),
    ]
)


class SavePdfStepHandler(StepHandler):
    """
    Saves the PDF the current page shows (or is) to value.

    Copes with pages that are a PDF resource, pages embedding a PDF viewer,
    pages whose PDF only shows up on the wire, viewers exposing a download
    control, and plain pages that need a print render. The saved path, or
    None, is stored under key, id, or "file".
    """

    def __init__(self, ladder: StrategyLadder = SAVE_PDF_LADDER):
        self._ladder = ladder

    def supports(self, step) -> bool:
        return step.action == "savePDF"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        key = step.output_key("file")
        cap = CaptureContext(step=step, ctx=ctx, deps=deps, target_path=resolve_target_path(step, ctx))

        try:
            ctx.page.wait_for_load_state("domcontentloaded", timeout=deps.settings.navigation_timeout_ms)
        except Exception as exc:
            deps.logger.debug("savepdf.dom_wait_failed", step_id=step.id, error=str(exc))

        saved = self._ladder.run(cap, deps.logger, step_id=step.id)
        ctx.collector[key] = saved.path if saved else None
        if saved is None:
            return StepOutcome(ok=False, error_message=f"no strategy saved {cap.target_path}")
        return StepOutcome(ok=True)
