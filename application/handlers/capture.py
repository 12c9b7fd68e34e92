from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from application.services.execution_deps import ExecutionDeps
from domain.placeholders import replace_data_placeholders
from domain.run import RunContext
from domain.steps.base import Step


@dataclass
class CaptureContext:
    """Everything a capture strategy may read: the step, its scope and the resolved target path."""
    step: Step
    ctx: RunContext
    deps: ExecutionDeps
    target_path: str
    element: Optional[Any] = None

    @property
    def page(self) -> Any:
        return self.ctx.page

    @property
    def settings(self):
        return self.deps.settings


def resolve_target_path(step: Step, ctx: RunContext) -> str:
    return replace_data_placeholders(step.value, ctx.collector.fields) or step.value or ""


def locate_target(step: Step, ctx: RunContext, deps: ExecutionDeps) -> Optional[Any]:
    """First element matched by the step's selector, or None."""
    if not step.selector_value:
        return None
    target = deps.selectors.locate_in_scope(ctx, step.selector_kind, step.selector_value)
    if target.count() == 0:
        return None
    return target.first


class DownloadWatcher:
    """
    Collects downloads fired by a page or by any popup opened while the
    watcher is active. A popup whose navigation becomes a download stays on
    about:blank and reports the download on itself, not on its opener.
    """

    poll_ms = 100

    def __init__(self, page: Any):
        self.page = page
        self.context = page.context
        self.downloads: List[Any] = []
        self.popups: List[Any] = []

    def __enter__(self) -> "DownloadWatcher":
        self.page.on("download", self._on_download)
        self.context.on("page", self._on_page)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.page.remove_listener("download", self._on_download)
        self.context.remove_listener("page", self._on_page)
        for popup in self.popups:
            popup.remove_listener("download", self._on_download)
        return False

    def _on_download(self, download: Any) -> None:
        self.downloads.append(download)

    def _on_page(self, popup: Any) -> None:
        self.popups.append(popup)
        popup.on("download", self._on_download)

    def wait(self, timeout_ms: int) -> Optional[Any]:
        """First download seen within timeout_ms, or None."""
        waited = 0
        while not self.downloads and waited < timeout_ms:
            # event handlers are dispatched while the driver waits
            self.page.wait_for_timeout(self.poll_ms)
            waited += self.poll_ms
        return self.downloads[0] if self.downloads else None

    def close_popups(self) -> None:
        for popup in self.popups:
            if not popup.is_closed():
                popup.close()


def save_download(download: Any, target_path: str) -> str:
    Path(target_path).parent.mkdir(parents=True, exist_ok=True)
    download.save_as(target_path)
    return target_path
