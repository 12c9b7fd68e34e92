"""
Tab template domain model
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from domain.exceptions import ConfigurationError
from domain.steps.base import Step


@dataclass(frozen=True)
class NextButtonConfig:
    selector_value: str
    selector_kind: Optional[str] = None
    wait_ms: Optional[int] = None


@dataclass(frozen=True)
class ScrollConfig:
    offset: Optional[int] = None  # None => one viewport height
    delay_ms: Optional[int] = None


@dataclass(frozen=True)
class PaginationConfig:
    strategy: str  # "next" | "scroll"
    next_button: Optional[NextButtonConfig] = None
    scroll: Optional[ScrollConfig] = None
    max_pages: Optional[int] = None
    pagination_first: bool = False
    paginate_all_first: bool = False

    @property
    def bounded(self) -> bool:
        # 0 and None both mean "no cap"
        return bool(self.max_pages)

    def reached_max(self, page_index: int) -> bool:
        return self.bounded and page_index >= self.max_pages

    def validate(self) -> None:
        if self.strategy not in ("next", "scroll"):
            raise ConfigurationError(f"unknown pagination strategy: {self.strategy}")
        if self.strategy == "next" and (self.next_button is None or not self.next_button.selector_value):
            raise ConfigurationError("pagination strategy 'next' requires nextButton")


@dataclass(frozen=True)
class TabTemplate:
    """
    One browser tab's program.

    init_steps run once; per_page_steps (or the legacy steps) run on every
    page iteration under the optional pagination config.
    """
    tab: str
    init_steps: Tuple[Step, ...] = field(default_factory=tuple)
    per_page_steps: Tuple[Step, ...] = field(default_factory=tuple)
    steps: Tuple[Step, ...] = field(default_factory=tuple)
    pagination: Optional[PaginationConfig] = None

    def steps_for_page(self) -> Tuple[Step, ...]:
        if self.per_page_steps:
            return self.per_page_steps
        return self.steps
