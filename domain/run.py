from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

from domain.collector import Collector

ResultCallback = Callable[[Dict[str, Any], int], None]


@dataclass
class RunContext:
    """
    Where a step executes: the live page, the collector of the current
    scope and, inside a foreach iteration, the matched element that
    scopes selector lookups.
    """
    page: Any
    collector: Collector = field(default_factory=Collector)
    scope_element: Optional[Any] = None
    run_id: str = ""

    def child(self, **changes: Any) -> "RunContext":
        return replace(self, **changes)


@dataclass(frozen=True)
class RunOptions:
    headless: bool = True
    browser: Dict[str, Any] = field(default_factory=dict)  # extra launch kwargs
    context: Dict[str, Any] = field(default_factory=dict)  # new_context kwargs
    on_result: Optional[ResultCallback] = None
    run_id: Optional[str] = None  # generated when absent

    def launch_kwargs(self) -> Dict[str, Any]:
        kwargs = {"headless": self.headless}
        kwargs.update(self.browser)
        return kwargs
