from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict

from application.ports.logger import LoggerPort
from application.ports.run_log_store import RunLogStorePort
from domain.run_log import RunLogEntry

_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class RunLogLogger(LoggerPort):
    """Appends every event of one run to a run log store."""
    run_id: str
    log_store: RunLogStorePort
    bound: Dict[str, Any] = field(default_factory=dict)
    min_level: str = "debug"

    def bind(self, **fields: Any) -> "RunLogLogger":
        merged = dict(self.bound)
        merged.update(fields)
        return RunLogLogger(run_id=self.run_id, log_store=self.log_store, bound=merged, min_level=self.min_level)

    def debug(self, event: str, **fields: Any) -> None:
        self._emit(event, "debug", fields)

    def info(self, event: str, **fields: Any) -> None:
        self._emit(event, "info", fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._emit(event, "warning", fields)

    def error(self, event: str, **fields: Any) -> None:
        self._emit(event, "error", fields)

    def _emit(self, event: str, level: str, fields: Dict[str, Any]) -> None:
        if _LEVELS.index(level) < _LEVELS.index(self.min_level):
            return
        payload = dict(self.bound)
        payload.update(fields)
        self.log_store.append(
            self.run_id,
            RunLogEntry(
                timestamp=datetime.now(timezone.utc),
                event=event,
                level=level,
                fields=payload,
            ),
        )
