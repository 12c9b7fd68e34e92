from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class RunLogEntry:
    """One structured log event of a run, kept for GET /runs/{run_id}/logs."""
    timestamp: datetime
    event: str
    level: str = "info"
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def step_id(self) -> Optional[str]:
        return self.fields.get("step_id")
