from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class ExecutionSettings:
    navigation_timeout_ms: int = 30000
    attach_timeout_ms: int = 5000
    download_timeout_ms: int = 10000
    reload_wait_until: str = "networkidle"
    reload_timeout_ms: int = 30000
    network_idle_timeout_ms: int = 15000
    pdf_format: str = "A4"
    pdf_margin: Dict[str, str] = field(
        default_factory=lambda: {"top": "10mm", "right": "10mm", "bottom": "10mm", "left": "10mm"}
    )
    http_timeout_sec: int = 60
    default_scroll_delay_ms: int = 1000
