from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class HttpResponse:
    status: int
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    content: Optional[bytes] = None

    @property
    def content_type(self) -> str:
        for k, v in self.headers.items():
            if k.lower() == "content-type":
                return v
        return ""


class HttpClientPort(ABC):
    @abstractmethod
    def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        ...
