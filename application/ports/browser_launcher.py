from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager

from domain.run import RunOptions


class BrowserLauncherPort(ABC):
    @abstractmethod
    def open(self, options: RunOptions) -> ContextManager[Any]:
        """
        Launch a browser and yield one browser context shared by every tab
        of the run. The browser is closed when the context manager exits.
        """
        ...
