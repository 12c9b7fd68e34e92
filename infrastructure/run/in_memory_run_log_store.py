from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import List

from application.ports.run_log_store import RunLogStorePort
from domain.run_log import RunLogEntry

DEFAULT_MAX_RUNS = 200


class InMemoryRunLogStore(RunLogStorePort):
    """Keeps the logs of the most recent max_runs runs; older runs are evicted first."""

    def __init__(self, max_runs: int = DEFAULT_MAX_RUNS) -> None:
        self._logs: "OrderedDict[str, List[RunLogEntry]]" = OrderedDict()
        self._max_runs = max_runs
        self._lock = Lock()

    def append(self, run_id: str, entry: RunLogEntry) -> None:
        with self._lock:
            if run_id not in self._logs:
                self._logs[run_id] = []
                while len(self._logs) > self._max_runs:
                    self._logs.popitem(last=False)
            self._logs[run_id].append(entry)

    def list(self, run_id: str) -> List[RunLogEntry]:
        with self._lock:
            return list(self._logs.get(run_id, []))

    def has_run(self, run_id: str) -> bool:
        with self._lock:
            return run_id in self._logs
