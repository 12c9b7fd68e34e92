from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from application.ports.logger import LoggerPort
from domain.collector import Collector
from domain.run import ResultCallback


class ResultSink(Protocol):
    def emit(self, record: Dict[str, Any], index: int) -> None:
        ...


class CallbackResultSink:
    """Adapts a caller callback; a failing callback never aborts the run."""

    def __init__(self, callback: ResultCallback, logger: LoggerPort):
        self._callback = callback
        self._logger = logger

    def emit(self, record: Dict[str, Any], index: int) -> None:
        try:
            self._callback(record, index)
        except Exception as exc:
            self._logger.error("result.callback_failed", index=index, error=str(exc))


class ResultEmitter:
    """
    Streams finalized records to a sink. Every leaf collector is delivered
    at most once: delivery sets its emitted flag, and enclosing scopes skip
    flagged leaves when they assemble their own records.
    """

    def __init__(self, sink: ResultSink, logger: LoggerPort):
        self._sink = sink
        self._logger = logger

    def deliver(self, leaf: Collector, record: Dict[str, Any], index: int) -> bool:
        if leaf.emitted:
            return False
        leaf.emitted = True
        self._sink.emit(record, index)
        self._logger.debug("result.emitted", index=index, keys=sorted(record.keys()))
        return True

    def emit_pending(self, collector: Collector, index: int) -> int:
        """Deliver every not-yet-emitted leaf of collector under one local index."""
        delivered = 0
        for leaf, record in collector.leaves():
            if self.deliver(leaf, record, index):
                delivered += 1
        return delivered


def build_emitter(callback: Optional[ResultCallback], logger: LoggerPort) -> Optional[ResultEmitter]:
    if callback is None:
        return None
    return ResultEmitter(CallbackResultSink(callback, logger), logger)
