from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Union

from application.ports.logger import LoggerPort


@dataclass(frozen=True)
class Saved:
    path: str
    strategy: str = ""


@dataclass(frozen=True)
class NotApplicable:
    reason: str


StrategyResult = Union[Saved, NotApplicable]


@dataclass(frozen=True)
class CaptureStrategy:
    name: str
    run: Callable[[Any], StrategyResult]


class StrategyLadder:
    """
    Ordered fallback techniques for capturing a file. The first Saved wins;
    an exception raised by a strategy counts as that strategy failing.
    """

    def __init__(self, strategies: Sequence[CaptureStrategy]):
        self._strategies = list(strategies)

    @property
    def names(self) -> list:
        return [s.name for s in self._strategies]

    def run(self, context: Any, logger: LoggerPort, step_id: str = "") -> Optional[Saved]:
        for strategy in self._strategies:
            try:
                result = strategy.run(context)
            except Exception as exc:
                logger.warning(
                    "capture.strategy_failed",
                    step_id=step_id,
                    strategy=strategy.name,
                    error=str(exc),
                )
                continue

            if isinstance(result, Saved):
                saved = result if result.strategy else Saved(path=result.path, strategy=strategy.name)
                logger.info("capture.saved", step_id=step_id, strategy=saved.strategy, path=saved.path)
                return saved

            logger.debug(
                "capture.strategy_skipped",
                step_id=step_id,
                strategy=strategy.name,
                reason=getattr(result, "reason", ""),
            )

        logger.warning("capture.exhausted", step_id=step_id, strategies=self.names)
        return None
