# application/executor/handler_registry.py
from __future__ import annotations

from typing import Dict, List

from application.handlers.base import StepHandler
from domain.steps.base import Step


class HandlerRegistry:
    """
    Resolves the handler for a step. The first handler that supports a
    step wins; the choice is remembered per action.
    """

    def __init__(self, handlers: List[StepHandler]):
        self._handlers = list(handlers)
        self._by_action: Dict[str, StepHandler] = {}

    @property
    def handlers(self) -> List[StepHandler]:
        return list(self._handlers)

    def get_handler(self, step: Step) -> StepHandler:
        cached = self._by_action.get(step.action)
        if cached is not None:
            return cached

        for h in self._handlers:
            if h.supports(step):
                self._by_action[step.action] = h
                return h
        raise RuntimeError(f"No handler found for step: {step.action} ({step.id})")
