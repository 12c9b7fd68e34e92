from __future__ import annotations

from typing import Optional


class StepWrightError(Exception):
    pass


class ConfigurationError(StepWrightError):
    """A step or tab descriptor is structurally invalid."""

    def __init__(self, message: str, step_id: Optional[str] = None):
        super().__init__(message)
        self.step_id = step_id


class TransientDriverFailure(StepWrightError):
    """
    A browser interaction failed for a step marked terminate_on_error.
    The driver's own exception is chained as __cause__.
    """

    def __init__(self, message: str, step_id: Optional[str] = None):
        super().__init__(message)
        self.step_id = step_id


class OpenNavigationError(TransientDriverFailure):
    pass


class TemplateLoadError(StepWrightError):
    pass
