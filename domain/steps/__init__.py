from domain.steps.base import (
    ACTIONS,
    DATA_KINDS,
    DOWNLOAD_ACTIONS,
    SELECTOR_KINDS,
    Step,
)

__all__ = [
    "ACTIONS",
    "DATA_KINDS",
    "DOWNLOAD_ACTIONS",
    "SELECTOR_KINDS",
    "Step",
]
