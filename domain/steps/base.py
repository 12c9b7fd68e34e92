from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from domain.exceptions import ConfigurationError


SELECTOR_KINDS = ("id", "class", "tag", "xpath")
DATA_KINDS = ("text", "html", "formValue", "attribute", "default")

DOWNLOAD_ACTIONS = ("eventBaseDownload", "downloadFile", "downloadPDF")
ACTIONS = (
    "navigate",
    "input",
    "click",
    "data",
    "scroll",
    "reload",
    "wait",
    "foreach",
    "open",
    "savePDF",
    "printToPDF",
) + DOWNLOAD_ACTIONS

# value is the payload the action cannot run without
VALUE_REQUIRED = ("navigate", "savePDF", "printToPDF") + DOWNLOAD_ACTIONS
SUB_STEPS_REQUIRED = ("foreach", "open")


@dataclass(frozen=True)
class Step:
    id: str
    action: str
    selector_kind: Optional[str] = None
    selector_value: Optional[str] = None
    value: Optional[str] = None
    key: Optional[str] = None
    data_kind: Optional[str] = None
    wait_after_ms: Optional[int] = None
    terminate_on_error: bool = False
    sub_steps: Tuple["Step", ...] = field(default_factory=tuple)
    auto_scroll: bool = True
    index_token_name: str = "i"
    description: Optional[str] = None

    def output_key(self, fallback: str = "data") -> str:
        return self.key or self.id or fallback

    def validate(self) -> None:
        """
        Raise ConfigurationError when a required field for this action is missing.
        Called before the step touches the browser.
        """
        if self.action not in ACTIONS:
            raise ConfigurationError(f"unknown action '{self.action}' in step {self.id}", step_id=self.id)

        if self.action in VALUE_REQUIRED and not self.value:
            raise ConfigurationError(
                f"{self.action} step {self.id} requires 'value'",
                step_id=self.id,
            )

        if self.action in SUB_STEPS_REQUIRED:
            if not self.selector_value:
                raise ConfigurationError(
                    f"{self.action} step {self.id} requires a selector",
                    step_id=self.id,
                )
            if not self.sub_steps:
                raise ConfigurationError(
                    f"{self.action} step {self.id} requires subSteps",
                    step_id=self.id,
                )

        if self.selector_kind is not None and self.selector_kind not in SELECTOR_KINDS:
            raise ConfigurationError(
                f"unknown selector kind '{self.selector_kind}' in step {self.id}",
                step_id=self.id,
            )

        if self.data_kind is not None and self.data_kind not in DATA_KINDS:
            raise ConfigurationError(
                f"unknown data kind '{self.data_kind}' in step {self.id}",
                step_id=self.id,
            )
