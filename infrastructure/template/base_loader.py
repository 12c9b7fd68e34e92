"""
Build TabTemplate domain objects from parsed JSON/YAML documents.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from domain.exceptions import TemplateLoadError
from domain.steps import ACTIONS, DATA_KINDS, SELECTOR_KINDS, Step
from domain.tab import NextButtonConfig, PaginationConfig, ScrollConfig, TabTemplate

# camelCase names first, then the legacy wire names
_STEP_KEYS = {
    "selector_kind": ("selectorKind", "object_type"),
    "selector_value": ("selectorValue", "object"),
    "data_kind": ("dataKind", "data_type"),
    "wait_after_ms": ("waitAfterMs", "wait"),
    "terminate_on_error": ("terminateOnError", "terminateonerror"),
    "sub_steps": ("subSteps",),
    "auto_scroll": ("autoScroll",),
    "index_token_name": ("indexTokenName", "index_key"),
}

_DATA_KIND_ALIASES = {"value": "formValue"}


def _pick(data: Dict[str, Any], names: Tuple[str, ...], default: Any = None) -> Any:
    for name in names:
        if name in data and data[name] is not None:
            return data[name]
    return default


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any, where: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise TemplateLoadError(f"{where} must be an integer, got {value!r}")


_TRUE_STRINGS = frozenset({"true", "yes", "1"})
_FALSE_STRINGS = frozenset({"false", "no", "0"})


def _flag(value: Any, default: bool, where: str) -> bool:
    """Booleans, or their common string spellings; "false" must not read as True."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    raise TemplateLoadError(f"{where} must be a boolean, got {value!r}")

class TemplateLoaderBase(ABC):
    def load_from_file(self, path: Union[str, Path]) -> List[TabTemplate]:
        p = Path(path)
        if not p.exists():
            raise TemplateLoadError(f"Template file not found: {path}")

        data = self._load_file(p)
        if data is None:
            raise TemplateLoadError(f"Template file is empty: {path}")

        return self.load(data)

    @abstractmethod
    def _load_file(self, path: Path) -> Any:
        ...

    def load(self, data: Any) -> List[TabTemplate]:
        """A list of tabs, or an object with a "tabs" list."""
        if isinstance(data, dict) and "tabs" in data:
            data = data["tabs"]
        if not isinstance(data, list):
            raise TemplateLoadError("Template document must be a list of tabs or {'tabs': [...]}")
        return [self.load_tab(tab) for tab in data]

    def load_tab(self, data: Dict[str, Any]) -> TabTemplate:
        if not isinstance(data, dict):
            raise TemplateLoadError(f"Tab must be an object, got {type(data).__name__}")

        pagination_data = data.get("pagination")
        return TabTemplate(
            tab=str(data.get("tab", "")),
            init_steps=self.load_steps(data.get("initSteps") or []),
            per_page_steps=self.load_steps(data.get("perPageSteps") or []),
            steps=self.load_steps(data.get("steps") or []),
            pagination=self._load_pagination(pagination_data) if pagination_data else None,
        )

    def load_steps(self, steps_data: Any) -> Tuple[Step, ...]:
        if not isinstance(steps_data, list):
            raise TemplateLoadError(f"Step list must be a list, got {type(steps_data).__name__}")
        return tuple(self.load_step(step_data) for step_data in steps_data)

    def load_step(self, data: Dict[str, Any]) -> Step:
        if not isinstance(data, dict):
            raise TemplateLoadError(f"Step must be an object, got {type(data).__name__}")

        step_id = str(data.get("id", ""))
        action = data.get("action", "")
        if action not in ACTIONS:
            raise TemplateLoadError(f"Unknown action '{action}' in step '{step_id}'")

        selector_kind = _pick(data, _STEP_KEYS["selector_kind"])
        if selector_kind is not None and selector_kind not in SELECTOR_KINDS:
            raise TemplateLoadError(f"Unknown selector kind '{selector_kind}' in step '{step_id}'")

        data_kind = _pick(data, _STEP_KEYS["data_kind"])
        data_kind = _DATA_KIND_ALIASES.get(data_kind, data_kind)
        if data_kind is not None and data_kind not in DATA_KINDS:
            raise TemplateLoadError(f"Unknown data kind '{data_kind}' in step '{step_id}'")

        return Step(
            id=step_id,
            action=action,
            selector_kind=selector_kind,
            selector_value=_optional_str(_pick(data, _STEP_KEYS["selector_value"])),
            value=_optional_str(data.get("value")),
            key=_optional_str(data.get("key")),
            data_kind=data_kind,
            wait_after_ms=_optional_int(_pick(data, _STEP_KEYS["wait_after_ms"]), f"step '{step_id}' wait"),
            terminate_on_error=_flag(
                _pick(data, _STEP_KEYS["terminate_on_error"]), False, f"step '{step_id}' terminateOnError"
            ),
            sub_steps=self.load_steps(_pick(data, _STEP_KEYS["sub_steps"], [])),
            auto_scroll=_flag(_pick(data, _STEP_KEYS["auto_scroll"]), True, f"step '{step_id}' autoScroll"),
            index_token_name=str(_pick(data, _STEP_KEYS["index_token_name"], "i")),
            description=_optional_str(data.get("description")),
        )

    def _load_pagination(self, data: Dict[str, Any]) -> PaginationConfig:
        next_data = data.get("nextButton")
        next_button = None
        if next_data:
            next_button = NextButtonConfig(
                selector_kind=_pick(next_data, _STEP_KEYS["selector_kind"]),
                selector_value=str(_pick(next_data, _STEP_KEYS["selector_value"], "")),
                wait_ms=_optional_int(next_data.get("wait"), "nextButton.wait"),
            )

        scroll_data = data.get("scroll")
        scroll = None
        if scroll_data:
            scroll = ScrollConfig(
                offset=_optional_int(scroll_data.get("offset"), "scroll.offset"),
                delay_ms=_optional_int(scroll_data.get("delay"), "scroll.delay"),
            )

        return PaginationConfig(
            strategy=data.get("strategy", ""),
            next_button=next_button,
            scroll=scroll,
            max_pages=_optional_int(data.get("maxPages"), "maxPages"),
            pagination_first=_flag(data.get("paginationFirst"), False, "paginationFirst"),
            paginate_all_first=_flag(data.get("paginateAllFirst"), False, "paginateAllFirst"),
        )


class DictTemplateLoader(TemplateLoaderBase):
    """Loads templates handed over as already-parsed data (API payloads)."""

    def _load_file(self, path: Path) -> Any:
        raise TemplateLoadError("DictTemplateLoader does not read files")
