import re
from dataclasses import replace
from typing import Any, Mapping, Optional

from domain.steps.base import Step

_DATA_TOKEN = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9\s\-_]")
_WHITESPACE = re.compile(r"\s+")


def _index_pattern(token: str) -> "re.Pattern[str]":
    return re.compile(r"\{\{\s*" + re.escape(token) + r"\s*\}\}")


def replace_index_placeholders(text: Optional[str], index: int, token: str = "i") -> Optional[str]:
    """{{i}} -> index, {{i_plus1}} -> index + 1 for the given token name."""
    if not text:
        return text
    out = _index_pattern(token).sub(str(index), text)
    return _index_pattern(token + "_plus1").sub(str(index + 1), out)


def sanitize_for_path(value: Any) -> str:
    out = _UNSAFE_CHARS.sub("", str(value)).strip()
    return _WHITESPACE.sub("_", out)


def replace_data_placeholders(text: Optional[str], data: Mapping[str, Any]) -> Optional[str]:
    """
    Replace {{key}} with the path-safe value of data[key].
    Unknown keys and None values leave the token verbatim.
    """
    if not text:
        return text

    def _sub(match: "re.Match[str]") -> str:
        value = data.get(match.group(1).strip())
        if value is None:
            return match.group(0)
        return sanitize_for_path(value)

    return _DATA_TOKEN.sub(_sub, text)


def clone_step_with_index(step: Step, index: int, token: str = "i") -> Step:
    """
    Instantiate a step subtree for one loop iteration: every string field
    that can carry a selector, payload or key has the token substituted,
    recursively through sub_steps. Other tokens are left for inner loops.
    """
    return replace(
        step,
        selector_value=replace_index_placeholders(step.selector_value, index, token),
        value=replace_index_placeholders(step.value, index, token),
        key=replace_index_placeholders(step.key, index, token),
        sub_steps=tuple(clone_step_with_index(sub, index, token) for sub in step.sub_steps),
    )
