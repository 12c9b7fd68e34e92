from __future__ import annotations

from typing import Any, Dict, List, Sequence

from domain.steps.base import Step
from domain.tab import PaginationConfig, TabTemplate


def dump_step(step: Step) -> Dict[str, Any]:
    out: Dict[str, Any] = {"id": step.id, "action": step.action}
    optional = {
        "selectorKind": step.selector_kind,
        "selectorValue": step.selector_value,
        "value": step.value,
        "key": step.key,
        "dataKind": step.data_kind,
        "waitAfterMs": step.wait_after_ms,
        "description": step.description,
    }
    out.update({k: v for k, v in optional.items() if v is not None})
    if step.terminate_on_error:
        out["terminateOnError"] = True
    if not step.auto_scroll:
        out["autoScroll"] = False
    if step.index_token_name != "i":
        out["indexTokenName"] = step.index_token_name
    if step.sub_steps:
        out["subSteps"] = [dump_step(sub) for sub in step.sub_steps]
    return out


def dump_pagination(config: PaginationConfig) -> Dict[str, Any]:
    out: Dict[str, Any] = {"strategy": config.strategy}
    if config.next_button is not None:
        button: Dict[str, Any] = {"selectorValue": config.next_button.selector_value}
        if config.next_button.selector_kind is not None:
            button["selectorKind"] = config.next_button.selector_kind
        if config.next_button.wait_ms is not None:
            button["wait"] = config.next_button.wait_ms
        out["nextButton"] = button
    if config.scroll is not None:
        scroll = {"offset": config.scroll.offset, "delay": config.scroll.delay_ms}
        out["scroll"] = {k: v for k, v in scroll.items() if v is not None}
    if config.max_pages is not None:
        out["maxPages"] = config.max_pages
    if config.pagination_first:
        out["paginationFirst"] = True
    if config.paginate_all_first:
        out["paginateAllFirst"] = True
    return out


def dump_template(template: TabTemplate) -> Dict[str, Any]:
    out: Dict[str, Any] = {"tab": template.tab}
    if template.init_steps:
        out["initSteps"] = [dump_step(s) for s in template.init_steps]
    if template.per_page_steps:
        out["perPageSteps"] = [dump_step(s) for s in template.per_page_steps]
    if template.steps:
        out["steps"] = [dump_step(s) for s in template.steps]
    if template.pagination is not None:
        out["pagination"] = dump_pagination(template.pagination)
    return out


def dump_templates(templates: Sequence[TabTemplate]) -> List[Dict[str, Any]]:
    return [dump_template(t) for t in templates]
