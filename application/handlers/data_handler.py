from __future__ import annotations

from typing import Any, Optional

from application.handlers.base import StepHandler, contain_failure
from application.outcome import StepOutcome
from application.services.execution_deps import ExecutionDeps
from domain.exceptions import ConfigurationError
from domain.run import RunContext
from domain.steps.base import Step

_FORM_TAGS = ("input", "textarea", "select")


class DataStepHandler(StepHandler):
    """
    Data step handler.

    data_kind:
      - text:       text content, passed through untrimmed
      - html:       inner HTML
      - formValue:  value of a form control; for other elements the href
      - attribute:  named attribute, from a trailing "/@name" on the XPath
                    selector (stripped before the lookup) or from value
      - default:    rendered inner text, falling back to text content

    Stores the result into the scope collector under key, id, or "data".
    A missing element or a failed extraction stores None and never raises.
    """

    def supports(self, step) -> bool:
        return step.action == "data"

    def handle(self, step: Step, ctx: RunContext, deps: ExecutionDeps) -> StepOutcome:
        key = step.output_key("data")
        selector, attr = deps.selectors.split_attribute(step.selector_kind, step.selector_value or "")
        data_kind = step.data_kind or "default"

        if data_kind == "attribute":
            attr = attr or step.value
            if not attr:
                raise ConfigurationError(
                    f"data step {step.id} with dataKind 'attribute' needs '/@name' or value",
                    step_id=step.id,
                )

        try:
            target = deps.selectors.locate_in_scope(ctx, step.selector_kind, selector)
            if target.count() == 0:
                ctx.collector[key] = None
                deps.logger.warning("data.not_found", step_id=step.id, selector=step.selector_value, key=key)
                return StepOutcome(ok=True)

            value = self._extract(target.first, data_kind, attr)
        except Exception as exc:
            ctx.collector[key] = None
            return contain_failure(step, deps, "data.failed", exc, selector=step.selector_value)

        ctx.collector[key] = value
        deps.logger.debug(
            "data.extracted",
            step_id=step.id,
            key=key,
            value=(value or "")[:200],
        )
        return StepOutcome(ok=True)

    def _extract(self, element: Any, data_kind: str, attr: Optional[str]) -> Optional[str]:
        if attr:
            return element.get_attribute(attr)

        if data_kind == "text":
            return element.text_content()

        if data_kind == "html":
            return element.inner_html()

        if data_kind == "formValue":
            tag = (element.evaluate("(el) => el.tagName") or "").lower()
            if tag in _FORM_TAGS:
                return element.input_value()
            return element.get_attribute("href")

        try:
            return element.inner_text()
        except Exception:
            return element.text_content()
