from __future__ import annotations

import re
from typing import Any, Optional, Tuple

_ATTRIBUTE_SUFFIX = re.compile(r"^(?P<base>.+)/@(?P<attr>[A-Za-z_][\w:.-]*)$")


class SelectorResolver:
    """
    Maps (selector kind, selector string) to a driver query rooted at the
    page or at a scoping element. No existence checks happen here.
    """

    def query(self, kind: Optional[str], value: str) -> str:
        if kind == "id":
            return f"#{value}"
        if kind == "class":
            return f".{value}"
        if kind == "xpath":
            return f"xpath={value}"
        # "tag" and absent kind use the raw selector
        return value

    def locate(self, root: Any, kind: Optional[str], value: str) -> Any:
        return root.locator(self.query(kind, value))

    def locate_in_scope(self, ctx: Any, kind: Optional[str], value: str) -> Any:
        root = ctx.scope_element if ctx.scope_element is not None else ctx.page
        return self.locate(root, kind, value)

    def split_attribute(self, kind: Optional[str], value: str) -> Tuple[str, Optional[str]]:
        """
        "//a/@href" -> ("//a", "href"). Only XPath (or kind-less) selectors
        carry the attribute suffix.
        """
        if kind not in (None, "xpath"):
            return value, None
        m = _ATTRIBUTE_SUFFIX.match(value or "")
        if not m:
            return value, None
        return m.group("base"), m.group("attr")
