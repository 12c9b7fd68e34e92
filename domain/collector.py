from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

ITEM_PREFIX = "item_"


class Collector:
    """
    Scope-local record accumulator.

    fields holds the scalar values extracted in this scope (context keys).
    items is the ordered group produced by a foreach; each entry is the
    item collector of one matched element. A collector without items is
    itself one record; a collector with items flattens into one record per
    leaf. An item carries the context it was created with (see child()),
    so fields set on the parent after the item was built never reach it.
    """

    def __init__(self, context: Optional[Mapping[str, Any]] = None):
        self.fields: Dict[str, Any] = dict(context or {})
        self.items: List[Optional["Collector"]] = []
        self.emitted = False

    def __setitem__(self, key: str, value: Any) -> None:
        self.fields[key] = value

    def __getitem__(self, key: str) -> Any:
        return self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def __repr__(self) -> str:
        return f"Collector(fields={self.fields!r}, items={len(self.items)})"

    def child(self) -> "Collector":
        """Item collector inheriting this scope's context keys by value."""
        return Collector(context=self.fields)

    def set_item(self, index: int, item: "Collector") -> None:
        while len(self.items) <= index:
            self.items.append(None)
        self.items[index] = item

    def item(self, index: int) -> Optional["Collector"]:
        if index < len(self.items):
            return self.items[index]
        return None

    @property
    def has_items(self) -> bool:
        return any(item is not None for item in self.items)

    def is_empty(self) -> bool:
        if self.fields:
            return False
        return not any(item is not None and not item.is_empty() for item in self.items)

    def merge(self, other: "Collector") -> None:
        """Merge a sub-context collector back: fields overwrite, items overwrite by index."""
        self.fields.update(other.fields)
        for index, item in enumerate(other.items):
            if item is not None:
                self.set_item(index, item)

    def iter_items(self) -> Iterator[Tuple[int, "Collector"]]:
        for index, item in enumerate(self.items):
            if item is not None and not item.is_empty():
                yield index, item

    def leaves(self) -> List[Tuple["Collector", Dict[str, Any]]]:
        """
        Flatten into (leaf collector, record) pairs in match order.

        A leaf's record is its own fields, which already hold the ancestor
        context snapshotted when the leaf was created. A streamed item and
        the batch record built later from the same leaf are therefore equal.
        """
        if not self.has_items:
            if self.is_empty():
                return []
            return [(self, dict(self.fields))]

        out: List[Tuple[Collector, Dict[str, Any]]] = []
        for _, item in self.iter_items():
            out.extend(item.leaves())
        return out

    def flatten(self) -> List[Dict[str, Any]]:
        return [record for _, record in self.leaves()]

    def to_dict(self) -> Dict[str, Any]:
        """Nested dict view with synthetic item_<n> keys."""
        out: Dict[str, Any] = dict(self.fields)
        for index, item in enumerate(self.items):
            if item is not None:
                out[f"{ITEM_PREFIX}{index}"] = item.to_dict()
        return out
