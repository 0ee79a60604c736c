"""Immutable label context threaded through the snapshot traversal"""

from collections.abc import Iterator, Mapping
from typing import Any


class Labels(Mapping):
    """Read-only label mapping.

    Each nesting level derives its own context with ``overlay``; the
    parent is never modified, so sibling pods or containers cannot see
    each other's labels.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        merged = dict(items or {})
        merged.update(kwargs)
        self._items = merged

    def overlay(self, items: Mapping[str, Any] | None = None, **kwargs: Any) -> "Labels":
        """New context with ``items`` on top; child keys win."""
        merged = dict(self._items)
        merged.update(items or {})
        merged.update(kwargs)
        return Labels(merged)

    def with_value(self, value: Any, **extra: Any) -> dict[str, Any]:
        """Event fields: these labels, ``extra`` on top, then ``value``."""
        fields = dict(self._items)
        fields.update(extra)
        fields["value"] = value
        return fields

    def __getitem__(self, key: str) -> Any:
        return self._items[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Labels({self._items!r})"
