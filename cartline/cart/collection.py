"""Ordered collection of cart line items."""
from functools import reduce
from typing import Any, Callable, Iterable, Iterator, Optional

from .models import LineItem


class LineItemCollection:
    """
    Ordered list of line items with identity lookup and group filtering.

    Insertion order matters: lookups return the first match. Uniqueness of
    item keys is kept by ``Cart.add`` merging, not by ``push``.
    """

    def __init__(self, items: Optional[Iterable[LineItem]] = None):
        self._items: list[LineItem] = list(items or [])

    @classmethod
    def from_list(cls, records: Iterable[dict]) -> "LineItemCollection":
        """Build a collection from storage records, keeping their order."""
        return cls(LineItem.from_dict(record) for record in records)

    def to_list(self) -> list[dict]:
        """Convert to storage records, keeping order."""
        return [item.to_dict() for item in self._items]

    def find_by_item_key(self, item_key: str) -> Optional[LineItem]:
        return next((item for item in self._items if item.item_key == item_key), None)

    def filter(self, predicate: Callable[[LineItem], bool]) -> "LineItemCollection":
        return LineItemCollection(item for item in self._items if predicate(item))

    def filter_by_group(self, group: str) -> "LineItemCollection":
        """Items whose group equals ``group`` exactly ("" is the default group)."""
        return self.filter(lambda item: item.group == group)

    def push(self, item: LineItem) -> None:
        self._items.append(item)

    def remove_where(self, predicate: Callable[[LineItem], bool]) -> int:
        """Drop matching items in place and return how many were removed."""
        before = len(self._items)
        self._items = [item for item in self._items if not predicate(item)]
        return before - len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def reduce(self, func: Callable[[Any, LineItem], Any], initial: Any) -> Any:
        return reduce(func, self._items, initial)

    def groups(self) -> list[str]:
        """Distinct group names in first-seen order."""
        return list(dict.fromkeys(item.group for item in self._items))

    def all(self) -> list[LineItem]:
        return list(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> LineItem:
        return self._items[index]

    def __repr__(self) -> str:
        return f"LineItemCollection({self._items!r})"
