"""CollectionEditor - ordered list of keyed sub-records with stable ids."""

import uuid
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)


def new_item_id(prefix: Optional[str] = None) -> str:
    """Random id; prefixed ids look like '<prefix>-<random>'."""
    token = uuid.uuid4().hex[:12]
    return f"{prefix}-{token}" if prefix else token


class CollectionEditor(Generic[T]):
    """
    Ordered CRUD over items of one model type.

    Items are identified by ``key(item)`` (default: the ``id`` attribute).
    Ids are assigned once on ``add`` and never change. Updates replace in
    place; an update for an unknown id appends (upsert), since an edit may
    race with a removal of the same item.
    """

    def __init__(self, item_type: Type[T], key: Callable[[T], str] = None):
        self.item_type = item_type
        self.key = key or (lambda item: item.id)
        self._items: List[T] = []

    @property
    def items(self) -> List[T]:
        return list(self._items)

    def add(self, factory: Callable[[], Dict[str, Any]], id_prefix: Optional[str] = None) -> T:
        """Append a new item built from ``factory()`` with a fresh id."""
        existing = {self.key(item) for item in self._items}
        item_id = new_item_id(id_prefix)
        while item_id in existing:
            item_id = new_item_id(id_prefix)

        item = self.item_type(**{**factory(), 'id': item_id})
        self._items.append(item)
        return item

    def remove(self, item_id: str) -> None:
        """Remove the first item with *item_id*; no-op if absent."""
        for idx, item in enumerate(self._items):
            if self.key(item) == item_id:
                del self._items[idx]
                return

    def update(self, item: T) -> None:
        """Replace the item with the same id in place, or append it."""
        item_id = self.key(item)
        for idx, existing in enumerate(self._items):
            if self.key(existing) == item_id:
                self._items[idx] = item
                return
        self._items.append(item)

    def reset(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))
