"""FieldStore - answers collected by the wizard, with change notification."""

import logging
from typing import Any, Callable, Dict, List, Mapping, Union

from .schema import FieldKey

logger = logging.getLogger(__name__)

Listener = Callable[[FieldKey, Any], None]


class FieldStore:
    """
    Mutable mapping of field key to answer value.

    Pure storage: no validation beyond rejecting unknown keys. Every change
    is reported to subscribed listeners. Setting a value to None removes the key.
    """

    def __init__(self):
        self._values: Dict[FieldKey, Any] = {}
        self._listeners: List[Listener] = []

    def get(self, key: Union[FieldKey, str], default: Any = None) -> Any:
        return self._values.get(FieldKey(key), default)

    def set(self, key: Union[FieldKey, str], value: Any) -> None:
        """Store *value* under *key* and notify listeners.

        Raises:
            ValueError: If key is not a known field key
        """
        key = FieldKey(key)
        logger.debug("change %s %r", key.value, value)
        if value is None:
            self._values.pop(key, None)
        else:
            self._values[key] = value
        for listener in list(self._listeners):
            listener(key, value)

    def apply(self, patch: Mapping[Union[FieldKey, str], Any]) -> None:
        """Apply a state patch, one key at a time."""
        for key, value in patch.items():
            self.set(key, value)

    def reset(self) -> None:
        """Clear all answers."""
        self._values.clear()
        for listener in list(self._listeners):
            listener(None, None)

    def snapshot(self) -> Dict[FieldKey, Any]:
        """Plain copy of the current answers for pure functions."""
        return dict(self._values)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def __contains__(self, key: Union[FieldKey, str]) -> bool:
        return FieldKey(key) in self._values

    def __len__(self) -> int:
        return len(self._values)
