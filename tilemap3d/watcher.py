"""A value holder that notifies a bound callback whenever it is assigned."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class ValueWatcher(Generic[T]):
    """Holds a value and calls the bound callback with it on every assignment."""

    def __init__(self, value: T = None, callback: Optional[Callable[[T], Any]] = None):
        self._value = value
        self._callback = callback

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._value = new_value
        if self._callback is not None:
            self._callback(self._value)

    @property
    def binding(self) -> Optional[Callable[[T], Any]]:
        return self._callback

    def bind(self, callback: Callable[[T], Any]) -> None:
        """Replace the bound callback."""
        self._callback = callback

    def unbind(self, owner: Any = None) -> None:
        """Drop the callback; with ``owner``, only if it is a method of that object."""
        if owner is None or getattr(self._callback, "__self__", None) is owner:
            self._callback = None

    def is_bound(self) -> bool:
        return self._callback is not None