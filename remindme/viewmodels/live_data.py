# remindme/viewmodels/live_data.py
"""
Observable holders used by view-models to publish state and one-off events to a view.

Neither class is thread-safe: they are meant to be read, written and observed from the
single event loop that owns the view-model.
"""

import logging
from typing import Any, Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[Any], Any]

_UNSET = object()


class LiveValue(Generic[T]):
    """Holds the latest value of a piece of state and pushes every change to its observers"""

    def __init__(self, value=_UNSET):
        self._value = value
        self._observers: List[Observer] = []

    @property
    def value(self) -> Optional[T]:
        return None if self._value is _UNSET else self._value

    @property
    def has_value(self) -> bool:
        return self._value is not _UNSET

    def set_value(self, value: T):
        self._value = value
        for observer in list(self._observers):
            observer(value)

    def observe(self, observer: Observer):
        """Register an observer, it immediately receives the current value if there is one"""
        self._observers.append(observer)
        if self.has_value:
            observer(self._value)

    def remove_observer(self, observer: Observer):
        if observer in self._observers:
            self._observers.remove(observer)

    def has_observers(self) -> bool:
        return bool(self._observers)


class SingleEvent(Generic[T]):
    """
    Fire-once event with a single consumer.

    Only one observer is held at a time; observing again replaces the previous one.
    An event emitted while nobody observes is kept and delivered once to the next observer.
    """

    def __init__(self, name: str = "event"):
        self.name = name
        self._observer: Optional[Observer] = None
        self._pending = False
        self._pending_value = None

    def observe(self, observer: Observer):
        if self._observer is not None and self._observer is not observer:
            logger.warning(f"Multiple observers registered for {self.name}, only the latest will be notified")
        self._observer = observer

        if self._pending:
            value = self._pending_value
            self._pending = False
            self._pending_value = None
            observer(value)

    def remove_observer(self, observer: Observer):
        if self._observer is observer:
            self._observer = None

    def has_observers(self) -> bool:
        return self._observer is not None

    def emit(self, value: Optional[T] = None):
        if self._observer is None:
            self._pending = True
            self._pending_value = value
            return
        self._observer(value)
