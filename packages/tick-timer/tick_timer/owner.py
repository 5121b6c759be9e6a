"""Owner lifecycle hooks for group cancellation."""
from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

TeardownListener = Callable[[], None]


@runtime_checkable
class TeardownNotifier(Protocol):
    """Capability of an owner whose lifetime can end.

    The scheduler registers one listener per owner, the first time a timer
    is bound to it. The owner must call each listener once when it is torn
    down; the scheduler then cancels every timer bound to that owner.
    """

    def add_teardown_listener(self, listener: TeardownListener) -> None:
        ...


class LifecycleOwner:
    """Minimal TeardownNotifier for hosts without their own object model.

    ``teardown()`` fires each listener exactly once. Listeners added after
    teardown fire immediately.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._listeners: list[TeardownListener] = []
        self._torn_down = False

    def __repr__(self) -> str:
        return f"LifecycleOwner({self.name!r})"

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    def add_teardown_listener(self, listener: TeardownListener) -> None:
        if self._torn_down:
            listener()
            return
        self._listeners.append(listener)

    def teardown(self) -> None:
        if self._torn_down:
            return
        self._torn_down = True
        listeners = self._listeners
        self._listeners = []
        for listener in listeners:
            listener()
