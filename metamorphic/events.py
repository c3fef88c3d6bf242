"""Event types, a type-keyed dispatcher and helpers for cross-thread delivery."""

from __future__ import annotations

import threading
from enum import IntEnum
from typing import Callable, Dict, List, Type, Union

from metamorphic.memory import BaseQueue


class EventType(IntEnum):
    NONE = 0
    APPLICATION_EXIT = 1
    WINDOW_MOVED_EVENT = 2
    WINDOW_RESIZED_EVENT = 3
    MOUSE_MOVED_EVENT = 4
    MOUSE_BUTTON_DOWN = 5
    MOUSE_BUTTON_UP = 6
    LOADED_RESOURCE_MANAGER = 7
    CONNECTED_TO_SERVER = 8
    FAILED_TO_SERVER = 9
    DISCONNECTED_FROM_SERVER = 10
    PACKET_RECEIVED_EVENT = 11


class Event:
    """Base event; subclasses set ``event_type``."""

    event_type: EventType = EventType.NONE


class ApplicationExitEvent(Event):
    """Raised when the application is asked to exit."""

    event_type = EventType.APPLICATION_EXIT


EventCallback = Callable[[Event], None]


class EventDispatcher:
    """Holds one callback per event type and routes events to it."""

    def __init__(self) -> None:
        self._callbacks: Dict[EventType, EventCallback] = {}

    def dispatch(self, event: Event) -> bool:
        """Deliver ``event`` to the callback for its type; return whether one ran."""
        return self.dispatch_type(event.event_type, event)

    def dispatch_type(self, event_type: Union[EventType, int], event: Event) -> bool:
        """Deliver ``event`` to the callback registered for ``event_type``."""
        callback = self._callbacks.get(EventType(event_type))
        if callback is None:
            return False
        callback(event)
        return True

    def add_dispatcher(self, event_class: Type[Event], callback: EventCallback) -> None:
        """Register ``callback`` for ``event_class``, replacing any earlier one."""
        self._callbacks[event_class.event_type] = callback


class ThreadEventHandler:
    """Queues callables from any thread and runs them on the handling thread."""

    def __init__(self) -> None:
        self._events: List[Callable[[], None]] = []
        self._lock = threading.Lock()

    def add_event(self, event: Callable[[], None]) -> None:
        """Queue ``event`` to be run by the next ``handle_events`` call."""
        with self._lock:
            self._events.append(event)

    def handle_events(self) -> int:
        """Run every queued callable in order; return how many ran."""
        with self._lock:
            pending, self._events = self._events, []
        for event in pending:
            event()
        return len(pending)


class ThreadEventRelay:
    """Collects events from any thread and dispatches them in FIFO order."""

    def __init__(self, dispatcher: EventDispatcher) -> None:
        self.dispatcher = dispatcher
        self._queue: BaseQueue = BaseQueue(Event)
        self._lock = threading.Lock()

    def dispatch(self, event: Event) -> None:
        """Queue ``event``; it must derive from :class:`Event`."""
        if not isinstance(event, Event):
            raise TypeError("ThreadEventRelay may not dispatch an event that is not derived from Event")
        with self._lock:
            self._queue.push(event)

    def handle_events(self) -> int:
        """Dispatch all queued events; return how many were dispatched."""
        with self._lock:
            pending, self._queue = self._queue, BaseQueue(Event)
        count = 0
        while len(pending):
            event = pending.pop()
            self.dispatcher.dispatch_type(event.event_type, event)
            count += 1
        return count