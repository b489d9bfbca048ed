"""
Lifecycle events and the dispatcher contract used by applications.

Defines the event names an application fires, the event objects passed to
listeners, the ``Dispatcher`` protocol the application depends on, and
``EventDispatcher``, a synchronous priority-ordered implementation.
"""

import logging
import time
from abc import abstractmethod
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    runtime_checkable,
)

if TYPE_CHECKING:
    from .application import AbstractApplication

logger = logging.getLogger(__name__)


class ApplicationEvents:
    """Names of the events fired around ``execute()``."""

    BEFORE_EXECUTE = "before-execute"
    AFTER_EXECUTE = "after-execute"


class Event:
    """
    Named event passed to listeners.

    A listener may call ``stop_propagation()`` to keep lower-priority
    listeners from seeing the event.
    """

    def __init__(self, name: str, arguments: Optional[Dict[str, Any]] = None):
        self.name = name
        self.arguments: Dict[str, Any] = dict(arguments or {})
        self.timestamp = time.time()
        self._stopped = False

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    def stop_propagation(self) -> None:
        self._stopped = True

    def get_argument(self, name: str, default: Any = None) -> Any:
        return self.arguments.get(name, default)

    def set_argument(self, name: str, value: Any) -> "Event":
        self.arguments[name] = value
        return self

    def __repr__(self):
        return f"<{type(self).__name__} name={self.name} stopped={self._stopped}>"


class ApplicationEvent(Event):
    """Event fired by an application about its own lifecycle."""

    def __init__(
        self,
        name: str,
        application: "AbstractApplication",
        arguments: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(name, arguments)
        self.application = application


Listener = Callable[[Event], None]


@runtime_checkable
class Dispatcher(Protocol):
    """Protocol for objects an application can fire events through."""

    @abstractmethod
    def dispatch(self, name: str, event: Optional[Event] = None) -> Event:
        """
        Deliver ``event`` to every listener registered for ``name``.

        Args:
            name: Event name, e.g. ``ApplicationEvents.BEFORE_EXECUTE``
            event: Event object; a plain ``Event(name)`` is used when omitted

        Returns:
            The event after all listeners ran
        """
        ...


@dataclass
class ListenerEntry:
    """Listener registration"""

    listener: Listener
    priority: int
    order: int


class EventDispatcher:
    """
    Synchronous event dispatcher.

    Listeners for a name run highest priority first, registration order
    breaking ties. Exceptions raised by a listener propagate to the caller
    of ``dispatch()`` and stop delivery.

    Example:
        dispatcher = EventDispatcher()
        dispatcher.add_listener(ApplicationEvents.BEFORE_EXECUTE, on_start, priority=10)
        app.set_dispatcher(dispatcher)
        app.execute()
    """

    def __init__(self):
        self._listeners: Dict[str, List[ListenerEntry]] = {}
        self._registrations = 0

    def add_listener(self, name: str, listener: Listener, priority: int = 0) -> None:
        self._registrations += 1
        entries = self._listeners.setdefault(name, [])
        entries.append(ListenerEntry(listener, priority, self._registrations))
        entries.sort(key=lambda entry: (-entry.priority, entry.order))
        logger.debug(
            f"Listener {getattr(listener, '__name__', listener)!r} added for "
            f"{name} (priority={priority})"
        )

    def remove_listener(self, name: str, listener: Listener) -> bool:
        """Remove ``listener`` from ``name``; returns False if it was not registered."""
        entries = self._listeners.get(name, [])
        remaining = [entry for entry in entries if entry.listener != listener]
        if len(remaining) == len(entries):
            return False
        if remaining:
            self._listeners[name] = remaining
        else:
            del self._listeners[name]
        return True

    def get_listeners(self, name: str) -> List[Listener]:
        return [entry.listener for entry in self._listeners.get(name, [])]

    def has_listeners(self, name: str) -> bool:
        return bool(self._listeners.get(name))

    def dispatch(self, name: str, event: Optional[Event] = None) -> Event:
        if event is None:
            event = Event(name)

        for entry in list(self._listeners.get(name, [])):
            if event.is_stopped:
                logger.debug(f"Propagation of {name} stopped")
                break
            entry.listener(event)

        return event
