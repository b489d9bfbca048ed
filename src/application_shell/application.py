"""
Application lifecycle shell.

- Holds the input accessor, configuration registry, logger and optional
  event dispatcher shared by every concrete application.
- ``execute()`` fires the lifecycle events around the ``do_execute()`` hook.
- Failures raised by hooks or by the dispatcher propagate unchanged.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Union

from .events import ApplicationEvent, ApplicationEvents, Dispatcher, Event
from .input import Input
from .logging_config import NullLogger
from .registry import Registry

LoggerLike = Union[logging.Logger, logging.LoggerAdapter]


class AbstractApplication(ABC):
    """
    Base class for applications.

    Subclasses supply ``do_execute()`` and ``close()``; callers run the
    application through ``execute()``.
    """

    def __init__(
        self, input: Optional[Input] = None, config: Optional[Registry] = None
    ):
        self._input = input if input is not None else Input()
        self._config = config if config is not None else Registry()
        self._logger: LoggerLike = NullLogger()
        self._dispatcher: Optional[Dispatcher] = None

        # One clock reading so all three values describe the same instant
        started = time.time()
        started_at = datetime.fromtimestamp(started, timezone.utc)
        self._define("execution.datetime", started_at.isoformat())
        self._define("execution.timestamp", int(started))
        self._define("execution.microtimestamp", started)

        self.initialise()

    def _define(self, key: str, value: Any) -> None:
        self.set(key, self.get(key, value))

    def initialise(self) -> None:
        """Hook run at the end of construction; does nothing by default."""

    @property
    def input(self) -> Input:
        return self._input

    @property
    def config(self) -> Registry:
        return self._config

    @abstractmethod
    def do_execute(self) -> None:
        """Do the application's work."""

    @abstractmethod
    def close(self, code: int = 0):
        """Terminate the running process with exit status ``code``."""

    def execute(self) -> None:
        """Run the application, firing the lifecycle events around ``do_execute()``."""
        self.dispatch_event(ApplicationEvents.BEFORE_EXECUTE)
        self.do_execute()
        self.dispatch_event(ApplicationEvents.AFTER_EXECUTE)

    def dispatch_event(
        self, name: str, event: Optional[Event] = None
    ) -> Optional[Event]:
        """
        Dispatch ``name`` through the attached dispatcher.

        Returns:
            The dispatched event, or None when no dispatcher is attached
        """
        if self._dispatcher is None:
            return None
        if event is None:
            event = ApplicationEvent(name, self)
        self._logger.debug(
            f"Dispatching {name}",
            extra={"event": name, "application": type(self).__name__},
        )
        return self._dispatcher.dispatch(name, event)

    def get(self, key: str, default: Any = None) -> Any:
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> Any:
        """Store ``value`` under ``key`` and return the value it replaced."""
        return self._config.set(key, value)

    def set_configuration(self, config: Registry) -> "AbstractApplication":
        self._config = config
        return self

    def get_logger(self) -> LoggerLike:
        return self._logger

    def set_logger(self, logger: LoggerLike) -> "AbstractApplication":
        self._logger = logger
        return self

    def has_logger(self) -> bool:
        return not isinstance(self._logger, NullLogger)

    def get_dispatcher(self) -> Optional[Dispatcher]:
        return self._dispatcher

    def set_dispatcher(
        self, dispatcher: Optional[Dispatcher]
    ) -> "AbstractApplication":
        self._dispatcher = dispatcher
        return self


class ApplicationHooks(Protocol):
    """The two operations a concrete application has to provide."""

    def do_execute(self) -> None:
        ...

    def close(self, code: int = 0):
        ...


class HookedApplication(AbstractApplication):
    """
    Application whose hooks are delegated to a separate object.

    Lets callers supply behavior by composition instead of subclassing:

        app = HookedApplication(MyHooks(), config=Registry({"name": "demo"}))
        app.execute()
    """

    def __init__(
        self,
        hooks: ApplicationHooks,
        input: Optional[Input] = None,
        config: Optional[Registry] = None,
    ):
        self.hooks = hooks
        super().__init__(input, config)

    def do_execute(self) -> None:
        self.hooks.do_execute()

    def close(self, code: int = 0):
        return self.hooks.close(code)
