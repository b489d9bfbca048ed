"""Application lifecycle shell: configuration, input, logging and events for front controllers."""

from .application import AbstractApplication, ApplicationHooks, HookedApplication
from .cli import CliApplication, main
from .errors import ApplicationShellError, ConfigurationError
from .events import (
    ApplicationEvent,
    ApplicationEvents,
    Dispatcher,
    Event,
    EventDispatcher,
)
from .input import Input
from .logging_config import NullLogger
from .registry import Registry

__all__ = [
    "AbstractApplication",
    "ApplicationHooks",
    "HookedApplication",
    "CliApplication",
    "main",
    "ApplicationShellError",
    "ConfigurationError",
    "ApplicationEvent",
    "ApplicationEvents",
    "Dispatcher",
    "Event",
    "EventDispatcher",
    "Input",
    "NullLogger",
    "Registry",
]
