"""Exception hierarchy for the application shell collaborators.

The lifecycle shell itself raises nothing: failures inside ``do_execute()``,
``close()`` or a dispatcher propagate to the caller untouched. These types are
raised by the configuration layer only.
"""

from typing import Any, Dict, Optional


class ApplicationShellError(Exception):
    """Base class for errors raised by application_shell components."""

    def __init__(self, message: str, metadata: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}


class ConfigurationError(ApplicationShellError):
    """Configuration could not be loaded or failed validation."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, metadata)
        self.source = source

    def __str__(self) -> str:
        if self.source:
            return f"{self.message} (source: {self.source})"
        return self.message
