import logging
import json
import sys

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class NullLogger(logging.Logger):
    """
    Logger that accepts every call and discards it.

    Instances are created directly rather than through ``logging.getLogger``
    so they never enter the logging manager's hierarchy. Children are
    discard loggers too.
    """

    def __init__(self, name: str = "null"):
        super().__init__(name, logging.CRITICAL + 1)
        self.propagate = False
        self.addHandler(logging.NullHandler())

    def isEnabledFor(self, level: int) -> bool:
        return False

    def handle(self, record: logging.LogRecord) -> None:
        pass

    def getChild(self, suffix: str) -> "NullLogger":
        return NullLogger(f"{self.name}.{suffix}")


class SafeStreamHandler(logging.StreamHandler):
    """Stream handler that drops records once its stream has been closed."""

    def emit(self, record):
        if getattr(self.stream, "closed", False):
            return
        super().emit(record)


class StructuredLogFormatter(logging.Formatter):
    """
    Formats log records as structured JSON with contextual fields.
    """

    CONTEXT_FIELDS = ("application", "event", "exit_code", "config_key")

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in self.CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_record[field] = value
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            log_record["exception"] = record.exc_text
        return json.dumps(log_record, ensure_ascii=False, default=str)


def build_stderr_handler(structured: bool = True) -> logging.Handler:
    """Handler writing to stderr, as JSON lines or plain text."""
    handler = SafeStreamHandler(sys.stderr)
    handler.setFormatter(
        StructuredLogFormatter() if structured else logging.Formatter(PLAIN_FORMAT)
    )
    return handler


def configure_logging(log_level: str = "INFO", structured: bool = True) -> None:
    """Route all logging through a single stderr handler at ``log_level``."""
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(build_stderr_handler(structured))
    root_logger.setLevel(log_level.upper())
