"""
Hierarchical configuration store.

- Values live in nested dictionaries addressed by dotted key paths
  (``"execution.timestamp"``).
- Reads fall back to a caller-supplied default when a path is missing.
- ``set()`` returns the value it replaced, so callers can restore it later.
"""

import copy
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

_MISSING = object()


def _detached(value: Any) -> Any:
    """Copy containers so callers never share structure with the registry."""
    if isinstance(value, (dict, list)):
        return copy.deepcopy(value)
    return value


class Registry:
    """
    Dotted key-path registry backed by nested dictionaries.

    Reads and writes are serialized by a single re-entrant lock.
    """

    def __init__(
        self, data: Optional[Mapping[str, Any]] = None, separator: str = "."
    ):
        self.separator = separator
        self._data: Dict[str, Any] = {}
        self._lock = threading.RLock()
        if data is not None:
            self.load_dict(data)

    def _split(self, path: str) -> List[str]:
        return [segment for segment in str(path).split(self.separator) if segment]

    def _find(self, path: str) -> Any:
        segments = self._split(path)
        if not segments:
            return _MISSING
        node: Any = self._data
        for segment in segments:
            if not isinstance(node, dict) or segment not in node:
                return _MISSING
            node = node[segment]
        return node

    def get(self, path: str, default: Any = None) -> Any:
        """
        Return the value at ``path``, or ``default`` when it is not set.

        Containers are returned as copies; edit them through ``set()``.
        """
        with self._lock:
            value = self._find(path)
            if value is _MISSING:
                return default
            return _detached(value)

    def set(self, path: str, value: Any) -> Any:
        """
        Store a copy of ``value`` at ``path``, creating intermediate nodes as needed.

        Returns:
            The value previously stored at ``path``, or None if there was none.

        Raises:
            ValueError: If ``path`` has no segments.
        """
        segments = self._split(path)
        if not segments:
            raise ValueError(f"Configuration path {path!r} has no segments")

        value = _detached(value)
        with self._lock:
            node = self._data
            for segment in segments[:-1]:
                child = node.get(segment)
                if not isinstance(child, dict):
                    child = {}
                    node[segment] = child
                node = child
            previous = node.get(segments[-1])
            node[segments[-1]] = value
        return previous

    def define(self, path: str, default: Any) -> Any:
        """Set ``path`` to ``default`` unless it already holds a value."""
        with self._lock:
            value = self.get(path, default)
            self.set(path, value)
        return value

    def exists(self, path: str) -> bool:
        with self._lock:
            return self._find(path) is not _MISSING

    def remove(self, path: str) -> Any:
        """Delete ``path`` and return the removed value (None if absent)."""
        segments = self._split(path)
        if not segments:
            return None
        with self._lock:
            parent: Any = self._data
            if len(segments) > 1:
                parent = self._find(self.separator.join(segments[:-1]))
            if not isinstance(parent, dict):
                return None
            return parent.pop(segments[-1], None)

    def merge(
        self, source: Union["Registry", Mapping[str, Any]], recursive: bool = True
    ) -> "Registry":
        """Merge another registry or mapping into this one."""
        if isinstance(source, Registry):
            incoming = source.to_dict()
        else:
            incoming = copy.deepcopy(dict(source))
        with self._lock:
            self._merge_into(self._data, incoming, recursive)
        return self

    def _merge_into(
        self, target: Dict[str, Any], incoming: Mapping[str, Any], recursive: bool
    ) -> None:
        for key, value in incoming.items():
            existing = target.get(key)
            if recursive and isinstance(value, dict) and isinstance(existing, dict):
                self._merge_into(existing, value, recursive)
            else:
                target[key] = value

    def load_dict(self, data: Mapping[str, Any]) -> "Registry":
        """Load a (possibly nested) mapping, merging it recursively."""
        return self.merge(data, recursive=True)

    def load_file(self, path: Union[str, Path]) -> "Registry":
        """
        Load a JSON object from ``path`` into the registry.

        Raises:
            ConfigurationError: If the file cannot be read, is not valid JSON,
                or does not contain a JSON object.
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read configuration file: {e}", source=str(path)
            ) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}",
                source=str(path),
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration root must be an object, got {type(data).__name__}",
                source=str(path),
            )

        logger.debug(f"Loaded {len(data)} top-level configuration keys from {path}")
        return self.load_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def flatten(self) -> Dict[str, Any]:
        """Return every leaf value keyed by its full dotted path."""
        flat: Dict[str, Any] = {}

        def walk(node: Dict[str, Any], prefix: str) -> None:
            for key, value in node.items():
                full_key = f"{prefix}{self.separator}{key}" if prefix else key
                if isinstance(value, dict) and value:
                    walk(value, full_key)
                else:
                    flat[full_key] = value

        with self._lock:
            walk(self._data, "")
        return flat

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.exists(path)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._data))

    def __repr__(self) -> str:
        return f"<Registry keys={sorted(self._data)}>"
