"""Read access to the data an application was invoked with."""

import os
from typing import Any, Dict, Mapping, Optional

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class Input:
    """
    Flat name -> value view over request or command-line data.

    The typed getters never raise: a value that cannot be converted yields
    the supplied default.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None):
        self._data: Dict[str, Any] = dict(data or {})

    @classmethod
    def from_environ(
        cls, prefix: str = "", environ: Optional[Mapping[str, str]] = None
    ) -> "Input":
        """
        Build an Input from environment variables.

        Only variables starting with ``prefix`` are kept; the prefix is
        stripped and the remaining name lowercased (``APP_DEBUG`` -> ``debug``).
        """
        source = os.environ if environ is None else environ
        data = {
            name[len(prefix):].lower(): value
            for name, value in source.items()
            if name.startswith(prefix) and len(name) > len(prefix)
        }
        return cls(data)

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def get_str(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self._data.get(name)
        if value is None:
            return default
        return str(value)

    def get_int(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = self._data.get(name)
        if value is None or isinstance(value, bool):
            return default
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    def get_float(
        self, name: str, default: Optional[float] = None
    ) -> Optional[float]:
        value = self._data.get(name)
        if value is None or isinstance(value, bool):
            return default
        try:
            return float(str(value).strip())
        except ValueError:
            return default

    def get_bool(self, name: str, default: Optional[bool] = None) -> Optional[bool]:
        value = self._data.get(name)
        if isinstance(value, bool):
            return value
        if value is None:
            return default
        normalized = str(value).strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        return default

    def set(self, name: str, value: Any) -> None:
        self._data[name] = value

    def exists(self, name: str) -> bool:
        return name in self._data

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<Input names={sorted(self._data)}>"
