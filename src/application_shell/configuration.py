"""Configuration loading and validation for application_shell programs.

Raw configuration lives in a ``Registry``; the pydantic models here validate
the parts the framework itself consumes (application name and logging).

Sources, lowest precedence first:
    - JSON configuration file (``load_configuration(path)``)
    - ``key=value`` overrides, e.g. from repeated ``--set`` options
    - for input data: ``.env`` file values, then process environment
      (``load_environment``)

Usage:
    >>> registry = load_configuration("app.json", overrides=["log.level=debug"])
    >>> settings = ApplicationSettings.from_registry(registry)
    >>> settings.log.level
    'DEBUG'
"""

import json
import logging
import os
from pathlib import Path
from typing import Iterable, Literal, Optional, Union

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .input import Input
from .registry import Registry

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseModel):
    """Logging section of the configuration (``log.*``)."""

    model_config = ConfigDict(extra="ignore")

    level: LogLevel = "WARNING"
    structured: bool = False

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class ApplicationSettings(BaseModel):
    """Framework-level settings read from a registry."""

    model_config = ConfigDict(extra="ignore")

    name: str = "application"
    log: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_registry(cls, registry: Registry) -> "ApplicationSettings":
        """
        Validate the framework settings held in ``registry``.

        Raises:
            ConfigurationError: If a value fails validation
        """
        try:
            return cls.model_validate(registry.to_dict())
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid configuration: {problems}",
                metadata={"errors": e.errors()},
            ) from e


def parse_override(override: str) -> tuple:
    """
    Split a ``key=value`` override.

    The value is decoded as JSON when possible (``port=8080`` gives an int,
    ``tags=["a"]`` a list) and kept as a plain string otherwise.
    """
    key, separator, raw_value = override.partition("=")
    key = key.strip()
    if not separator or not key:
        raise ConfigurationError(f"Override must look like key=value, got {override!r}")
    try:
        value = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    return key, value


def load_configuration(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Iterable[str]] = None,
) -> Registry:
    """Build a registry from an optional JSON file plus ``key=value`` overrides."""
    registry = Registry()
    if path is not None:
        registry.load_file(path)
        logger.info(f"Loaded configuration from {path}")

    for override in overrides or ():
        key, value = parse_override(override)
        try:
            registry.set(key, value)
        except ValueError as e:
            raise ConfigurationError(str(e), source=override) from e
        logger.debug(f"Configuration override {key}={value!r}", extra={"config_key": key})

    return registry


def load_environment(
    env_file: Optional[Union[str, Path]] = None, prefix: str = "APP_"
) -> Input:
    """
    Build the application input from a ``.env`` file and the environment.

    Variables already present in the process environment take precedence
    over values from ``env_file``.
    """
    environ = {}
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise ConfigurationError("Environment file not found", source=str(env_path))
        environ.update(
            {name: value for name, value in dotenv_values(env_path).items() if value is not None}
        )
        logger.info(f"Loaded environment variables from {env_path}")
    environ.update(os.environ)
    return Input.from_environ(prefix=prefix, environ=environ)
