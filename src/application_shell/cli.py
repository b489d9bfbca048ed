import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click

from .application import AbstractApplication
from .configuration import (
    ApplicationSettings,
    load_configuration,
    load_environment,
)
from .errors import ConfigurationError
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


class CliApplication(AbstractApplication):
    """Base class for command-line applications."""

    def out(self, text: str = "", newline: bool = True) -> "CliApplication":
        click.echo(text, nl=newline)
        return self

    def close(self, code: int = 0):
        self.get_logger().debug(
            f"Closing with exit code {code}", extra={"exit_code": code}
        )
        sys.exit(code)


class ShowConfigApplication(CliApplication):
    """Print the configuration, or the single value named by the ``key`` input."""

    def do_execute(self) -> None:
        key = self.input.get_str("key")
        if key:
            value = self.get(key)
        else:
            value = self.config.to_dict()
        self.out(json.dumps(value, indent=2, sort_keys=True, default=str))


@click.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON configuration file",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help=".env file providing APP_* input variables",
)
@click.option(
    "--set",
    "overrides",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value (repeatable)",
)
@click.option("--key", "-k", help="Print only the value at this dotted key")
@click.option("-v", "--verbose", count=True)
def main(
    config_path: Optional[Path],
    env_file: Optional[Path],
    overrides: Tuple[str, ...],
    key: Optional[str],
    verbose: int,
) -> None:
    """Show the resolved application configuration."""
    try:
        config = load_configuration(config_path, overrides)
        settings = ApplicationSettings.from_registry(config)
        app_input = load_environment(env_file)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    log_level = logging.getLevelName(settings.log.level)
    if verbose:
        # -v only ever adds detail on top of the configured level
        log_level = min(log_level, logging.INFO if verbose == 1 else logging.DEBUG)
    configure_logging(
        logging.getLevelName(log_level), structured=settings.log.structured
    )

    if key:
        app_input.set("key", key)

    app = ShowConfigApplication(app_input, config)
    app.set_logger(logging.getLogger(settings.name))
    app.execute()
    app.close(0)


if __name__ == "__main__":
    main()
