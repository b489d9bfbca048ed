"""Tests for the command-line application and entry point."""

import json
import logging
from unittest.mock import MagicMock

import pytest
from click.testing import CliRunner

from application_shell import ApplicationEvents, EventDispatcher, Input, Registry
from application_shell.cli import ShowConfigApplication, main
from fixtures.applications import EchoCliApplication


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCliApplication:
    """Test CliApplication behavior."""

    def test_close_exits_with_code(self):
        app = EchoCliApplication()

        with pytest.raises(SystemExit) as exc_info:
            app.close(3)

        assert exc_info.value.code == 3

    def test_close_logs_exit_code(self):
        app = EchoCliApplication()
        logger = MagicMock()
        app.set_logger(logger)

        with pytest.raises(SystemExit):
            app.close()

        logger.debug.assert_called_once()
        assert logger.debug.call_args.kwargs["extra"] == {"exit_code": 0}

    def test_out(self, capsys):
        app = EchoCliApplication(Input({"message": "hello"}))

        app.execute()
        app.out("same line", newline=False)

        assert capsys.readouterr().out == "hello\nsame line"

    def test_lifecycle_events(self, capsys):
        dispatcher = EventDispatcher()
        seen = []
        dispatcher.add_listener(ApplicationEvents.BEFORE_EXECUTE, lambda e: seen.append(e.name))
        dispatcher.add_listener(ApplicationEvents.AFTER_EXECUTE, lambda e: seen.append(e.name))
        app = EchoCliApplication()
        app.set_dispatcher(dispatcher)

        app.execute()

        assert seen == ["before-execute", "after-execute"]
        assert capsys.readouterr().out == "nothing to say\n"

    def test_show_config_single_key(self, capsys):
        app = ShowConfigApplication(
            Input({"key": "database.port"}), Registry({"database": {"port": 5432}})
        )

        app.execute()

        assert json.loads(capsys.readouterr().out) == 5432


class TestMain:
    """Test the click entry point."""

    def test_prints_configuration(self, runner, tmp_path, isolated_root_logger):
        config_file = tmp_path / "app.json"
        config_file.write_text(json.dumps({"name": "demo", "database": {"host": "db"}}))

        result = runner.invoke(main, ["--config", str(config_file)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["name"] == "demo"
        assert data["database"] == {"host": "db"}
        assert set(data["execution"]) == {"datetime", "timestamp", "microtimestamp"}

    def test_key_and_overrides(self, runner, isolated_root_logger):
        result = runner.invoke(
            main, ["--set", "server.port=8080", "--set", "server.host=example", "--key", "server"]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"host": "example", "port": 8080}

    def test_missing_key_prints_null(self, runner, isolated_root_logger):
        result = runner.invoke(main, ["-k", "does.not.exist"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) is None

    def test_invalid_configuration_fails(self, runner, tmp_path, isolated_root_logger):
        config_file = tmp_path / "app.json"
        config_file.write_text(json.dumps({"log": {"level": "LOUD"}}))

        result = runner.invoke(main, ["--config", str(config_file)])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output

    def test_malformed_override_fails(self, runner, isolated_root_logger):
        result = runner.invoke(main, ["--set", "oops"])

        assert result.exit_code == 1
        assert "key=value" in result.output

    def test_verbose_sets_log_level(self, runner, isolated_root_logger):
        result = runner.invoke(main, ["-vv", "--key", "name"])

        assert result.exit_code == 0
        assert isolated_root_logger.level == logging.DEBUG

    def test_verbose_never_lowers_configured_detail(self, runner, tmp_path, isolated_root_logger):
        config_file = tmp_path / "app.json"
        config_file.write_text(json.dumps({"log": {"level": "DEBUG"}}))

        result = runner.invoke(main, ["-c", str(config_file), "-v", "-k", "name"])

        assert result.exit_code == 0
        assert isolated_root_logger.level == logging.DEBUG

    def test_single_verbose_raises_warning_to_info(self, runner, isolated_root_logger):
        result = runner.invoke(main, ["-v", "-k", "name"])

        assert result.exit_code == 0
        assert isolated_root_logger.level == logging.INFO

    def test_override_without_path_segments_fails(self, runner, isolated_root_logger):
        result = runner.invoke(main, ["--set", ".=1"])

        assert result.exit_code == 1
        assert "no segments" in result.output
