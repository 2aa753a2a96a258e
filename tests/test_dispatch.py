"""Tests for command routing and chained execution."""

from unittest.mock import MagicMock, patch

import pytest

from idfcli import dispatch
from idfcli.chain import KNOWN_COMMANDS, CommandSequence, ParsedCommand, SharedOptions
from idfcli.errors import ExternalToolFailure, MissingRequiredArgument, ProjectError, UnrecognizedCommand


def _sequence(*names, dropped=None):
    return CommandSequence(
        shared_options=SharedOptions(),
        commands=[ParsedCommand(n) for n in names],
        dropped_options=dropped or [],
    )


class TestHandlers:
    def test_every_known_command_has_handler(self):
        assert set(dispatch.HANDLERS) == set(KNOWN_COMMANDS)

    def test_all_is_build(self):
        assert dispatch.HANDLERS["all"] is dispatch.HANDLERS["build"]


class TestExecuteCommand:
    def test_routes_with_args(self):
        handler = MagicMock()
        opts = SharedOptions()
        with patch.dict(dispatch.HANDLERS, {"build": handler}):
            dispatch.execute_command(opts, ParsedCommand("build", ["-k", "0"]))
        handler.assert_called_once_with(opts, ["-k", "0"])

    def test_unknown_command(self):
        with pytest.raises(UnrecognizedCommand):
            dispatch.execute_command(SharedOptions(), ParsedCommand("install-alias"))

    def test_set_target_requires_argument(self):
        with pytest.raises(MissingRequiredArgument):
            dispatch.execute_command(SharedOptions(), ParsedCommand("set-target"))

    def test_create_project_requires_argument(self):
        with pytest.raises(MissingRequiredArgument):
            dispatch.execute_command(SharedOptions(), ParsedCommand("create-project"))

    @patch("idfcli.dispatch.config.execute_set_target")
    def test_set_target_uses_first_arg(self, mock_set):
        opts = SharedOptions()
        dispatch.execute_command(opts, ParsedCommand("set-target", ["esp32s3", "extra"]))
        mock_set.assert_called_once_with(opts, "esp32s3")

    @patch("idfcli.dispatch.project.create_project")
    def test_create_project_uses_first_arg(self, mock_create):
        opts = SharedOptions()
        dispatch.execute_command(opts, ParsedCommand("create-project", ["blink"]))
        mock_create.assert_called_once_with(opts, "blink")


class TestExecuteSequence:
    def test_runs_in_order(self, capsys):
        calls = []
        handlers = {
            "build": lambda opts, args: calls.append("build"),
            "flash": lambda opts, args: calls.append("flash"),
            "monitor": lambda opts, args: calls.append("monitor"),
        }
        with patch.dict(dispatch.HANDLERS, handlers):
            dispatch.execute_sequence(_sequence("build", "flash", "monitor"))
        assert calls == ["build", "flash", "monitor"]
        out = capsys.readouterr().out
        assert "Executing 3 commands in sequence..." in out
        assert "[2/3] Executing command: flash" in out
        assert "All commands completed successfully!" in out

    def test_stops_at_first_failure(self, capsys):
        calls = []

        def failing_flash(opts, args):
            calls.append("flash")
            raise ExternalToolFailure("Command failed with exit code: 2", returncode=2)

        handlers = {
            "build": lambda opts, args: calls.append("build"),
            "flash": failing_flash,
            "monitor": lambda opts, args: calls.append("monitor"),
        }
        with patch.dict(dispatch.HANDLERS, handlers):
            with pytest.raises(ExternalToolFailure) as exc_info:
                dispatch.execute_sequence(_sequence("build", "flash", "monitor"))

        assert calls == ["build", "flash"]
        assert exc_info.value.sequence_index == 2
        captured = capsys.readouterr()
        assert "[2/3] Command 'flash' failed" in captured.err
        assert "All commands completed" not in captured.out

    def test_shared_options_passed_to_each_command(self):
        seen = []
        seq = _sequence("build", "size")
        seq.shared_options.verbose = True
        handlers = {
            "build": lambda opts, args: seen.append(opts),
            "size": lambda opts, args: seen.append(opts),
        }
        with patch.dict(dispatch.HANDLERS, handlers):
            dispatch.execute_sequence(seq)
        assert all(o is seq.shared_options for o in seen)

    def test_warns_about_dropped_options(self, capsys):
        with patch.dict(dispatch.HANDLERS, {"build": lambda o, a: None, "flash": lambda o, a: None}):
            dispatch.execute_sequence(_sequence("build", "flash", dropped=["-p", "-b"]))
        err = capsys.readouterr().err
        assert "option '-p' is ignored" in err
        assert "option '-b' is ignored" in err

    def test_missing_argument_in_chain(self):
        with patch.dict(dispatch.HANDLERS, {"build": lambda o, a: None}):
            with pytest.raises(MissingRequiredArgument) as exc_info:
                dispatch.execute_sequence(_sequence("set-target", "build"))
        assert exc_info.value.sequence_index == 1

    def test_os_error_reported_as_failed_step(self, capsys):
        def broken(opts, args):
            raise IsADirectoryError(21, "Is a directory", "sdkconfig")

        second = MagicMock()
        with patch.dict(dispatch.HANDLERS, {"set-target": broken, "size": second}):
            with pytest.raises(ProjectError) as exc_info:
                dispatch.execute_sequence(_sequence("set-target", "size"))

        second.assert_not_called()
        assert exc_info.value.sequence_index == 1
        assert isinstance(exc_info.value.__cause__, IsADirectoryError)
        assert "[1/2] Command 'set-target' failed: set-target:" in capsys.readouterr().err
