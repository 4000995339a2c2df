"""
Tests for the TCPTunnel command-line entry point.
"""

import io

from rich.console import Console

from tunnel.args import parse_args
from tunnel.cli import main
from tunnel.display import Display
from tunnel.params import Params


class TestMain:
    """Tests for main()."""

    def test_help_exits_zero(self, capsys):
        assert main(["--help"]) == 0

        out = capsys.readouterr().out
        assert "Usage: tcptunnel [options] <sourceport> <remotehost> <remoteport>" in out

    def test_no_arguments_shows_help(self, capsys):
        assert main([]) == 0
        assert "Usage: tcptunnel" in capsys.readouterr().out

    def test_errors_exit_one(self, capsys):
        """Test every error line is printed to stderr."""
        assert main(["--buffersize", "0", "8080", "host"]) == 1

        err = capsys.readouterr().err
        assert "Buffer size has to be > 0, was: 0." in err
        assert "Too few arguments. Need 3, got 2: ['8080', 'host']." in err

    def test_valid_prints_configuration(self, capsys):
        assert main(["--logger", "console-bytes", "8080", "example.com", "80"]) == 0

        out = capsys.readouterr().out
        assert "example.com:80" in out
        assert "console-bytes" in out

    def test_uses_sys_argv(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.argv", ["tcptunnel", "--help"])

        assert main() == 0
        assert "Usage: tcptunnel" in capsys.readouterr().out


class TestDisplay:
    """Tests for the Display helpers."""

    def _display(self):
        output = io.StringIO()
        return Display(console=Console(file=output, color_system=None, width=200)), output

    def test_print_errors_one_per_line(self):
        display, output = self._display()
        display.print_errors("Invalid option '--[x]'.\nUnknown logger type: 'bogus'.")

        assert output.getvalue().splitlines() == [
            "Error: Invalid option '--[x]'.",
            "Error: Unknown logger type: 'bogus'.",
        ]

    def test_print_help_verbatim(self):
        display, output = self._display()
        display.print_help("Usage: [options] <a>")

        assert output.getvalue() == "Usage: [options] <a>\n"

    def test_banner(self):
        display, output = self._display()
        params = Params(source_port=8080, remote_host="host", remote_port=80)
        params.enable_string_console_logger()

        display.print_banner(params)

        text = output.getvalue()
        assert "localhost:8080 -> host:80" in text
        assert "console-string" in text
        assert "UTF-8" in text


class TestLoggerCleanup:
    """Tests that main() releases logger files."""

    def _capture_params(self, monkeypatch):
        captured = []

        def recording_parse(argv, display=None):
            params = parse_args(argv, display)
            captured.append(params)
            return params

        monkeypatch.setattr("tunnel.cli.parse_args", recording_parse)
        return captured

    def test_files_closed_after_success(self, monkeypatch, tmp_path, capsys):
        captured = self._capture_params(monkeypatch)

        assert main([
            "--logger", "file-bytes",
            "--down", str(tmp_path / "d"),
            "--up", str(tmp_path / "u"),
            "80", "host", "80",
        ]) == 0

        logger = captured[0].loggers[0]
        assert logger._down_file is None
        assert logger._up_file is None

    def test_files_closed_after_errors(self, monkeypatch, tmp_path, capsys):
        captured = self._capture_params(monkeypatch)

        assert main([
            "--logger", "file-string",
            "--down", str(tmp_path / "d"),
            "--up", str(tmp_path / "u"),
            "80", "host", "abc",
        ]) == 1

        logger = captured[0].loggers[0]
        assert logger._down_file is None
        assert logger._up_file is None
