"""Unit tests for ProjectTelemetry."""
import io
from unittest.mock import MagicMock

from rich.console import Console

from elixir_style_linter.interface.telemetry import ProjectTelemetry


def test_step_only_logs():
    tel = ProjectTelemetry("exstyle", "cyan")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.step("Checking 3 file(s)")
    tel.logger.info.assert_called_once_with("Checking 3 file(s)")
    tel.console.print.assert_not_called()


def test_error_prints_with_prefix():
    tel = ProjectTelemetry("exstyle", "cyan")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.error("Failed")
    printed = tel.console.print.call_args[0][0]
    assert "exstyle: error:" in printed
    assert printed.endswith("Failed")


def test_warning_prints_and_logs():
    tel = ProjectTelemetry("exstyle", "cyan")
    tel.console = MagicMock()
    tel.logger = MagicMock()
    tel.warning("Careful")
    tel.console.print.assert_called_once()
    tel.logger.debug.assert_called_once_with("warning: %s", "Careful")


def _recording_telemetry():
    tel = ProjectTelemetry("exstyle", "cyan")
    tel.console = Console(file=io.StringIO(), width=200, color_system=None, highlight=False)
    tel.logger = MagicMock()
    return tel


def test_error_keeps_bracketed_text_literal():
    tel = _recording_telemetry()
    tel.error("[tool.exstyle] in /p/pyproject.toml must be a table.")
    assert "exstyle: error: [tool.exstyle] in /p/pyproject.toml must be a table." in tel.console.file.getvalue()


def test_warning_with_closing_tag_in_path_does_not_raise():
    tel = _recording_telemetry()
    tel.warning("Could not write fixes to lib/[/]odd.ex: denied")
    assert "lib/[/]odd.ex" in tel.console.file.getvalue()
