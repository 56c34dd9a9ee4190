"""Console telemetry: progress and diagnostics on stderr, report on stdout."""

import logging

from rich.console import Console
from rich.markup import escape

from elixir_style_linter.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """
    Implements TelemetryPort with a rich Console bound to stderr.

    Steps only go to the logger, so they show up under --verbose. Warnings
    and errors are always printed.
    """

    def __init__(self, name: str = "exstyle", color: str = "cyan") -> None:
        self.name = name
        self.color = color
        self.console = Console(stderr=True, highlight=False)
        self.logger = logging.getLogger(f"elixir_style_linter.{name}")

    def step(self, message: str) -> None:
        self.logger.info(message)

    def error(self, message: str) -> None:
        self.logger.debug("error: %s", message)
        self.console.print(f"[bold red]{self.name}: error:[/] {escape(message)}")

    def warning(self, message: str) -> None:
        self.logger.debug("warning: %s", message)
        self.console.print(f"[{self.color}]{self.name}:[/] [yellow]warning:[/] {escape(message)}")
