from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    import threading

    from elixir_style_linter.domain.entities import FileReport, RunSummary, Token


class TokenizerProtocol(Protocol):
    """Turns source text into a lossless token sequence."""

    def parse(self, text: str) -> list["Token"]:
        """Raises UnterminatedLiteralError carrying the tokens scanned so far."""
        ...


class TelemetryPort(Protocol):
    """Protocol for telemetry/UI updates."""

    def step(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...
    def warning(self, message: str) -> None: ...


class FileSystemProtocol(Protocol):
    """Protocol for filesystem operations - abstracts Path usage."""

    def exists(self, path: str) -> bool:
        """Check if path exists."""
        ...

    def collect_source_files(self, paths: list[str], exclude: tuple[str, ...]) -> list[str]:
        """Expand files and directories into a sorted list of Elixir sources."""
        ...

    def read_text(self, path: str) -> str:
        """Read a UTF-8 file without newline translation."""
        ...


class FixWriterProtocol(Protocol):
    """Writes fixed sources back without ever leaving a partial file behind."""

    def write(self, path: str, content: str, cancel: Optional["threading.Event"] = None) -> bool:
        """Return True if the file was replaced, False if the write was abandoned."""
        ...


class ReporterProtocol(Protocol):
    """Formats file reports for output."""

    def render(self, reports: list["FileReport"], summary: "RunSummary") -> str:
        """Render every report followed by the run summary."""
        ...
