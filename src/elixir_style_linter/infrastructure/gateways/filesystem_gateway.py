"""Infrastructure: file system access."""

import fnmatch
import os
from pathlib import Path

from elixir_style_linter.domain.protocols import FileSystemProtocol

SOURCE_SUFFIXES = (".ex", ".exs")
SKIPPED_DIRECTORIES = frozenset({"_build", "deps", "node_modules"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def exists(self, path: str) -> bool:
        """Check if path exists."""
        return Path(path).exists()

    def collect_source_files(self, paths: list[str], exclude: tuple[str, ...] = ()) -> list[str]:
        """
        Expand paths into Elixir sources.

        Files named explicitly are always kept. Directories are walked for
        .ex and .exs files, skipping hidden and build directories; exclude
        patterns are matched against the path relative to the walked root.
        """
        found: set[str] = set()
        for path in paths:
            root = Path(path)
            if root.is_file():
                found.add(str(root))
                continue
            for directory, subdirs, filenames in os.walk(root):
                subdirs[:] = sorted(
                    d for d in subdirs if not d.startswith(".") and d not in SKIPPED_DIRECTORIES
                )
                for name in filenames:
                    if not name.endswith(SOURCE_SUFFIXES):
                        continue
                    candidate = Path(directory) / name
                    relative = candidate.relative_to(root).as_posix()
                    if self._excluded(relative, exclude):
                        continue
                    found.add(str(candidate))
        return sorted(found)

    @staticmethod
    def _excluded(relative: str, exclude: tuple[str, ...]) -> bool:
        return any(fnmatch.fnmatchcase(relative, pattern) for pattern in exclude)

    def read_text(self, path: str) -> str:
        """Read a UTF-8 file without newline translation."""
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()
