"""Infrastructure: load [tool.exstyle] or .exstyle.toml from disk."""

import logging
import tomllib
from pathlib import Path
from typing import Optional

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.errors import ConfigError

logger = logging.getLogger(__name__)

DEDICATED_CONFIG = ".exstyle.toml"
PYPROJECT = "pyproject.toml"
TOOL_SECTION = "exstyle"


class ConfigFileLoader:
    """
    Finds and validates the linter configuration.

    Search order, from the start directory up to the filesystem root: a
    dedicated .exstyle.toml wins over pyproject.toml in the same directory,
    and a pyproject.toml without a [tool.exstyle] table is skipped.
    """

    def __init__(self, start: Optional[Path] = None) -> None:
        self.start = start

    def load(self, explicit: Optional[str] = None) -> LinterConfig:
        """
        Load the configuration, or the defaults if no file is found.

        Raises:
            ConfigError: the file cannot be read, is not valid TOML or holds
                invalid settings.
        """
        if explicit is not None:
            path = Path(explicit)
            if not path.is_file():
                raise ConfigError(f"Configuration file not found: {explicit}")
            return self._from_file(path, required=True)

        current = (self.start or Path.cwd()).resolve()
        for directory in (current, *current.parents):
            dedicated = directory / DEDICATED_CONFIG
            if dedicated.is_file():
                return self._from_file(dedicated, required=True)
            pyproject = directory / PYPROJECT
            if pyproject.is_file():
                config = self._from_file(pyproject, required=False)
                if config is not None:
                    return config
        logger.debug("no configuration found from %s, using defaults", current)
        return LinterConfig()

    @staticmethod
    def _read(path: Path) -> dict[str, object]:
        try:
            with path.open("rb") as f:
                return tomllib.load(f)
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc

    def _from_file(self, path: Path, required: bool) -> Optional[LinterConfig]:
        data = self._read(path)
        if path.name == PYPROJECT:
            tool = data.get("tool", {}) or {}
            section = tool.get(TOOL_SECTION) if isinstance(tool, dict) else None
            if section is None:
                if required:
                    return LinterConfig(source=str(path))
                return None
            data = section
        if not isinstance(data, dict):
            raise ConfigError(f"[tool.{TOOL_SECTION}] in {path} must be a table.")
        logger.debug("loading configuration from %s", path)
        try:
            return LinterConfig.from_mapping(data, source=str(path))
        except ConfigError as exc:
            raise ConfigError(f"{path}: {exc}") from None
