from typing import TYPE_CHECKING, Any, Optional, cast

from elixir_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from elixir_style_linter.infrastructure.gateways.atomic_file_writer import AtomicFileWriter
from elixir_style_linter.infrastructure.gateways.elixir_tokenizer import ElixirTokenizer
from elixir_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from elixir_style_linter.infrastructure.reporters import RuleCatalogRenderer
from elixir_style_linter.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from elixir_style_linter.domain.protocols import (
        FileSystemProtocol,
        FixWriterProtocol,
        TelemetryPort,
        TokenizerProtocol,
    )


class LinterContainer:
    """Dependency Injection Container for the style linter."""

    _instance: Optional["LinterContainer"] = None

    def __init__(self) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults()

    @classmethod
    def get_instance(cls) -> "LinterContainer":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def _register_defaults(self) -> None:
        """Register default implementations for protocols."""
        self.register_singleton("ConfigFileLoader", ConfigFileLoader())
        self.register_singleton("TelemetryPort", ProjectTelemetry("exstyle", "cyan"))
        self.register_singleton("ElixirTokenizer", ElixirTokenizer())
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("AtomicFileWriter", AtomicFileWriter())
        self.register_singleton("RuleCatalogRenderer", RuleCatalogRenderer())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigFileLoader:
        return cast(ConfigFileLoader, self.get("ConfigFileLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        """Return the telemetry/UI port."""
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_tokenizer(self) -> "TokenizerProtocol":
        return cast("TokenizerProtocol", self.get("ElixirTokenizer"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_fix_writer(self) -> "FixWriterProtocol":
        return cast("FixWriterProtocol", self.get("AtomicFileWriter"))

    def get_catalog_renderer(self) -> RuleCatalogRenderer:
        return cast(RuleCatalogRenderer, self.get("RuleCatalogRenderer"))
