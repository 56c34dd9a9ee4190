"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from elixir_style_linter.infrastructure.di.container import LinterContainer
from elixir_style_linter.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = LinterContainer.get_instance()
    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        tokenizer=container.get_tokenizer(),
        filesystem=container.get_filesystem_gateway(),
        fix_writer=container.get_fix_writer(),
        catalog_renderer=container.get_catalog_renderer(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
