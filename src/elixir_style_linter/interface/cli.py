"""CLI entry points for exstyle - Thin Controller using Typer."""

import logging
import sys
import threading
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as package_version
from pathlib import Path
from typing import Optional

import typer

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import RunSummary
from elixir_style_linter.domain.errors import RegistryError, UsageError
from elixir_style_linter.domain.protocols import (
    FileSystemProtocol,
    FixWriterProtocol,
    TelemetryPort,
    TokenizerProtocol,
)
from elixir_style_linter.domain.rules import build_default_registry, rule_catalog
from elixir_style_linter.infrastructure.config_file_loader import ConfigFileLoader
from elixir_style_linter.infrastructure.reporters import RuleCatalogRenderer, reporter_for
from elixir_style_linter.use_cases.check_files import CheckFilesUseCase

EXIT_OK = 0
EXIT_USAGE = 2


@dataclass(frozen=True)
class CLIDependencies:
    """Explicit dependencies for the CLI. All dependencies injected at composition root."""

    config_loader: ConfigFileLoader
    telemetry: TelemetryPort
    tokenizer: TokenizerProtocol
    filesystem: FileSystemProtocol
    fix_writer: FixWriterProtocol
    catalog_renderer: RuleCatalogRenderer


class CLIAppFactory:
    """Creates the Typer app."""

    @staticmethod
    def configure_logging(verbose: bool) -> None:
        level = logging.DEBUG if verbose else logging.WARNING
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    @staticmethod
    def create_app(deps: CLIDependencies) -> typer.Typer:
        """Create the Typer app with explicitly injected dependencies."""
        app = typer.Typer(
            name="exstyle",
            help="exstyle: check Elixir sources against the community style guide.",
            add_completion=False,
            no_args_is_help=True,
        )

        def _version(value: bool) -> None:
            if value:
                try:
                    current = package_version("elixir-style-linter")
                except PackageNotFoundError:
                    current = "unknown"
                typer.echo(f"exstyle {current}")
                raise typer.Exit()

        @app.callback()
        def main(
            version: bool = typer.Option(
                False, "--version", callback=_version, is_eager=True, help="Show the version and exit."
            ),
        ) -> None:
            """Check Elixir sources against the community style guide."""

        def _load_config(config_path: Optional[Path]) -> LinterConfig:
            try:
                return deps.config_loader.load(str(config_path) if config_path else None)
            except UsageError as exc:
                deps.telemetry.error(str(exc))
                sys.exit(EXIT_USAGE)

        @app.command()
        def check(
            paths: list[Path] = typer.Argument(..., help="Files or directories to check."),  # noqa: B008
            fix: bool = typer.Option(False, "--fix", help="Apply autofixes in place."),
            output_format: Optional[str] = typer.Option(
                None, "--format", help="Output format: text or json."
            ),
            severity_threshold: Optional[str] = typer.Option(
                None, "--severity-threshold", help="Lowest severity to report: warning or error."
            ),
            jobs: Optional[int] = typer.Option(None, "--jobs", "-j", help="Number of worker threads."),
            config_path: Optional[Path] = typer.Option(  # noqa: B008
                None, "--config", help="Configuration file (default: search upward)."
            ),
            verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr."),
        ) -> None:
            """Check Elixir sources and report style violations."""
            CLIAppFactory.configure_logging(verbose)
            config = _load_config(config_path)
            try:
                config = config.with_overrides(
                    output_format=output_format,
                    severity_threshold=severity_threshold,
                    jobs=jobs,
                )
                registry = build_default_registry(config)
            except (UsageError, RegistryError) as exc:
                deps.telemetry.error(str(exc))
                sys.exit(EXIT_USAGE)

            missing = [str(p) for p in paths if not deps.filesystem.exists(str(p))]
            if missing:
                for path in missing:
                    deps.telemetry.error(f"No such file or directory: {path}")
                sys.exit(EXIT_USAGE)

            use_case = CheckFilesUseCase(
                tokenizer=deps.tokenizer,
                filesystem=deps.filesystem,
                fix_writer=deps.fix_writer,
                telemetry=deps.telemetry,
            )
            result = use_case.execute(
                [str(p) for p in paths], registry, config, fix=fix, cancel=threading.Event()
            )

            reports = [report.filtered(config.severity_threshold) for report in result.reports]
            summary = RunSummary.from_reports(reports, fix_mode=fix, cancelled=result.cancelled)
            for report in reports:
                if not report.readable:
                    deps.telemetry.warning(f"Could not read {report.path}: {report.error}")
            typer.echo(reporter_for(config.output_format).render(reports, summary), nl=False)
            sys.exit(summary.exit_code)

        @app.command()
        def rules(
            output_format: str = typer.Option("text", "--format", help="Output format: text or json."),
            config_path: Optional[Path] = typer.Option(  # noqa: B008
                None, "--config", help="Configuration file (default: search upward)."
            ),
        ) -> None:
            """List every built-in rule and whether it is enabled."""
            if output_format not in ("text", "json"):
                deps.telemetry.error(f"Output format must be text or json, got '{output_format}'.")
                sys.exit(EXIT_USAGE)
            catalog = rule_catalog(_load_config(config_path))
            if output_format == "json":
                typer.echo(RuleCatalogRenderer.to_json(catalog), nl=False)
            else:
                deps.catalog_renderer.print_table(catalog)
            sys.exit(EXIT_OK)

        @app.command()
        def explain(
            rule_id: str = typer.Argument(..., help="Rule id, e.g. layout/trailing-whitespace."),
            config_path: Optional[Path] = typer.Option(  # noqa: B008
                None, "--config", help="Configuration file (default: search upward)."
            ),
        ) -> None:
            """Describe a single rule."""
            catalog = {rule.rule_id: (rule, enabled) for rule, enabled in rule_catalog(_load_config(config_path))}
            if rule_id not in catalog:
                deps.telemetry.error(f"Unknown rule '{rule_id}'. Run 'exstyle rules' to list them.")
                sys.exit(EXIT_USAGE)
            rule, enabled = catalog[rule_id]
            deps.catalog_renderer.print_rule(rule, enabled)
            sys.exit(EXIT_OK)

        return app
