"""Report renderers for check results and the rule catalog."""

import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from elixir_style_linter.domain.entities import FileReport, RunSummary, Violation
from elixir_style_linter.domain.protocols import ReporterProtocol

if TYPE_CHECKING:
    from elixir_style_linter.domain.registry import Rule


def _ordered(reports: list[FileReport]) -> list[FileReport]:
    return sorted(reports, key=lambda report: report.path)


def _by_position(violations: tuple[Violation, ...]) -> list[Violation]:
    return sorted(violations, key=lambda v: v.position.offset)


class TextReporter(ReporterProtocol):
    """One `path:line:col: severity [rule-id] message` line per violation."""

    def render(self, reports: list[FileReport], summary: RunSummary) -> str:
        lines: list[str] = []
        for report in _ordered(reports):
            if not report.readable:
                lines.append(f"{report.path}: error: could not read file ({report.error})")
                continue
            for violation in _by_position(report.violations):
                lines.append(self.format_violation(violation))
            for violation in report.unresolved:
                lines.append(
                    f"{violation.path}:{violation.position}: note [{violation.rule_id}] "
                    "fix not applied, it overlaps another edit"
                )
        lines.append(summary.render())
        return "\n".join(lines) + "\n"

    @staticmethod
    def format_violation(violation: Violation) -> str:
        return (
            f"{violation.path}:{violation.position}: {violation.severity.value} "
            f"[{violation.rule_id}] {violation.message}"
        )


class JsonReporter(ReporterProtocol):
    """Machine-readable report with `files` and `summary` keys."""

    def render(self, reports: list[FileReport], summary: RunSummary) -> str:
        files = []
        for report in _ordered(reports):
            entry: dict[str, object] = {
                "path": report.path,
                "violations": [v.to_dict() for v in _by_position(report.violations)],
            }
            if not report.readable:
                entry["error"] = report.error
            if summary.fix_mode:
                entry["fixes_applied"] = report.fixes_applied
                entry["unresolved"] = [v.to_dict() for v in report.unresolved]
            files.append(entry)
        return json.dumps({"files": files, "summary": summary.to_dict()}, indent=2) + "\n"


REPORTERS: dict[str, type[ReporterProtocol]] = {
    "text": TextReporter,
    "json": JsonReporter,
}


def reporter_for(output_format: str) -> ReporterProtocol:
    """Return the reporter registered for an output format."""
    return REPORTERS[output_format]()


class RuleCatalogRenderer:
    """Prints the rule catalog for `exstyle rules` and `exstyle explain`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)

    def print_table(self, catalog: list[tuple["Rule", bool]]) -> None:
        table = Table(title="Elixir style rules", show_lines=False)
        table.add_column("Rule", style="cyan", no_wrap=True)
        table.add_column("Category")
        table.add_column("Severity")
        table.add_column("Fixable", justify="center")
        table.add_column("Enabled", justify="center")
        table.add_column("Description")
        for rule, enabled in catalog:
            severity_style = "red" if rule.severity.value == "error" else "yellow"
            table.add_row(
                rule.rule_id,
                rule.category.value,
                f"[{severity_style}]{rule.severity.value}[/]",
                "yes" if rule.fixable else "",
                "yes" if enabled else "[dim]no[/]",
                escape(rule.description),
            )
        self.console.print(table)

    @staticmethod
    def to_json(catalog: list[tuple["Rule", bool]]) -> str:
        rules = [{**rule.to_dict(), "enabled": enabled} for rule, enabled in catalog]
        return json.dumps({"rules": rules}, indent=2) + "\n"

    def print_rule(self, rule: "Rule", enabled: bool) -> None:
        self.console.print(f"[bold cyan]{rule.rule_id}[/]")
        self.console.print(f"  category: {rule.category.value}")
        self.console.print(f"  severity: {rule.severity.value}")
        self.console.print(f"  fixable:  {'yes' if rule.fixable else 'no'}")
        self.console.print(f"  enabled:  {'yes' if enabled else 'no'}")
        if rule.description:
            self.console.print()
            self.console.print(f"  {escape(rule.description)}")
