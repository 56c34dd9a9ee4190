"""Linter settings, validated once at startup."""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from elixir_style_linter.domain.entities import Severity
from elixir_style_linter.domain.errors import ConfigError

DEFAULT_MAX_LINE_LENGTH = 98
DEFAULT_INDENT_WIDTH = 2
DEFAULT_EXCLUDES: tuple[str, ...] = ("_build/**", "deps/**")
OUTPUT_FORMATS: tuple[str, ...] = ("text", "json")


def _default_jobs() -> int:
    return max(1, min(8, os.cpu_count() or 1))


@dataclass(frozen=True)
class LinterConfig:
    """
    Process-wide settings.

    Built from [tool.exstyle] / .exstyle.toml plus command line overrides and
    never mutated afterwards.
    """

    max_line_length: int = DEFAULT_MAX_LINE_LENGTH
    indent_width: int = DEFAULT_INDENT_WIDTH
    jobs: int = field(default_factory=_default_jobs)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES
    output_format: str = "text"
    severity_threshold: Severity = Severity.WARNING
    disabled_rules: frozenset[str] = frozenset()
    enabled_rules: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, Severity] = field(default_factory=dict)
    source: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, object], source: Optional[str] = None) -> "LinterConfig":
        """Validate a raw [tool.exstyle] table."""
        known = {
            "max_line_length",
            "indent_width",
            "jobs",
            "exclude",
            "format",
            "severity_threshold",
            "rules",
        }
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration key(s): {', '.join(unknown)}")

        rules = data.get("rules", {})
        if not isinstance(rules, Mapping):
            raise ConfigError("'rules' must be a table.")
        severity_table = rules.get("severity", {})
        if not isinstance(severity_table, Mapping):
            raise ConfigError("'rules.severity' must be a table of rule id to severity.")

        overrides: dict[str, Severity] = {}
        for rule_id, value in severity_table.items():
            overrides[str(rule_id)] = _severity(value, f"rules.severity.{rule_id}")

        return cls(
            max_line_length=_positive_int(data, "max_line_length", DEFAULT_MAX_LINE_LENGTH),
            indent_width=_positive_int(data, "indent_width", DEFAULT_INDENT_WIDTH),
            jobs=_positive_int(data, "jobs", _default_jobs()),
            exclude=_string_tuple(data.get("exclude", DEFAULT_EXCLUDES), "exclude"),
            output_format=_output_format(data.get("format", "text")),
            severity_threshold=_severity(data.get("severity_threshold", "warning"), "severity_threshold"),
            disabled_rules=frozenset(_string_tuple(rules.get("disable", ()), "rules.disable")),
            enabled_rules=frozenset(_string_tuple(rules.get("enable", ()), "rules.enable")),
            severity_overrides=overrides,
            source=source,
        )

    def with_overrides(
        self,
        *,
        output_format: Optional[str] = None,
        severity_threshold: Optional[str] = None,
        jobs: Optional[int] = None,
    ) -> "LinterConfig":
        """Apply command line flags on top of the file configuration."""
        changes: dict[str, object] = {}
        if output_format is not None:
            changes["output_format"] = _output_format(output_format)
        if severity_threshold is not None:
            changes["severity_threshold"] = _severity(severity_threshold, "--severity-threshold")
        if jobs is not None:
            if jobs < 1:
                raise ConfigError("--jobs must be at least 1.")
            changes["jobs"] = jobs
        return dataclasses.replace(self, **changes) if changes else self

    def is_enabled(self, rule_id: str, enabled_by_default: bool) -> bool:
        if rule_id in self.disabled_rules:
            return False
        return enabled_by_default or rule_id in self.enabled_rules

    @property
    def referenced_rules(self) -> frozenset[str]:
        return self.disabled_rules | self.enabled_rules | frozenset(self.severity_overrides)


def _positive_int(data: Mapping[str, object], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}.")
    return value


def _string_tuple(value: object, key: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"'{key}' must be a list of strings.")
    if not all(isinstance(item, str) for item in value):
        raise ConfigError(f"'{key}' must be a list of strings.")
    return tuple(value)


def _severity(value: object, key: str) -> Severity:
    if isinstance(value, Severity):
        return value
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be 'warning' or 'error', got {value!r}.")
    try:
        return Severity.parse(value)
    except ValueError as exc:
        raise ConfigError(f"'{key}': {exc}") from None


def _output_format(value: object) -> str:
    if value not in OUTPUT_FORMATS:
        raise ConfigError(f"Output format must be one of {', '.join(OUTPUT_FORMATS)}, got {value!r}.")
    return str(value)
