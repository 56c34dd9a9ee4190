"""Built-in rule catalog, one module per style guide section."""

import dataclasses
import logging

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.errors import ConfigError
from elixir_style_linter.domain.registry import Rule, RuleRegistry
from elixir_style_linter.domain.rules import (
    comments,
    exceptions,
    layout,
    modules,
    naming,
    regex,
    syntax,
)

logger = logging.getLogger(__name__)


def builtin_rules(config: LinterConfig) -> list[Rule]:
    """Every built-in rule in report order, before configuration is applied."""
    return [
        *layout.build(config),
        *syntax.build(),
        *naming.build(),
        *comments.build(),
        *modules.build(),
        *regex.build(),
        *exceptions.build(),
    ]


def build_default_registry(config: LinterConfig) -> RuleRegistry:
    """
    Build, configure and freeze the process-wide rule registry.

    Disabled rules are left out; severity overrides replace the rule before
    it is registered because rules are immutable.

    Raises:
        ConfigError: the configuration names a rule that does not exist.
    """
    rules = builtin_rules(config)
    known = {rule.rule_id for rule in rules}
    unknown = sorted(config.referenced_rules - known)
    if unknown:
        raise ConfigError(f"Unknown rule id(s) in configuration: {', '.join(unknown)}")

    registry = RuleRegistry()
    for rule in rules:
        if not config.is_enabled(rule.rule_id, rule.enabled_by_default):
            logger.debug("rule %s disabled", rule.rule_id)
            continue
        override = config.severity_overrides.get(rule.rule_id)
        if override is not None and override is not rule.severity:
            rule = dataclasses.replace(rule, severity=override)
        registry.register(rule)
    return registry.freeze()


def rule_catalog(config: LinterConfig) -> list[tuple[Rule, bool]]:
    """All built-in rules with whether the configuration enables them."""
    return [
        (
            dataclasses.replace(rule, severity=config.severity_overrides.get(rule.rule_id, rule.severity)),
            config.is_enabled(rule.rule_id, rule.enabled_by_default),
        )
        for rule in builtin_rules(config)
    ]
