"""Shared fixtures: tokenizer, registries built from the real catalog, a text checker."""

from typing import Callable, Optional

import pytest

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import Violation
from elixir_style_linter.domain.errors import UnterminatedLiteralError
from elixir_style_linter.domain.registry import RuleRegistry
from elixir_style_linter.domain.rules import builtin_rules
from elixir_style_linter.infrastructure.gateways.elixir_tokenizer import ElixirTokenizer
from elixir_style_linter.use_cases.evaluate_rules import RuleEvaluator

CheckText = Callable[..., list[Violation]]


def registry_with(*rule_ids: str, config: Optional[LinterConfig] = None) -> RuleRegistry:
    """A frozen registry holding only the named built-in rules, in catalog order."""
    wanted = set(rule_ids)
    registry = RuleRegistry()
    for rule in builtin_rules(config or LinterConfig()):
        if rule.rule_id in wanted:
            registry.register(rule)
    missing = wanted - {rule.rule_id for rule in registry.all()}
    assert not missing, f"unknown rule ids in test: {missing}"
    return registry.freeze()


@pytest.fixture
def make_registry() -> Callable[..., RuleRegistry]:
    return registry_with


@pytest.fixture
def tokenizer() -> ElixirTokenizer:
    return ElixirTokenizer()


@pytest.fixture
def check(tokenizer: ElixirTokenizer) -> CheckText:
    """check(text, *rule_ids, path=..., config=...) -> violations from just those rules."""

    def _check(
        text: str,
        *rule_ids: str,
        path: str = "lib/sample.ex",
        config: Optional[LinterConfig] = None,
    ) -> list[Violation]:
        registry = registry_with(*rule_ids, config=config)
        try:
            tokens = tokenizer.parse(text)
        except UnterminatedLiteralError as exc:
            return RuleEvaluator().evaluate(exc.tokens, registry, path=path, parse_error=exc)
        return RuleEvaluator().evaluate(tokens, registry, path=path)

    return _check
