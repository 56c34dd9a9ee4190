"""Naming conventions: snake_case, CamelCase aliases and predicate names."""

from typing import Iterable

from elixir_style_linter.domain.entities import Category, Finding, Fix, Severity, Token, TokenKind
from elixir_style_linter.domain.matchers import TokenWindowMatcher
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import (
    is_lower_identifier,
    is_op,
    is_word,
    to_snake_case,
)


def _snake_case_variable(window: tuple[Token, ...]) -> Iterable[Finding]:
    (token,) = window
    if token.kind is not TokenKind.IDENTIFIER or not is_lower_identifier(token.text):
        return
    suggestion = to_snake_case(token.text)
    if suggestion != token.text:
        yield Finding(
            token.position,
            args={"name": token.text, "suggestion": suggestion},
            fix=Fix(token.offset, token.end_offset, suggestion),
        )


def _snake_case_atom(window: tuple[Token, ...]) -> Iterable[Finding]:
    (token,) = window
    text = token.text
    if token.kind is not TokenKind.LITERAL or not text.startswith(":") or len(text) < 2:
        return
    name = text[1:]
    if not is_lower_identifier(name) or not all(c.isalnum() or c in "_?!" for c in name):
        return
    suggestion = to_snake_case(name)
    if suggestion != name:
        yield Finding(
            token.position,
            args={"name": text, "suggestion": ":" + suggestion},
            fix=Fix(token.offset, token.end_offset, ":" + suggestion),
        )


def _camel_case_module(window: tuple[Token, ...]) -> Iterable[Finding]:
    (token,) = window
    if token.kind is TokenKind.IDENTIFIER and token.text[:1].isupper() and "_" in token.text:
        yield Finding(token.position, args={"name": token.text})


def _predicate_function(window: tuple[Token, ...]) -> Iterable[Finding]:
    keyword, name = window
    if not is_word(keyword, "def", "defp") or name.kind is not TokenKind.IDENTIFIER:
        return
    if name.text.startswith("is_") and not name.text.endswith("?"):
        yield Finding(
            name.position,
            args={"name": name.text, "suggestion": name.text[len("is_"):] + "?"},
        )


def _short_variable(window: tuple[Token, ...]) -> Iterable[Finding]:
    name, op = window
    if (
        name.kind is TokenKind.IDENTIFIER
        and len(name.text) == 1
        and name.text.isalpha()
        and is_op(op, "=")
    ):
        yield Finding(name.position, args={"name": name.text})


def build() -> list[Rule]:
    return [
        Rule(
            rule_id="naming/snake-case-variable",
            category=Category.NAMING,
            matcher=TokenWindowMatcher(1, _snake_case_variable),
            severity=Severity.WARNING,
            message="Use snake_case for '{name}' (suggested: {suggestion})",
            description="Use snake_case for variables and function names.",
            fixable=True,
        ),
        Rule(
            rule_id="naming/snake-case-atom",
            category=Category.NAMING,
            matcher=TokenWindowMatcher(1, _snake_case_atom),
            severity=Severity.WARNING,
            message="Use snake_case for the atom '{name}' (suggested: {suggestion})",
            description="Use snake_case for atoms.",
            fixable=True,
        ),
        Rule(
            rule_id="naming/camel-case-module",
            category=Category.NAMING,
            matcher=TokenWindowMatcher(1, _camel_case_module),
            severity=Severity.WARNING,
            message="Use CamelCase for the module name '{name}'",
            description="Use CamelCase for modules and keep acronyms uppercase.",
        ),
        Rule(
            rule_id="naming/predicate-function",
            category=Category.NAMING,
            matcher=TokenWindowMatcher(2, _predicate_function, significant_only=True),
            severity=Severity.WARNING,
            message="Name the predicate '{name}' as '{suggestion}'; 'is_' is for guard-safe macros",
            description="Predicate functions end in a question mark; the is_ prefix is reserved for guards.",
        ),
        Rule(
            rule_id="naming/short-variable",
            category=Category.NAMING,
            matcher=TokenWindowMatcher(2, _short_variable, significant_only=True),
            severity=Severity.WARNING,
            message="Avoid the one-letter variable name '{name}'",
            description="Prefer descriptive variable names (best-effort heuristic).",
            enabled_by_default=False,
        ),
    ]
