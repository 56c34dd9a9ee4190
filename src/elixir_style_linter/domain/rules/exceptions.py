"""Exception naming and message conventions."""

from typing import Iterable, Optional

from elixir_style_linter.domain.entities import Category, Finding, Fix, Severity, Token, TokenKind
from elixir_style_linter.domain.matchers import CustomMatcher
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import (
    block_depths,
    is_alias,
    is_keyword_key,
    is_op,
    is_word,
    iter_modules,
    string_body,
)
from elixir_style_linter.domain.source import SourceView


def _error_suffix(view: SourceView) -> Iterable[Finding]:
    depths = block_depths(view)
    module_at = {i: (name, body) for i, name, body in iter_modules(view, depths)}
    # body depth -> innermost module currently open at that depth
    current: dict[int, str] = {}
    for i, token in enumerate(view.tokens):
        if i in module_at:
            name, body = module_at[i]
            current[body] = name
            continue
        if is_word(token, "defexception") and not is_keyword_key(view, i):
            name = current.get(depths[i])
            if name and not name.rsplit(".", 1)[-1].endswith("Error"):
                yield Finding(token.position, args={"name": name})


def _message_literal(view: SourceView, raise_index: int) -> Optional[Token]:
    tokens = view.tokens
    first = view.next_significant(raise_index)
    if first is not None and tokens[first].is_(TokenKind.DELIMITER, "("):
        first = view.next_significant(first)
    if first is None:
        return None
    if string_body(tokens[first]) is not None:
        return tokens[first]
    position: Optional[int] = first
    # Skip a dotted exception alias such as MyApp.ParseError
    while position is not None and is_alias(tokens[position]):
        following = view.next_significant(position)
        if following is not None and is_op(tokens[following], "."):
            position = view.next_significant(following)
            continue
        position = following
        break
    if position is None or position == first or not tokens[position].is_(TokenKind.DELIMITER, ","):
        return None
    candidate = view.next_significant(position)
    if candidate is not None and string_body(tokens[candidate]) is not None:
        return tokens[candidate]
    return None


def _message_format(view: SourceView) -> Iterable[Finding]:
    for i, token in enumerate(view.tokens):
        if not is_word(token, "raise", "reraise") or is_keyword_key(view, i):
            continue
        literal = _message_literal(view, i)
        if literal is None:
            continue
        body = string_body(literal) or ""
        trailing_period = body.endswith(".") and not body.endswith("..")
        capitalized = len(body) > 1 and body[0].isupper() and body[1].islower()
        if not (trailing_period or capitalized):
            continue
        fix = None
        if trailing_period and not capitalized:
            fix = Fix.delete(literal.end_offset - 2, literal.end_offset - 1)
        yield Finding(literal.position, args={"message": body}, fix=fix)


def build() -> list[Rule]:
    return [
        Rule(
            rule_id="exceptions/error-suffix",
            category=Category.EXCEPTIONS,
            matcher=CustomMatcher(_error_suffix),
            severity=Severity.WARNING,
            message="Exception module '{name}' should end in 'Error'",
            description="Name exception modules with a trailing Error.",
        ),
        Rule(
            rule_id="exceptions/message-format",
            category=Category.EXCEPTIONS,
            matcher=CustomMatcher(_message_format),
            severity=Severity.WARNING,
            message="Exception message \"{message}\" should be lowercase without trailing punctuation",
            description="Use lowercase error messages without trailing punctuation when raising exceptions.",
            fixable=True,
        ),
    ]
