"""Syntax conventions and the parse-error rule."""

from typing import Iterable

from elixir_style_linter.domain.entities import (
    Category,
    Finding,
    Fix,
    Severity,
    Token,
    TokenKind,
    ViolationKind,
)
from elixir_style_linter.domain.matchers import CustomMatcher, TokenWindowMatcher
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import (
    DEFINITIONS,
    block_depths,
    is_keyword_key,
    is_word,
)
from elixir_style_linter.domain.source import SourceView

UNTERMINATED_LITERAL_RULE_ID = "syntax/unterminated-literal"
UNARY_OPERATORS: frozenset[str] = frozenset({"!", "^", "@", "&"})


def _unterminated_literal(view: SourceView) -> Iterable[Finding]:
    error = view.parse_error
    if error is not None:
        yield Finding(error.position, args={"kind": error.kind})


def _def_parentheses(window: tuple[Token, ...]) -> Iterable[Finding]:
    keyword, name, first, second = window
    if not is_word(keyword, *DEFINITIONS) or name.kind is not TokenKind.IDENTIFIER:
        return
    if first.is_(TokenKind.DELIMITER, "(") and second.is_(TokenKind.DELIMITER, ")"):
        fix = None
        if name.end_offset == first.offset:
            fix = Fix.delete(first.offset, second.end_offset)
        yield Finding(
            first.position,
            args={"name": name.text, "advice": "omit the empty parentheses"},
            fix=fix,
        )
        return
    takes_arguments = first.kind in (TokenKind.IDENTIFIER, TokenKind.LITERAL) and first.text not in ("do", "when")
    if takes_arguments and first.line == name.line and first.offset > name.end_offset:
        yield Finding(
            name.position,
            args={"name": name.text, "advice": "put its parameters in parentheses"},
        )


def _no_unless_else(view: SourceView) -> Iterable[Finding]:
    tokens = view.tokens
    depths = block_depths(view)
    for i, token in enumerate(tokens):
        if not is_word(token, "unless") or is_keyword_key(view, i):
            continue
        if _unless_has_else(view, i, depths):
            yield Finding(token.position)


def _unless_has_else(view: SourceView, start: int, depths: list[int]) -> bool:
    tokens = view.tokens
    brackets = 0
    for j in range(start + 1, len(tokens)):
        token = tokens[j]
        if token.kind is TokenKind.DELIMITER and token.text in ("(", "[", "{", "<<"):
            brackets += 1
        elif token.kind is TokenKind.DELIMITER and token.text in (")", "]", "}", ">>"):
            brackets -= 1
            if brackets < 0:
                return False
        elif is_word(token, "do") and not is_keyword_key(view, j):
            return _block_has_else(view, j, depths)
        elif is_word(token, "else") and is_keyword_key(view, j) and brackets <= 1:
            return True
        elif token.kind is TokenKind.NEWLINE and brackets == 0:
            previous = view.previous_significant(j)
            if previous is None or not tokens[previous].is_(TokenKind.DELIMITER, ","):
                return False
    return False


def _block_has_else(view: SourceView, do_index: int, depths: list[int]) -> bool:
    body_depth = depths[do_index] + 1
    for j in range(do_index + 1, len(view.tokens)):
        if depths[j] < body_depth:
            return False
        if depths[j] == body_depth and is_word(view.tokens[j], "else") and not is_keyword_key(view, j):
            return True
    return False


def _unary_operator_spacing(window: tuple[Token, ...]) -> Iterable[Finding]:
    op, following = window
    if op.kind is TokenKind.OPERATOR and op.text in UNARY_OPERATORS and following.kind is TokenKind.WHITESPACE:
        yield Finding(
            op.position,
            args={"operator": op.text},
            fix=Fix.delete(following.offset, following.end_offset),
        )


def build() -> list[Rule]:
    return [
        Rule(
            rule_id=UNTERMINATED_LITERAL_RULE_ID,
            category=Category.SYNTAX,
            matcher=CustomMatcher(_unterminated_literal),
            severity=Severity.ERROR,
            message="Unterminated {kind}; the rest of the file was not checked",
            description="Every string, charlist, heredoc, sigil, quoted atom and bitstring must be closed.",
            kind=ViolationKind.UNTERMINATED_LITERAL,
        ),
        Rule(
            rule_id="syntax/def-parentheses",
            category=Category.SYNTAX,
            matcher=TokenWindowMatcher(4, _def_parentheses, significant_only=True),
            severity=Severity.WARNING,
            message="In the definition of '{name}', {advice}",
            description="Use parentheses in def when there are parameters; omit them when there are none.",
            fixable=True,
        ),
        Rule(
            rule_id="syntax/no-unless-else",
            category=Category.SYNTAX,
            matcher=CustomMatcher(_no_unless_else),
            severity=Severity.ERROR,
            message="Never use 'unless' with 'else'; rewrite with the positive case first",
            description="Never use unless with else.",
        ),
        Rule(
            rule_id="syntax/unary-operator-spacing",
            category=Category.SYNTAX,
            matcher=TokenWindowMatcher(2, _unary_operator_spacing),
            severity=Severity.WARNING,
            message="No space after the unary operator '{operator}'",
            description="Do not put spaces after non-word unary operators such as !, ^, @ and &.",
            fixable=True,
        ),
    ]
