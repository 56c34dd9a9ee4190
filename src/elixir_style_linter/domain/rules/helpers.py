"""Token-level helpers shared by the rule catalog."""

import re
from typing import Iterator, Optional

from elixir_style_linter.domain.entities import Token, TokenKind
from elixir_style_linter.domain.source import SourceView

KEYWORDS: frozenset[str] = frozenset(
    {
        "do", "end", "fn", "when", "and", "or", "not", "in", "true", "false",
        "nil", "after", "catch", "else", "rescue",
    }
)
DEFINITIONS: frozenset[str] = frozenset({"def", "defp", "defmacro", "defmacrop"})

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_snake_case(name: str) -> str:
    """fileName -> file_name, parseHTTPHeader -> parse_http_header, isValid? -> is_valid?"""
    suffix = name[-1] if name and name[-1] in "?!" else ""
    core = name[:-1] if suffix else name
    core = _ACRONYM_BOUNDARY.sub(r"\1_\2", core)
    core = _WORD_BOUNDARY.sub(r"\1_\2", core)
    return core.lower() + suffix


def is_lower_identifier(text: str) -> bool:
    """Variables and functions; `__MODULE__` style specials and bare `_` are excluded."""
    stripped = text.lstrip("_")
    return bool(stripped) and stripped[0].islower()


def is_alias(token: Token) -> bool:
    return token.kind is TokenKind.IDENTIFIER and token.text[:1].isupper()


def is_op(token: Optional[Token], text: str) -> bool:
    return token is not None and token.kind is TokenKind.OPERATOR and token.text == text


def is_word(token: Optional[Token], *words: str) -> bool:
    return token is not None and token.kind is TokenKind.IDENTIFIER and token.text in words


def is_keyword_key(view: SourceView, index: int) -> bool:
    """True for `do:` style keyword-list keys: an identifier glued to a ':' operator."""
    tokens = view.tokens
    return (
        index + 1 < len(tokens)
        and tokens[index].kind is TokenKind.IDENTIFIER
        and is_op(tokens[index + 1], ":")
    )


def starts_line(view: SourceView, index: int) -> bool:
    """True when only indentation precedes the token on its line."""
    previous = index - 1
    if previous >= 0 and view.tokens[previous].kind is TokenKind.WHITESPACE:
        previous -= 1
    return previous < 0 or view.tokens[previous].kind is TokenKind.NEWLINE


def is_code_line_start(line_tokens: tuple[Token, ...], start_offset: int) -> bool:
    """A physical line that begins with a token (not the inside of a multi-line literal)."""
    return bool(line_tokens) and line_tokens[0].offset == start_offset


def block_depths(view: SourceView) -> list[int]:
    """
    do/fn ... end nesting depth in effect at each token index.

    `do:` keyword keys and `end:` keys do not count.
    """
    depths: list[int] = []
    depth = 0
    for i, token in enumerate(view.tokens):
        if token.kind is TokenKind.IDENTIFIER and not is_keyword_key(view, i):
            if token.text == "end":
                depth = max(depth - 1, 0)
                depths.append(depth)
                continue
            depths.append(depth)
            if token.text in ("do", "fn"):
                depth += 1
            continue
        depths.append(depth)
    return depths


def module_name_at(view: SourceView, index: int) -> tuple[str, Optional[int]]:
    """Read the dotted alias following the token at index, e.g. `defmodule MyApp.Repo`."""
    position = view.next_significant(index)
    parts: list[str] = []
    first: Optional[int] = position
    while position is not None and is_alias(view.tokens[position]):
        parts.append(view.tokens[position].text)
        dot = position + 1
        if dot < len(view.tokens) and is_op(view.tokens[dot], "."):
            position = dot + 1
        else:
            break
    return ".".join(parts), (first if parts else None)


def iter_modules(view: SourceView, depths: list[int]) -> Iterator[tuple[int, str, int]]:
    """Yield (defmodule token index, module name, body depth) for every module definition."""
    for i, token in enumerate(view.tokens):
        if is_word(token, "defmodule") and not is_keyword_key(view, i):
            name, _ = module_name_at(view, i)
            yield i, name, depths[i] + 1


def string_body(token: Token) -> Optional[str]:
    """Body of a plain one-line double quoted string literal, else None."""
    text = token.text
    if token.kind is not TokenKind.LITERAL or len(text) < 2:
        return None
    if not (text.startswith('"') and text.endswith('"')) or text.startswith('"""'):
        return None
    return text[1:-1]
