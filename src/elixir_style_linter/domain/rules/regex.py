"""Regular expression conventions."""

import re
from typing import Iterable

from elixir_style_linter.domain.entities import Category, Finding, Fix, Severity, Token, TokenKind
from elixir_style_linter.domain.matchers import TokenWindowMatcher
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import is_alias, is_op, is_word

_REGEX_SIGIL = re.compile(r"\A~(?P<name>[rR])(?P<open>[|\"'(\[{<])(?P<body>.*)(?P<close>[|\"')\]}>])(?P<mods>[a-zA-Z]*)\Z", re.DOTALL)
_CLOSERS: dict[str, str] = {"(": ")", "[": "]", "{": "}", "<": ">"}


def _sigil_delimiter(window: tuple[Token, ...]) -> Iterable[Finding]:
    (token,) = window
    if token.kind is not TokenKind.LITERAL or not token.text.startswith(("~r", "~R")):
        return
    match = _REGEX_SIGIL.match(token.text)
    if not match or token.text[2:5] in ('"""', "'''"):
        return
    opener, closer, body = match.group("open"), match.group("close"), match.group("body")
    if _CLOSERS.get(opener, opener) != closer:
        return
    if "/" in body or "\n" in body:
        return
    replacement = f"~{match.group('name')}/{body}/{match.group('mods')}"
    yield Finding(
        token.position,
        args={"sigil": token.text, "suggestion": replacement},
        fix=Fix(token.offset, token.end_offset, replacement),
    )


def _prefer_sigil(window: tuple[Token, ...]) -> Iterable[Finding]:
    module, dot, function, paren, pattern = window
    if not (is_alias(module) and module.text == "Regex" and is_op(dot, ".")):
        return
    if not is_word(function, "compile", "compile!") or not paren.is_(TokenKind.DELIMITER, "("):
        return
    if pattern.kind is TokenKind.LITERAL and pattern.text.startswith('"'):
        yield Finding(module.position, args={"function": function.text})


def build() -> list[Rule]:
    return [
        Rule(
            rule_id="regex/sigil-delimiter",
            category=Category.REGEX,
            matcher=TokenWindowMatcher(1, _sigil_delimiter),
            severity=Severity.WARNING,
            message="Write {sigil} as {suggestion}",
            description="Delimit regex sigils with slashes unless the pattern contains a slash.",
            fixable=True,
        ),
        Rule(
            rule_id="regex/prefer-sigil",
            category=Category.REGEX,
            matcher=TokenWindowMatcher(5, _prefer_sigil, significant_only=True),
            severity=Severity.WARNING,
            message="Use the ~r sigil instead of Regex.{function} with a string literal",
            description="Prefer ~r sigils over compiling regexes from string literals.",
        ),
    ]
