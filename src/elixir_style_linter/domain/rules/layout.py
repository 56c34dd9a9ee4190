"""Source code layout: whitespace, indentation, line length and spacing."""

import re
from typing import Iterable

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import Category, Finding, Fix, Severity, Token, TokenKind
from elixir_style_linter.domain.matchers import (
    CustomMatcher,
    LineMatcher,
    PairedDelimiterMatcher,
    TokenWindowMatcher,
)
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import is_code_line_start
from elixir_style_linter.domain.source import SourceLine, SourceView

SPACED_OPERATORS: frozenset[str] = frozenset(
    {
        "=", "==", "!=", "===", "!==", "<", ">", "<=", ">=", "&&", "||", "|>",
        "<>", "++", "--", "->", "<-", "=~", "=>", "\\\\", "|",
    }
)
_TRAILING_NEWLINES = re.compile(r"(\r?\n)(?:\r?\n)+\Z")


def _trailing_whitespace(line: SourceLine) -> Iterable[Finding]:
    if line.truncated:
        return
    tokens = [t for t in line.tokens if t.kind is not TokenKind.NEWLINE]
    if not tokens or tokens[-1].end_offset > line.end_offset:
        return
    last = tokens[-1]
    if last.kind is TokenKind.WHITESPACE:
        yield Finding(last.position, fix=Fix.delete(last.offset, last.end_offset))
    elif last.kind is TokenKind.COMMENT and last.text != last.text.rstrip():
        column = last.position.column + len(last.text.rstrip())
        start = last.offset + len(last.text.rstrip())
        yield Finding(line.position(column), fix=Fix.delete(start, last.end_offset))


class _NoTabs:
    def __init__(self, indent_width: int) -> None:
        self.indent_width = indent_width

    def __call__(self, line: SourceLine) -> Iterable[Finding]:
        indentation = line.indentation
        if "\t" not in indentation or not is_code_line_start(line.tokens, line.start_offset):
            return
        replacement = indentation.replace("\t", " " * self.indent_width)
        yield Finding(
            line.position(0),
            fix=Fix(line.start_offset, line.start_offset + len(indentation), replacement),
        )


class _IndentationWidth:
    def __init__(self, indent_width: int) -> None:
        self.indent_width = indent_width

    def __call__(self, line: SourceLine) -> Iterable[Finding]:
        indentation = line.indentation
        if not indentation or "\t" in indentation or line.is_blank:
            return
        if not is_code_line_start(line.tokens, line.start_offset):
            return
        if len(indentation) % self.indent_width:
            yield Finding(line.position(0), args={"width": self.indent_width, "found": len(indentation)})


class _LineLength:
    def __init__(self, max_length: int) -> None:
        self.max_length = max_length

    def __call__(self, line: SourceLine) -> Iterable[Finding]:
        if len(line.text) > self.max_length:
            yield Finding(
                line.position(self.max_length),
                args={"length": len(line.text), "limit": self.max_length},
            )


def _final_newline(view: SourceView) -> Iterable[Finding]:
    text = view.text
    if not view.complete or not text:
        return
    if not text.endswith("\n"):
        yield Finding(
            view.position_of(len(text)),
            args={"problem": "File must end with a newline"},
            fix=Fix.insert(len(text), "\n"),
        )
        return
    match = _TRAILING_NEWLINES.search(text)
    if match:
        yield Finding(
            view.position_of(match.end(1)),
            args={"problem": "Remove blank lines at the end of the file"},
            fix=Fix.delete(match.end(1), len(text)),
        )


def _consecutive_blank_lines(view: SourceView) -> Iterable[Finding]:
    lines = view.lines
    run: list[SourceLine] = []
    for index, line in enumerate(lines):
        blank_code_line = line.is_blank and is_code_line_start(line.tokens, line.start_offset)
        if blank_code_line:
            run.append(line)
            continue
        if len(run) > 1:
            yield Finding(
                run[1].position(0),
                args={"count": len(run)},
                fix=Fix.delete(run[1].start_offset, line.start_offset),
            )
        run = []
    # A blank run reaching end of file is layout/final-newline's concern.


def _space_after_comma(window: tuple[Token, ...]) -> Iterable[Finding]:
    comma, following = window
    if comma.is_(TokenKind.DELIMITER, ",") and not following.is_blank:
        if following.kind is TokenKind.DELIMITER and following.text in ")]}>>":
            return
        yield Finding(comma.position, fix=Fix.insert(comma.end_offset, " "))


def _space_around_operator(window: tuple[Token, ...]) -> Iterable[Finding]:
    before, op, after = window
    if op.kind is not TokenKind.OPERATOR or op.text not in SPACED_OPERATORS:
        return
    missing_before = not before.is_blank
    missing_after = not after.is_blank
    if missing_before or missing_after:
        replacement = (" " if missing_before else "") + op.text + (" " if missing_after else "")
        yield Finding(
            op.position,
            args={"operator": op.text},
            fix=Fix(op.offset, op.end_offset, replacement),
        )


def _space_inside_delimiters(view: SourceView, open_index: int, close_index: int) -> Iterable[Finding]:
    tokens = view.tokens
    if close_index - open_index < 2:
        return
    opener, closer = tokens[open_index], tokens[close_index]
    first_inner = tokens[open_index + 1]
    after_space = tokens[open_index + 2]
    if first_inner.kind is TokenKind.WHITESPACE and after_space.kind not in (TokenKind.NEWLINE, TokenKind.COMMENT):
        yield Finding(
            first_inner.position,
            args={"where": "after", "delimiter": opener.text},
            fix=Fix.delete(first_inner.offset, first_inner.end_offset),
        )
    last_inner = tokens[close_index - 1]
    before_space = tokens[close_index - 2]
    if (
        last_inner.kind is TokenKind.WHITESPACE
        and close_index - 1 != open_index + 1
        and before_space.kind is not TokenKind.NEWLINE
    ):
        yield Finding(
            last_inner.position,
            args={"where": "before", "delimiter": closer.text},
            fix=Fix.delete(last_inner.offset, last_inner.end_offset),
        )


def build(config: LinterConfig) -> list[Rule]:
    return [
        Rule(
            rule_id="layout/trailing-whitespace",
            category=Category.LAYOUT,
            matcher=LineMatcher(_trailing_whitespace),
            severity=Severity.WARNING,
            message="Trailing whitespace",
            description="Avoid trailing whitespace.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/no-tabs",
            category=Category.LAYOUT,
            matcher=LineMatcher(_NoTabs(config.indent_width)),
            severity=Severity.ERROR,
            message="Indent with spaces, not tabs",
            description="Use spaces for indentation; never hard tabs.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/indentation-width",
            category=Category.LAYOUT,
            matcher=LineMatcher(_IndentationWidth(config.indent_width)),
            severity=Severity.WARNING,
            message="Indentation should be a multiple of {width} spaces (found {found})",
            description="Use two spaces per indentation level.",
        ),
        Rule(
            rule_id="layout/line-length",
            category=Category.LAYOUT,
            matcher=LineMatcher(_LineLength(config.max_line_length)),
            severity=Severity.WARNING,
            message="Line is {length} characters long (limit {limit})",
            description="Keep lines within the configured maximum length.",
        ),
        Rule(
            rule_id="layout/final-newline",
            category=Category.LAYOUT,
            matcher=CustomMatcher(_final_newline),
            severity=Severity.WARNING,
            message="{problem}",
            description="End each file with exactly one newline.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/consecutive-blank-lines",
            category=Category.LAYOUT,
            matcher=CustomMatcher(_consecutive_blank_lines),
            severity=Severity.WARNING,
            message="Use at most one blank line in a row (found {count})",
            description="Separate definitions with a single blank line.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/space-after-comma",
            category=Category.LAYOUT,
            matcher=TokenWindowMatcher(2, _space_after_comma),
            severity=Severity.WARNING,
            message="Missing space after ','",
            description="Use a space after commas.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/space-around-operator",
            category=Category.LAYOUT,
            matcher=TokenWindowMatcher(3, _space_around_operator),
            severity=Severity.WARNING,
            message="Surround '{operator}' with spaces",
            description="Use spaces around binary operators.",
            fixable=True,
        ),
        Rule(
            rule_id="layout/space-inside-delimiters",
            category=Category.LAYOUT,
            matcher=PairedDelimiterMatcher(_space_inside_delimiters),
            severity=Severity.WARNING,
            message="No space {where} '{delimiter}'",
            description="Do not put spaces inside matched pairs such as brackets, parentheses and braces.",
            fixable=True,
        ),
    ]
