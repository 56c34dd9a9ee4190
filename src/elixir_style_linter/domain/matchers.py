"""
Matcher variants a rule can carry.

The evaluator knows how to drive each kind: it slides token windows, walks
physical lines, pairs delimiters, or hands the whole file to a custom
callable. Every kind returns an iterable of Findings, so fault isolation is
the same for all of them.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Union

from elixir_style_linter.domain.entities import Finding, Token
from elixir_style_linter.domain.source import SourceLine, SourceView

WindowCheck = Callable[[tuple[Token, ...]], Iterable[Finding]]
LineCheck = Callable[[SourceLine], Iterable[Finding]]
PairCheck = Callable[[SourceView, int, int], Iterable[Finding]]
ViewCheck = Callable[[SourceView], Iterable[Finding]]


@dataclass(frozen=True)
class TokenWindowMatcher:
    """
    Slide a fixed-size window over the token stream.

    With significant_only the window skips whitespace and line breaks, so
    `def  foo()` and `def foo()` present the same window.
    """

    size: int
    check: WindowCheck
    significant_only: bool = False


@dataclass(frozen=True)
class LineMatcher:
    """Position-based check run once per physical line."""

    check: LineCheck


@dataclass(frozen=True)
class PairedDelimiterMatcher:
    """Check run once per matched ( ), [ ], { } or << >> pair."""

    check: PairCheck


@dataclass(frozen=True)
class CustomMatcher:
    """Arbitrary whole-file check."""

    check: ViewCheck


Matcher = Union[TokenWindowMatcher, LineMatcher, PairedDelimiterMatcher, CustomMatcher]
