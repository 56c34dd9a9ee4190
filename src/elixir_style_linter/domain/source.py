"""Read-only views over a tokenized source file handed to rule matchers."""

from bisect import bisect_right
from dataclasses import dataclass
from functools import cached_property
from typing import TYPE_CHECKING, Iterator, Optional

from elixir_style_linter.domain.entities import Position, Token, TokenKind

if TYPE_CHECKING:
    from elixir_style_linter.domain.errors import UnterminatedLiteralError

DELIMITER_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}", "<<": ">>"}


def _physical_lines(text: str) -> Iterator[str]:
    """Split on '\\n' only, keeping the terminator. str.splitlines also splits on \\f, \\v, etc."""
    start = 0
    while start < len(text):
        end = text.find("\n", start)
        if end == -1:
            yield text[start:]
            return
        yield text[start : end + 1]
        start = end + 1


@dataclass(frozen=True)
class SourceLine:
    """
    One physical line: its text (without line break) and the tokens starting on it.

    truncated marks the last line of a prefix cut short by an unterminated
    literal; its real end lies beyond the tokens.
    """

    number: int
    text: str
    start_offset: int
    tokens: tuple[Token, ...]
    truncated: bool = False

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.text)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def position(self, column: int) -> Position:
        return Position.at(self.number, column, self.start_offset + column)

    @property
    def indentation(self) -> str:
        return self.text[: len(self.text) - len(self.text.lstrip(" \t"))]


@dataclass(frozen=True)
class SourceView:
    """
    Tokens of one file plus derived lookups.

    When the tokenizer stopped at an unterminated literal, tokens only cover
    the prefix before it and parse_error holds the failure.
    """

    path: str
    tokens: tuple[Token, ...]
    parse_error: Optional["UnterminatedLiteralError"] = None

    @property
    def complete(self) -> bool:
        return self.parse_error is None

    @cached_property
    def text(self) -> str:
        return "".join(t.text for t in self.tokens)

    @cached_property
    def lines(self) -> tuple[SourceLine, ...]:
        by_line: dict[int, list[Token]] = {}
        for token in self.tokens:
            by_line.setdefault(token.line, []).append(token)
        lines: list[SourceLine] = []
        offset = 0
        for number, raw in enumerate(_physical_lines(self.text), start=1):
            terminated = raw.endswith("\n")
            text = raw[:-1] if terminated else raw
            if text.endswith("\r"):
                text = text[:-1]
            truncated = not terminated and not self.complete
            lines.append(SourceLine(number, text, offset, tuple(by_line.get(number, ())), truncated))
            offset += len(raw)
        return tuple(lines)

    @cached_property
    def significant(self) -> tuple[int, ...]:
        """Indices of tokens that are neither whitespace nor line breaks."""
        return tuple(i for i, t in enumerate(self.tokens) if not t.is_blank)

    @cached_property
    def delimiter_pairs(self) -> tuple[tuple[int, int], ...]:
        """Matched (open, close) token indices in closing order. Stray closers are ignored."""
        pairs: list[tuple[int, int]] = []
        stack: list[int] = []
        for i, token in enumerate(self.tokens):
            if token.kind is not TokenKind.DELIMITER:
                continue
            if token.text in DELIMITER_PAIRS:
                stack.append(i)
            elif stack and DELIMITER_PAIRS[self.tokens[stack[-1]].text] == token.text:
                pairs.append((stack.pop(), i))
        return tuple(pairs)

    def next_significant(self, index: int) -> Optional[int]:
        for i in range(index + 1, len(self.tokens)):
            if not self.tokens[i].is_blank:
                return i
        return None

    def previous_significant(self, index: int) -> Optional[int]:
        for i in range(index - 1, -1, -1):
            if not self.tokens[i].is_blank:
                return i
        return None

    def iter_kind(self, kind: TokenKind) -> Iterator[tuple[int, Token]]:
        for i, token in enumerate(self.tokens):
            if token.kind is kind:
                yield i, token

    @property
    def start(self) -> Position:
        return Position.at(1, 0, 0)

    def position_of(self, offset: int) -> Position:
        """Translate an absolute offset into line and column."""
        starts = [line.start_offset for line in self.lines]
        if not starts:
            return self.start
        index = bisect_right(starts, offset) - 1
        line = self.lines[max(index, 0)]
        return Position.at(line.number, offset - line.start_offset, offset)
