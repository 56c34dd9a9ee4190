"""Lossless Elixir tokenizer.

Every character of the input ends up in exactly one token, so joining the
token texts reproduces the source. Literals (strings, charlists, heredocs,
sigils, atoms, numbers, char literals) are single LITERAL tokens; string
interpolation is kept inside the literal it belongs to.
"""

import logging
from typing import Optional

from elixir_style_linter.domain.entities import Position, Token, TokenKind
from elixir_style_linter.domain.errors import UnterminatedLiteralError
from elixir_style_linter.domain.protocols import TokenizerProtocol

logger = logging.getLogger(__name__)

# Longest first: the scanner takes the first entry that matches.
OPERATORS: tuple[str, ...] = (
    "===", "!==", "<<<", ">>>", "|||", "&&&", "^^^", "~~~", "<<~", "~>>",
    "<~>", "<|>", "...", "//",
    "**", "==", "!=", "<=", ">=", "&&", "||", "|>", "<>", "++", "--", "->",
    "<-", "=~", "::", "..", "=>", "~>", "<~", "\\\\", "<<", ">>",
    "+", "-", "*", "/", "=", "<", ">", "!", "^", "&", "|", ".", "@", "%",
    ":", "?", "~", "\\",
)
BITSTRING_OPEN = "<<"
BITSTRING_CLOSE = ">>"
DELIMITER_CHARS = frozenset("()[]{},;")
INLINE_WHITESPACE = frozenset(" \t\f\v")
SIGIL_PAIRS: dict[str, str] = {"(": ")", "[": "]", "{": "}", "<": ">"}
SIGIL_OPENERS = frozenset('/|"\'([{<')


class _Unterminated(Exception):
    """Internal signal: a literal ran to end of input."""

    def __init__(self, kind: str) -> None:
        super().__init__(kind)
        self.kind = kind


def _is_ident_start(char: str) -> bool:
    return char == "_" or char.isalpha()


def _is_ident_char(char: str) -> bool:
    return char == "_" or char.isalnum()


class _Scanner:
    """Single pass over one text. Not reusable."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0
        self.line = 1
        self.column = 0
        self.tokens: list[Token] = []
        self._open_bitstrings: list[int] = []

    # -- emission --------------------------------------------------------

    def emit(self, kind: TokenKind, end: int) -> None:
        chunk = self.text[self.pos:end]
        self.tokens.append(Token(kind, chunk, Position.at(self.line, self.column, self.pos)))
        newlines = chunk.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(chunk) - chunk.rfind("\n") - 1
        else:
            self.column += len(chunk)
        self.pos = end

    def here(self) -> Position:
        return Position.at(self.line, self.column, self.pos)

    def peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else ""

    # -- main loop -------------------------------------------------------

    def run(self) -> list[Token]:
        text = self.text
        while self.pos < len(text):
            char = text[self.pos]
            if char == "\n" or text.startswith("\r\n", self.pos):
                self.emit(TokenKind.NEWLINE, self.pos + (1 if char == "\n" else 2))
            elif char in INLINE_WHITESPACE or char == "\r":
                self.emit(TokenKind.WHITESPACE, self._whitespace_end())
            elif char == "#":
                self.emit(TokenKind.COMMENT, self._line_end(self.pos))
            elif char in "\"'":
                self._literal(self._quoted_literal_end)
            elif char == "?" and self.pos + 1 < len(text) and not text[self.pos + 1].isspace():
                self.emit(TokenKind.LITERAL, self._char_literal_end(self.pos + 1))
            elif char == "~" and self.pos + 1 < len(text) and text[self.pos + 1].isalpha():
                self._literal(self._sigil_end)
            elif char == ":" and self._starts_atom():
                self._literal(self._atom_end)
            elif char.isdigit():
                self.emit(TokenKind.LITERAL, self._number_end(self.pos))
            elif _is_ident_start(char):
                self.emit(TokenKind.IDENTIFIER, self._identifier_end(self.pos))
            elif char in DELIMITER_CHARS:
                self.emit(TokenKind.DELIMITER, self.pos + 1)
            else:
                self._operator()
        if self._open_bitstrings:
            self._fail("bitstring", self._open_bitstrings[0])
        return self.tokens

    def _literal(self, find_end) -> None:
        try:
            end = find_end(self.pos)
        except _Unterminated as exc:
            kind = exc.kind
        else:
            self.emit(TokenKind.LITERAL, end)
            return
        self._fail(kind, len(self.tokens), self.here())

    def _fail(self, kind: str, token_index: int, position: Optional[Position] = None) -> None:
        if position is None:
            position = self.tokens[token_index].position
        kept = self.tokens[:token_index]
        logger.debug("unterminated %s at %s; keeping %d tokens", kind, position, len(kept))
        raise UnterminatedLiteralError(kind, position, kept)

    def _operator(self) -> None:
        for op in OPERATORS:
            if self.text.startswith(op, self.pos):
                break
        else:
            op = self.text[self.pos]
        if op == BITSTRING_OPEN:
            self._open_bitstrings.append(len(self.tokens))
            self.emit(TokenKind.DELIMITER, self.pos + 2)
        elif op == BITSTRING_CLOSE:
            if self._open_bitstrings:
                self._open_bitstrings.pop()
            self.emit(TokenKind.DELIMITER, self.pos + 2)
        else:
            self.emit(TokenKind.OPERATOR, self.pos + len(op))

    # -- scanners returning end offsets ------------------------------------

    def _whitespace_end(self) -> int:
        end = self.pos
        text = self.text
        while end < len(text):
            char = text[end]
            if char in INLINE_WHITESPACE or (char == "\r" and not text.startswith("\r\n", end)):
                end += 1
            else:
                break
        return end

    def _line_end(self, start: int) -> int:
        end = self.text.find("\n", start)
        if end == -1:
            return len(self.text)
        if end > start and self.text[end - 1] == "\r":
            return end - 1
        return end

    def _identifier_end(self, start: int) -> int:
        end = start + 1
        text = self.text
        while end < len(text) and _is_ident_char(text[end]):
            end += 1
        # foo? and foo! are identifiers; keep `foo != bar` and `foo !== bar` intact.
        if end < len(text) and text[end] in "?!" and not text.startswith("=", end + 1):
            end += 1
        return end

    def _number_end(self, start: int) -> int:
        text = self.text
        if text.startswith(("0x", "0X"), start):
            return self._run(start + 2, "0123456789abcdefABCDEF_")
        if text.startswith(("0b", "0B"), start):
            return self._run(start + 2, "01_")
        if text.startswith(("0o", "0O"), start):
            return self._run(start + 2, "01234567_")
        end = self._run(start, "0123456789_")
        if end + 1 < len(text) and text[end] == "." and text[end + 1].isdigit():
            end = self._run(end + 1, "0123456789_")
            if end < len(text) and text[end] in "eE":
                exp = end + 1
                if exp < len(text) and text[exp] in "+-":
                    exp += 1
                if exp < len(text) and text[exp].isdigit():
                    end = self._run(exp, "0123456789_")
        return end

    def _run(self, start: int, allowed: str) -> int:
        end = start
        while end < len(self.text) and self.text[end] in allowed:
            end += 1
        return end

    def _char_literal_end(self, start: int) -> int:
        if self.text[start] == "\\" and start + 1 < len(self.text):
            return start + 2
        return start + 1

    def _starts_atom(self) -> bool:
        nxt = self.peek(1)
        if not nxt or nxt == ":":
            return False
        if nxt == '"' or _is_ident_start(nxt):
            # `foo:bar` is not valid Elixir; `foo: bar` keeps its colon as an operator.
            return not self.tokens or self.tokens[-1].kind is not TokenKind.IDENTIFIER or self.tokens[-1].end_offset != self.pos
        if nxt.isspace():
            return False
        return any(self.text.startswith(op, self.pos + 1) for op in OPERATORS if op not in (":", "::"))

    def _atom_end(self, start: int) -> int:
        text = self.text
        body = start + 1
        if text[body] == '"':
            try:
                return _string_end(text, body + 1, '"', interpolate=True)
            except _Unterminated:
                raise _Unterminated("quoted atom") from None
        if _is_ident_start(text[body]):
            end = body + 1
            while end < len(text) and (_is_ident_char(text[end]) or text[end] == "@"):
                end += 1
            if end < len(text) and text[end] in "?!":
                end += 1
            return end
        for op in OPERATORS:
            if text.startswith(op, body):
                return body + len(op)
        return body + 1

    def _quoted_literal_end(self, start: int) -> int:
        return _quoted_end(self.text, start)

    def _sigil_end(self, start: int) -> int:
        return _sigil_end(self.text, start)


def _quoted_end(text: str, start: int) -> int:
    """End of a string, charlist or heredoc opening at start."""
    quote = text[start]
    triple = quote * 3
    if text.startswith(triple, start):
        try:
            return _string_end(text, start + 3, triple, interpolate=True)
        except _Unterminated:
            raise _Unterminated("heredoc") from None
    try:
        return _string_end(text, start + 1, quote, interpolate=True)
    except _Unterminated:
        raise _Unterminated("string" if quote == '"' else "charlist") from None


def _string_end(text: str, pos: int, closer: str, interpolate: bool) -> int:
    """Scan a quoted body starting after the opener; return the offset after closer."""
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if interpolate and text.startswith("#{", pos):
            pos = _interpolation_end(text, pos + 2)
            continue
        if text.startswith(closer, pos):
            return pos + len(closer)
        pos += 1
    raise _Unterminated("string")


def _interpolation_end(text: str, pos: int) -> int:
    """Skip the code inside #{...}, which may contain nested literals and braces."""
    depth = 1
    while pos < len(text):
        char = text[pos]
        if char in "\"'":
            pos = _quoted_end(text, pos)
        elif char == "?" and pos + 1 < len(text) and not _is_ident_char(text[pos - 1]):
            pos = pos + 3 if text[pos + 1] == "\\" else pos + 2
        elif char == "#" and not text.startswith("#{", pos):
            newline = text.find("\n", pos)
            pos = len(text) if newline == -1 else newline
        elif char == "~" and pos + 1 < len(text) and text[pos + 1].isalpha():
            pos = _sigil_end(text, pos)
        elif char == "{":
            depth += 1
            pos += 1
        elif char == "}":
            depth -= 1
            pos += 1
            if depth == 0:
                return pos
        else:
            pos += 1
    raise _Unterminated("string")


def _sigil_end(text: str, start: int) -> int:
    """End of a sigil such as ~r/foo/i, ~w[a b]a or ~S\"\"\"...\"\"\"."""
    pos = start + 1
    if text[pos].islower():
        pos += 1
        interpolate = True
    else:
        while pos < len(text) and (text[pos].isupper() or text[pos].isdigit()):
            pos += 1
        interpolate = False
    if pos >= len(text):
        raise _Unterminated("sigil")
    opener = text[pos]
    if opener not in SIGIL_OPENERS:
        return pos
    if opener in "\"'" and text.startswith(opener * 3, pos):
        closer = opener * 3
        body = pos + 3
    else:
        closer = SIGIL_PAIRS.get(opener, opener)
        body = pos + 1
    try:
        end = _string_end(text, body, closer, interpolate)
    except _Unterminated:
        raise _Unterminated("sigil") from None
    while end < len(text) and text[end].isalnum():
        end += 1
    return end


class ElixirTokenizer(TokenizerProtocol):
    """Converts Elixir source text into a flat, lossless token list."""

    def parse(self, text: str) -> list[Token]:
        """
        Tokenize text.

        Raises:
            UnterminatedLiteralError: a literal or bitstring is not closed
                before end of input. The error carries the tokens scanned
                before the literal's opening.
        """
        return _Scanner(text).run()
