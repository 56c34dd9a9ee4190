"""Unit tests for ElixirTokenizer."""

import pytest

from elixir_style_linter.domain.entities import TokenKind
from elixir_style_linter.domain.errors import UnterminatedLiteralError
from elixir_style_linter.infrastructure.gateways.elixir_tokenizer import ElixirTokenizer

SAMPLE = '''defmodule MyApp.Parser do
  @moduledoc """
  Parses #{inspect(:things)} and "quotes".
  """

  @spec parse(binary) :: {:ok, term} | {:error, String.t()}
  def parse(<<header::binary-size(4), rest::binary>>) when header != "" do
    case Regex.run(~r/^(\\d+)\\s*$/u, rest) do
      [_, digits] -> {:ok, String.to_integer(digits) * 0x1F + 1_000.5e-3}
      nil -> {:error, 'no digits'}
    end
  end

  def valid?(%{name: name} = map), do: map[:name] == name && ?a != ?\\n # trailing
  defp pipe(list), do: list |> Enum.map(&(&1 + 1)) |> Enum.join(~w[a b c]a)
end
'''


def _kinds_and_texts(tokens):
    return [(t.kind, t.text) for t in tokens]


class TestRoundTrip:
    """Concatenating the tokens reproduces the input exactly."""

    @pytest.mark.parametrize(
        "source",
        [
            SAMPLE,
            "",
            "\n\n",
            "a\r\nb\r\n",
            "x\t=\f1\v\n",
            "# only a comment",
            "foo :: bar <<< baz ~>> qux",
            'IO.puts("#{"nested #{1 + 2}"}")\n',
            "~S\"\"\"\nraw #{not_interpolated}\n\"\"\"\n",
        ],
    )
    def test_tokens_cover_every_character(self, source: str) -> None:
        tokens = ElixirTokenizer().parse(source)
        assert "".join(t.text for t in tokens) == source

    def test_offsets_are_contiguous(self) -> None:
        tokens = ElixirTokenizer().parse(SAMPLE)
        offset = 0
        for token in tokens:
            assert token.offset == offset
            offset = token.end_offset
        assert offset == len(SAMPLE)


class TestClassification:
    """Each lexical class comes out as a single token of the right kind."""

    def test_assignment_with_interpolated_string(self) -> None:
        tokens = ElixirTokenizer().parse('x = "a #{y} b"')
        assert _kinds_and_texts(tokens) == [
            (TokenKind.IDENTIFIER, "x"),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.OPERATOR, "="),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.LITERAL, '"a #{y} b"'),
        ]

    def test_comment_stops_at_line_break(self) -> None:
        tokens = ElixirTokenizer().parse("foo # hi\nbar")
        assert _kinds_and_texts(tokens) == [
            (TokenKind.IDENTIFIER, "foo"),
            (TokenKind.WHITESPACE, " "),
            (TokenKind.COMMENT, "# hi"),
            (TokenKind.NEWLINE, "\n"),
            (TokenKind.IDENTIFIER, "bar"),
        ]

    def test_predicate_name_and_not_equal(self) -> None:
        texts = [t.text for t in ElixirTokenizer().parse("valid?(x) and foo != bar")]
        assert "valid?" in texts
        assert "!=" in texts
        assert "foo" in texts

    def test_longest_operator_wins(self) -> None:
        tokens = ElixirTokenizer().parse("a |> b === c")
        operators = [t.text for t in tokens if t.kind is TokenKind.OPERATOR]
        assert operators == ["|>", "==="]

    @pytest.mark.parametrize(
        "literal",
        [":ok", ':"hello world"', ":+", ":valid?", "?a", "?\\n", "0x1F", "1_000.5e-3", "~r/a\\/b/i", "~w[a b]a", "'charlist'"],
    )
    def test_literals_are_single_tokens(self, literal: str) -> None:
        tokens = ElixirTokenizer().parse(literal)
        assert _kinds_and_texts(tokens) == [(TokenKind.LITERAL, literal)]

    def test_keyword_key_keeps_colon_as_operator(self) -> None:
        tokens = ElixirTokenizer().parse("[do: 1]")
        assert _kinds_and_texts(tokens)[:3] == [
            (TokenKind.DELIMITER, "["),
            (TokenKind.IDENTIFIER, "do"),
            (TokenKind.OPERATOR, ":"),
        ]

    def test_bitstring_brackets_are_delimiters(self) -> None:
        tokens = ElixirTokenizer().parse("<<1, 2>>")
        assert tokens[0].kind is TokenKind.DELIMITER and tokens[0].text == "<<"
        assert tokens[-1].kind is TokenKind.DELIMITER and tokens[-1].text == ">>"

    def test_crlf_is_one_newline_token(self) -> None:
        tokens = ElixirTokenizer().parse("a\r\nb")
        assert _kinds_and_texts(tokens) == [
            (TokenKind.IDENTIFIER, "a"),
            (TokenKind.NEWLINE, "\r\n"),
            (TokenKind.IDENTIFIER, "b"),
        ]
        assert (tokens[2].line, tokens[2].position.column) == (2, 0)


class TestPositions:
    """Line and column tracking across multi-line tokens."""

    def test_token_after_heredoc_has_correct_line(self) -> None:
        source = 'x = """\none\ntwo\n"""\ny'
        tokens = ElixirTokenizer().parse(source)
        last = tokens[-1]
        assert last.text == "y"
        assert (last.line, last.position.column, last.offset) == (5, 0, len(source) - 1)

    def test_column_is_zero_based(self) -> None:
        tokens = ElixirTokenizer().parse("  foo")
        assert tokens[1].position.column == 2
        assert str(tokens[1].position) == "1:3"


class TestUnterminatedLiterals:
    """Unclosed literals raise with the well-formed prefix attached."""

    def test_unterminated_string(self) -> None:
        with pytest.raises(UnterminatedLiteralError) as excinfo:
            ElixirTokenizer().parse('x = "abc')
        error = excinfo.value
        assert error.kind == "string"
        assert (error.position.line, error.position.column) == (1, 4)
        assert [t.text for t in error.tokens] == ["x", " ", "=", " "]

    def test_unterminated_heredoc(self) -> None:
        with pytest.raises(UnterminatedLiteralError) as excinfo:
            ElixirTokenizer().parse('ok\n@doc """\nnever closed\n')
        assert excinfo.value.kind == "heredoc"
        assert excinfo.value.position.line == 2

    def test_unterminated_sigil(self) -> None:
        with pytest.raises(UnterminatedLiteralError) as excinfo:
            ElixirTokenizer().parse("~r/abc")
        assert excinfo.value.kind == "sigil"
        assert excinfo.value.tokens == []

    def test_unterminated_bitstring_points_at_outermost_opener(self) -> None:
        with pytest.raises(UnterminatedLiteralError) as excinfo:
            ElixirTokenizer().parse("a = <<1, <<2>>")
        error = excinfo.value
        assert error.kind == "bitstring"
        assert error.position.offset == 4
        assert "".join(t.text for t in error.tokens) == "a = "

    def test_unterminated_string_inside_interpolation(self) -> None:
        with pytest.raises(UnterminatedLiteralError):
            ElixirTokenizer().parse('"#{"inner}"')
