"""Unit tests for the layout rules."""

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import Fix, Severity
from elixir_style_linter.use_cases.apply_fixes import apply_fixes


class TestTrailingWhitespace:
    def test_two_trailing_spaces_give_one_violation_at_end_of_line(self, check) -> None:
        violations = check("foo  \n", "layout/trailing-whitespace")

        assert len(violations) == 1
        violation = violations[0]
        assert (violation.position.line, violation.position.column) == (1, 3)
        assert violation.severity is Severity.WARNING
        assert violation.fix == Fix(3, 5, "")
        assert apply_fixes("foo  \n", violations).text == "foo\n"

    def test_comment_with_trailing_spaces(self, check) -> None:
        violations = check("# hi  \n", "layout/trailing-whitespace")

        assert [v.position.column for v in violations] == [4]
        assert apply_fixes("# hi  \n", violations).text == "# hi\n"

    def test_whitespace_inside_heredoc_is_content(self, check) -> None:
        assert check('x = """\nline  \n"""\n', "layout/trailing-whitespace") == []

    def test_crlf_line_endings(self, check) -> None:
        violations = check("foo \r\nbar\r\n", "layout/trailing-whitespace")

        assert len(violations) == 1
        assert apply_fixes("foo \r\nbar\r\n", violations).text == "foo\r\nbar\r\n"


class TestTabsAndIndentation:
    def test_tab_indentation_is_an_error_with_fix(self, check) -> None:
        violations = check("\tfoo\n", "layout/no-tabs")

        assert len(violations) == 1
        assert violations[0].severity is Severity.ERROR
        assert apply_fixes("\tfoo\n", violations).text == "  foo\n"

    def test_tab_width_follows_config(self, check) -> None:
        config = LinterConfig(indent_width=4)
        violations = check("\tfoo\n", "layout/no-tabs", config=config)

        assert apply_fixes("\tfoo\n", violations).text == "    foo\n"

    def test_odd_indentation(self, check) -> None:
        violations = check("   foo\n  bar\n", "layout/indentation-width")

        assert len(violations) == 1
        assert violations[0].position.line == 1
        assert violations[0].message == "Indentation should be a multiple of 2 spaces (found 3)"


class TestLineLength:
    def test_position_is_first_column_past_the_limit(self, check) -> None:
        config = LinterConfig(max_line_length=10)
        violations = check("x = 123456789\nok\n", "layout/line-length", config=config)

        assert len(violations) == 1
        assert (violations[0].position.line, violations[0].position.column) == (1, 10)
        assert violations[0].message == "Line is 13 characters long (limit 10)"

    def test_default_limit_allows_short_lines(self, check) -> None:
        assert check("x = 1\n", "layout/line-length") == []


class TestFinalNewline:
    def test_missing_newline_is_inserted(self, check) -> None:
        violations = check("foo", "layout/final-newline")

        assert [v.message for v in violations] == ["File must end with a newline"]
        assert (violations[0].position.line, violations[0].position.column) == (1, 3)
        assert apply_fixes("foo", violations).text == "foo\n"

    def test_extra_trailing_newlines_are_removed(self, check) -> None:
        violations = check("foo\n\n\n", "layout/final-newline")

        assert len(violations) == 1
        assert violations[0].position.line == 2
        assert apply_fixes("foo\n\n\n", violations).text == "foo\n"

    def test_empty_file_is_fine(self, check) -> None:
        assert check("", "layout/final-newline") == []

    def test_skipped_when_file_did_not_tokenize(self, check) -> None:
        assert check('x = "open', "layout/final-newline") == []


class TestConsecutiveBlankLines:
    def test_run_of_blank_lines_collapses_to_one(self, check) -> None:
        source = "a\n\n\n\nb\n"
        violations = check(source, "layout/consecutive-blank-lines")

        assert len(violations) == 1
        assert violations[0].position.line == 3
        assert violations[0].message == "Use at most one blank line in a row (found 3)"
        assert apply_fixes(source, violations).text == "a\n\nb\n"

    def test_single_blank_line_is_fine(self, check) -> None:
        assert check("a\n\nb\n", "layout/consecutive-blank-lines") == []


class TestSpacing:
    def test_space_after_comma(self, check) -> None:
        violations = check("f(a,b)\n", "layout/space-after-comma")

        assert [v.position.column for v in violations] == [3]
        assert apply_fixes("f(a,b)\n", violations).text == "f(a, b)\n"

    def test_comma_before_line_break_is_fine(self, check) -> None:
        assert check("[1,\n 2]\n", "layout/space-after-comma") == []

    def test_operator_without_spaces(self, check) -> None:
        violations = check("x=1\n", "layout/space-around-operator")

        assert [v.message for v in violations] == ["Surround '=' with spaces"]
        assert apply_fixes("x=1\n", violations).text == "x = 1\n"

    def test_operator_missing_one_side(self, check) -> None:
        violations = check("x =1\n", "layout/space-around-operator")

        assert apply_fixes("x =1\n", violations).text == "x = 1\n"

    def test_spaced_operator_is_fine(self, check) -> None:
        assert check("list |> Enum.map(fun)\n", "layout/space-around-operator") == []

    def test_spaces_inside_parentheses(self, check) -> None:
        violations = check("f( a )\n", "layout/space-inside-delimiters")

        assert [v.message for v in violations] == ["No space after '('", "No space before ')'"]
        assert apply_fixes("f( a )\n", violations).text == "f(a)\n"

    def test_multiline_delimiters_are_fine(self, check) -> None:
        assert check("f(\n  a\n)\n", "layout/space-inside-delimiters") == []
