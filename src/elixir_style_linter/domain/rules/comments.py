"""Comment etiquette."""

import re
from typing import Iterable

from elixir_style_linter.domain.entities import Category, Finding, Fix, Severity, Token, TokenKind
from elixir_style_linter.domain.matchers import TokenWindowMatcher
from elixir_style_linter.domain.registry import Rule

ANNOTATION_KEYWORDS: tuple[str, ...] = ("TODO", "FIXME", "OPTIMIZE", "HACK", "REVIEW")
_ANNOTATION = re.compile(
    r"^#(?P<lead>\s*)(?P<keyword>" + "|".join(ANNOTATION_KEYWORDS) + r")\b(?P<sep>\s*:?\s*)(?P<note>\S.*)$",
    re.IGNORECASE,
)


def _space_after_hash(window: tuple[Token, ...]) -> Iterable[Finding]:
    (comment,) = window
    if comment.kind is not TokenKind.COMMENT or len(comment.text) < 2:
        return
    if comment.offset == 0 and comment.text.startswith("#!"):
        return
    body = comment.text[1:]
    if body[0].isspace() or set(body) == {"#"}:
        return
    yield Finding(comment.position, fix=Fix.insert(comment.offset + 1, " "))


def _inline_comment_spacing(window: tuple[Token, ...]) -> Iterable[Finding]:
    before, comment = window
    if comment.kind is TokenKind.COMMENT and not before.is_blank:
        yield Finding(comment.position, fix=Fix.insert(comment.offset, " "))


def _annotation_format(window: tuple[Token, ...]) -> Iterable[Finding]:
    (comment,) = window
    if comment.kind is not TokenKind.COMMENT:
        return
    match = _ANNOTATION.match(comment.text.rstrip())
    if not match:
        return
    keyword = match.group("keyword")
    separator = match.group("sep")
    if not separator:
        # TODO(owner) and similar custom forms are left alone.
        return
    if not keyword.isupper() and ":" not in separator:
        # A plain word such as "todo list" rather than an annotation.
        return
    expected = f"# {keyword.upper()}: {match.group('note')}"
    current = comment.text.rstrip()
    if current != expected:
        yield Finding(
            comment.position,
            args={"keyword": keyword.upper()},
            fix=Fix(comment.offset, comment.offset + len(current), expected),
        )


def build() -> list[Rule]:
    return [
        Rule(
            rule_id="comments/space-after-hash",
            category=Category.COMMENTS,
            matcher=TokenWindowMatcher(1, _space_after_hash),
            severity=Severity.WARNING,
            message="Put one space between '#' and the comment text",
            description="Use one space between the leading # of a comment and its text.",
            fixable=True,
        ),
        Rule(
            rule_id="comments/inline-comment-spacing",
            category=Category.COMMENTS,
            matcher=TokenWindowMatcher(2, _inline_comment_spacing),
            severity=Severity.WARNING,
            message="Separate an inline comment from the code with a space",
            description="Inline comments are separated from code by at least one space.",
            fixable=True,
        ),
        Rule(
            rule_id="comments/annotation-format",
            category=Category.COMMENTS,
            matcher=TokenWindowMatcher(1, _annotation_format),
            severity=Severity.WARNING,
            message="Write annotations as '# {keyword}: note'",
            description="Annotation keywords are uppercase and followed by a colon and a space.",
            fixable=True,
        ),
    ]
