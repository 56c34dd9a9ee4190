"""Use Case: run every registered rule over one token stream."""

import logging
import re
from typing import Iterable, Optional, Sequence

from elixir_style_linter.domain.entities import (
    Finding,
    Severity,
    Token,
    TokenKind,
    Violation,
    ViolationKind,
)
from elixir_style_linter.domain.errors import RuleExecutionError, UnterminatedLiteralError
from elixir_style_linter.domain.matchers import (
    CustomMatcher,
    LineMatcher,
    Matcher,
    PairedDelimiterMatcher,
    TokenWindowMatcher,
)
from elixir_style_linter.domain.registry import Rule, RuleRegistry
from elixir_style_linter.domain.source import SourceView

logger = logging.getLogger(__name__)

SUPPRESSION_PATTERN = re.compile(
    r"exstyle:(?P<scope>disable-next-line|disable)=(?P<rules>[\w/\-]+(?:\s*,\s*[\w/\-]+)*)"
)


class Suppressions:
    """Inline `# exstyle:disable=...` and `# exstyle:disable-next-line=...` comments."""

    def __init__(self, by_line: dict[int, set[str]]) -> None:
        self._by_line = by_line

    @classmethod
    def from_view(cls, view: SourceView) -> "Suppressions":
        by_line: dict[int, set[str]] = {}
        for _, token in view.iter_kind(TokenKind.COMMENT):
            match = SUPPRESSION_PATTERN.search(token.text)
            if not match:
                continue
            line = token.line + (1 if match.group("scope") == "disable-next-line" else 0)
            rules = {r.strip() for r in match.group("rules").split(",")}
            by_line.setdefault(line, set()).update(rules)
        return cls(by_line)

    def hides(self, violation: Violation) -> bool:
        if violation.kind is ViolationKind.RULE_EXECUTION_ERROR:
            return False
        rules = self._by_line.get(violation.position.line, ())
        return violation.rule_id in rules or "all" in rules


class RuleEvaluator:
    """
    Apply each rule, in registry order, to a token sequence.

    Rules are independent: overlapping matches are all reported. A rule whose
    matcher raises is reported once as a rule execution error and the
    remaining rules still run.
    """

    def evaluate(
        self,
        tokens: Sequence[Token],
        registry: RuleRegistry,
        *,
        path: str = "<string>",
        parse_error: Optional[UnterminatedLiteralError] = None,
    ) -> list[Violation]:
        return self.evaluate_view(SourceView(path, tuple(tokens), parse_error), registry)

    def evaluate_view(self, view: SourceView, registry: RuleRegistry) -> list[Violation]:
        collected: list[Violation] = []
        for rule in registry.all():
            try:
                produced = [self._bind(rule, finding, view) for finding in self._run(rule.matcher, view)]
            except Exception as exc:  # noqa: BLE001 - one broken rule must not stop the others
                error = RuleExecutionError(rule.rule_id, exc)
                logger.debug("%s in %s", error, view.path, exc_info=True)
                collected.append(
                    Violation(
                        rule_id=rule.rule_id,
                        severity=Severity.ERROR,
                        position=view.start,
                        message=str(error),
                        path=view.path,
                        kind=ViolationKind.RULE_EXECUTION_ERROR,
                    )
                )
                continue
            collected.extend(produced)

        suppressions = Suppressions.from_view(view)
        kept = [v for v in collected if not suppressions.hides(v)]
        # list.sort is stable, so equal positions keep registry order.
        kept.sort(key=lambda v: v.position.offset)
        return kept

    def _run(self, matcher: Matcher, view: SourceView) -> Iterable[Finding]:
        if isinstance(matcher, TokenWindowMatcher):
            return self._run_window(matcher, view)
        elif isinstance(matcher, LineMatcher):
            return (finding for line in view.lines for finding in matcher.check(line))
        elif isinstance(matcher, PairedDelimiterMatcher):
            return (
                finding
                for open_index, close_index in view.delimiter_pairs
                for finding in matcher.check(view, open_index, close_index)
            )
        elif isinstance(matcher, CustomMatcher):
            return matcher.check(view)
        else:
            raise TypeError(f"Unknown matcher type: {type(matcher).__name__}")

    @staticmethod
    def _run_window(matcher: TokenWindowMatcher, view: SourceView) -> Iterable[Finding]:
        if matcher.significant_only:
            tokens: Sequence[Token] = [view.tokens[i] for i in view.significant]
        else:
            tokens = view.tokens
        size = matcher.size
        for start in range(len(tokens) - size + 1):
            yield from matcher.check(tuple(tokens[start : start + size]))

    @staticmethod
    def _bind(rule: Rule, finding: Finding, view: SourceView) -> Violation:
        return Violation(
            rule_id=rule.rule_id,
            severity=rule.severity,
            position=finding.position,
            message=rule.render(finding),
            path=view.path,
            fix=finding.fix,
            kind=rule.kind,
        )
