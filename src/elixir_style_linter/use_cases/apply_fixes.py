"""Use Case: Apply Fixes to Source Code."""

import logging
from typing import Callable, Sequence

from elixir_style_linter.domain.entities import Fix, FixOutcome, Violation

logger = logging.getLogger(__name__)

MAX_FIX_PASSES = 10


def apply_fixes(text: str, violations: Sequence[Violation]) -> FixOutcome:
    """
    Apply each violation's fix to a working copy of text.

    Fixes are taken in report order and refer to offsets in the original
    text. A fix touching a span already altered by an earlier fix in the
    same pass is skipped and returned as unresolved.
    """
    accepted: list[Fix] = []
    applied: list[Violation] = []
    unresolved: list[Violation] = []
    for violation in violations:
        fix = violation.fix
        if fix is None:
            continue
        if fix.start < 0 or fix.end > len(text) or fix.start > fix.end:
            logger.debug("dropping out-of-range fix %s for %s", fix, violation.rule_id)
            unresolved.append(violation)
            continue
        if any(fix.conflicts_with(other) for other in accepted):
            unresolved.append(violation)
            continue
        accepted.append(fix)
        applied.append(violation)

    fixed = text
    for fix in sorted(accepted, key=lambda f: (f.start, f.end), reverse=True):
        fixed = fixed[: fix.start] + fix.replacement + fixed[fix.end :]
    return FixOutcome(text=fixed, applied=tuple(applied), unresolved=tuple(unresolved))


class ApplyFixesUseCase:
    """
    Fix a text to a fixed point.

    Each pass re-evaluates the current text and applies whatever fixes do
    not overlap. Fixes skipped in one pass get another chance after the
    text is re-checked, so running the fixer again on its own output is a
    no-op.
    """

    def __init__(
        self,
        evaluate: Callable[[str], list[Violation]],
        max_passes: int = MAX_FIX_PASSES,
    ) -> None:
        self.evaluate = evaluate
        self.max_passes = max_passes

    def execute(self, text: str) -> tuple[FixOutcome, list[Violation]]:
        """Return the overall outcome plus the violations left in the fixed text."""
        current = text
        applied: list[Violation] = []
        unresolved: tuple[Violation, ...] = ()
        violations = self.evaluate(current)
        for number in range(1, self.max_passes + 1):
            outcome = apply_fixes(current, violations)
            unresolved = outcome.unresolved
            if not outcome.changed or outcome.text == current:
                break
            applied.extend(outcome.applied)
            logger.debug("fix pass %d applied %d fix(es)", number, len(outcome.applied))
            current = outcome.text
            violations = self.evaluate(current)
        else:
            # Out of passes: whatever still carries a fix is left unresolved.
            unresolved = tuple(v for v in violations if v.fixable)
        return FixOutcome(text=current, applied=tuple(applied), unresolved=unresolved), violations
