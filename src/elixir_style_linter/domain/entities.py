import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Sequence


class Severity(Enum):
    """How much a violation matters. Only errors fail a run."""

    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        return 0 if self is Severity.WARNING else 1

    @classmethod
    def parse(cls, value: str) -> "Severity":
        """Parse a severity name, case-insensitively."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown severity '{value}'. Expected one of: warning, error."
            ) from None


class Category(Enum):
    """Style guide section a rule belongs to."""

    LAYOUT = "layout"
    SYNTAX = "syntax"
    NAMING = "naming"
    COMMENTS = "comments"
    MODULES = "modules"
    REGEX = "regex"
    EXCEPTIONS = "exceptions"


class TokenKind(Enum):
    """Lexical class of a token."""

    IDENTIFIER = "identifier"
    OPERATOR = "operator"
    WHITESPACE = "whitespace"
    NEWLINE = "newline"
    COMMENT = "comment"
    LITERAL = "literal"
    DELIMITER = "delimiter"


@dataclass(frozen=True, order=True)
class Position:
    """
    Location in a source text.

    line is 1-based, column is the 0-based character offset within the line
    and offset is the absolute character index. Ordering uses offset first.
    """

    offset: int
    line: int
    column: int

    @classmethod
    def at(cls, line: int, column: int, offset: int) -> "Position":
        return cls(offset=offset, line=line, column=column)

    def __str__(self) -> str:
        return f"{self.line}:{self.column + 1}"


@dataclass(frozen=True)
class Token:
    """Classified lexical unit. Concatenating token texts reproduces the input."""

    kind: TokenKind
    text: str
    position: Position

    @property
    def offset(self) -> int:
        return self.position.offset

    @property
    def end_offset(self) -> int:
        return self.position.offset + len(self.text)

    @property
    def line(self) -> int:
        return self.position.line

    def is_(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        """True when the token has this kind and, if given, this exact text."""
        return self.kind is kind and (text is None or self.text == text)

    @property
    def is_blank(self) -> bool:
        return self.kind in (TokenKind.WHITESPACE, TokenKind.NEWLINE)


@dataclass(frozen=True)
class Fix:
    """Replace text[start:end] with replacement. Offsets refer to the unfixed text."""

    start: int
    end: int
    replacement: str

    @classmethod
    def insert(cls, offset: int, text: str) -> "Fix":
        return cls(start=offset, end=offset, replacement=text)

    @classmethod
    def delete(cls, start: int, end: int) -> "Fix":
        return cls(start=start, end=end, replacement="")

    def conflicts_with(self, other: "Fix") -> bool:
        """Two edits conflict when they start together or their spans overlap."""
        if self.start == other.start:
            return True
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True)
class Finding:
    """A single match reported by a matcher, before it is bound to a rule."""

    position: Position
    args: dict[str, Any] = field(default_factory=dict)
    fix: Optional[Fix] = None


class ViolationKind(Enum):
    STYLE = "style"
    RULE_EXECUTION_ERROR = "rule-execution-error"
    UNTERMINATED_LITERAL = "unterminated-literal"


@dataclass(frozen=True)
class Violation:
    """A rule firing against a location in a scanned file."""

    rule_id: str
    severity: Severity
    position: Position
    message: str
    path: str = "<string>"
    fix: Optional[Fix] = None
    kind: ViolationKind = ViolationKind.STYLE

    @property
    def fixable(self) -> bool:
        return self.fix is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for the JSON reporter."""
        return {
            "rule": self.rule_id,
            "severity": self.severity.value,
            "kind": self.kind.value,
            "line": self.position.line,
            "column": self.position.column + 1,
            "message": self.message,
            "fix": (
                {
                    "start": self.fix.start,
                    "end": self.fix.end,
                    "replacement": self.fix.replacement,
                }
                if self.fix
                else None
            ),
        }


@dataclass(frozen=True)
class FixOutcome:
    """Result of applying a batch of fixes to a working copy of a text."""

    text: str
    applied: tuple[Violation, ...] = ()
    unresolved: tuple[Violation, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.applied)


@dataclass(frozen=True)
class FileReport:
    """Everything the run learned about one file."""

    path: str
    violations: tuple[Violation, ...] = ()
    fixes_applied: int = 0
    unresolved: tuple[Violation, ...] = ()
    error: Optional[str] = None

    @property
    def readable(self) -> bool:
        return self.error is None

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.violations if v.severity is severity)

    def filtered(self, threshold: Severity) -> "FileReport":
        """Drop violations below the threshold severity."""
        kept = tuple(v for v in self.violations if v.severity.rank >= threshold.rank)
        return dataclasses.replace(self, violations=kept)


@dataclass(frozen=True)
class CheckResult:
    """Reports of one run, sorted by path. cancelled is set when the run was interrupted."""

    reports: tuple[FileReport, ...] = ()
    cancelled: bool = False


@dataclass(frozen=True)
class RunSummary:
    """Totals across every file of a run."""

    files: int
    errors: int
    warnings: int
    fixes_applied: int = 0
    unresolved: int = 0
    unreadable: int = 0
    fix_mode: bool = False
    cancelled: bool = False

    @classmethod
    def from_reports(
        cls, reports: "Sequence[FileReport]", fix_mode: bool = False, cancelled: bool = False
    ) -> "RunSummary":
        return cls(
            files=len(reports),
            errors=sum(r.count(Severity.ERROR) for r in reports),
            warnings=sum(r.count(Severity.WARNING) for r in reports),
            fixes_applied=sum(r.fixes_applied for r in reports),
            unresolved=sum(len(r.unresolved) for r in reports),
            unreadable=sum(1 for r in reports if not r.readable),
            fix_mode=fix_mode,
            cancelled=cancelled,
        )

    @property
    def exit_code(self) -> int:
        if self.unreadable or self.cancelled:
            return 2
        return 1 if self.errors else 0

    def render(self) -> str:
        parts = [
            f"Scanned {self.files} file(s): {self.errors} error(s), {self.warnings} warning(s)"
        ]
        if self.fix_mode:
            parts.append(f"{self.fixes_applied} fix(es) applied, {self.unresolved} unresolved")
        if self.unreadable:
            parts.append(f"{self.unreadable} file(s) could not be read")
        if self.cancelled:
            parts.append("interrupted before all files were checked")
        return ", ".join(parts)

    def to_dict(self) -> dict[str, object]:
        return {
            "files": self.files,
            "errors": self.errors,
            "warnings": self.warnings,
            "fixes_applied": self.fixes_applied,
            "unresolved": self.unresolved,
            "unreadable": self.unreadable,
            "cancelled": self.cancelled,
            "exit_code": self.exit_code,
        }
