"""Exception hierarchy for the style linter."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from elixir_style_linter.domain.entities import Position, Token


class StyleLinterError(Exception):
    """Base class for every error raised by the linter."""


class RegistryError(StyleLinterError):
    """Misuse of the rule registry. Fatal at startup."""


class DuplicateRuleError(RegistryError):
    """A rule id was registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Rule '{rule_id}' is already registered.")
        self.rule_id = rule_id


class RegistryFrozenError(RegistryError):
    """A rule was registered after the registry was frozen."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Cannot register '{rule_id}': the rule registry is frozen.")
        self.rule_id = rule_id


class UnterminatedLiteralError(StyleLinterError):
    """
    A quoted literal, sigil or bitstring runs to end of input.

    Carries the tokens produced before the opening delimiter so the caller
    can keep evaluating the well-formed prefix of the file.
    """

    def __init__(self, kind: str, position: "Position", tokens: Optional[list["Token"]] = None) -> None:
        super().__init__(
            f"Unterminated {kind} starting at line {position.line}, column {position.column + 1}."
        )
        self.kind = kind
        self.position = position
        self.tokens: list["Token"] = list(tokens or [])


class RuleExecutionError(StyleLinterError):
    """A rule matcher raised while inspecting a token stream."""

    def __init__(self, rule_id: str, cause: BaseException) -> None:
        super().__init__(f"Rule '{rule_id}' failed: {type(cause).__name__}: {cause}")
        self.rule_id = rule_id
        self.cause = cause


class UsageError(StyleLinterError):
    """Invalid command line invocation. Exit code 2, no report."""


class ConfigError(UsageError):
    """Invalid configuration file or configuration value."""
