"""Rule definitions and the ordered, freezable rule registry."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Iterator, Optional, overload

from elixir_style_linter.domain.entities import Category, Finding, Severity, ViolationKind
from elixir_style_linter.domain.errors import DuplicateRuleError, RegistryFrozenError
from elixir_style_linter.domain.matchers import Matcher


@dataclass(frozen=True)
class Rule:
    """A single checkable style convention. Immutable once registered."""

    rule_id: str
    category: Category
    matcher: Matcher
    severity: Severity
    message: str
    description: str = ""
    fixable: bool = False
    enabled_by_default: bool = True
    kind: ViolationKind = ViolationKind.STYLE

    def render(self, finding: Finding) -> str:
        """Format the message template with the finding's arguments."""
        if not finding.args:
            return self.message
        return self.message.format(**finding.args)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.rule_id,
            "category": self.category.value,
            "severity": self.severity.value,
            "fixable": self.fixable,
            "enabled_by_default": self.enabled_by_default,
            "description": self.description,
        }


class RuleSequence(Sequence):
    """
    Restartable view over registered rules in insertion order.

    Iteration is lazy and starts from the first rule every time.
    """

    def __init__(self, rules: list[Rule]) -> None:
        self._rules = rules

    def __iter__(self) -> Iterator[Rule]:
        for rule in self._rules:
            yield rule

    def __len__(self) -> int:
        return len(self._rules)

    @overload
    def __getitem__(self, index: int) -> Rule: ...

    @overload
    def __getitem__(self, index: slice) -> "list[Rule]": ...

    def __getitem__(self, index):
        return self._rules[index]

    def __repr__(self) -> str:
        return f"RuleSequence({[r.rule_id for r in self._rules]!r})"


class RuleRegistry:
    """Ordered collection of rules keyed by unique identifier."""

    def __init__(self) -> None:
        self._rules: list[Rule] = []
        self._index: dict[str, int] = {}
        self._frozen = False

    def register(self, rule: Rule) -> Rule:
        if self._frozen:
            raise RegistryFrozenError(rule.rule_id)
        if rule.rule_id in self._index:
            raise DuplicateRuleError(rule.rule_id)
        self._index[rule.rule_id] = len(self._rules)
        self._rules.append(rule)
        return rule

    def all(self) -> RuleSequence:
        return RuleSequence(self._rules)

    def get(self, rule_id: str) -> Optional[Rule]:
        index = self._index.get(rule_id)
        return None if index is None else self._rules[index]

    def index_of(self, rule_id: str) -> int:
        """Registration order of a rule."""
        return self._index[rule_id]

    def freeze(self) -> "RuleRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._index

    def __len__(self) -> int:
        return len(self._rules)
