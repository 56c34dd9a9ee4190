"""Module layout: one module per file, directive order, file naming."""

from pathlib import PurePath
from typing import Iterable, Optional

from elixir_style_linter.domain.entities import Category, Finding, Severity, TokenKind
from elixir_style_linter.domain.matchers import CustomMatcher
from elixir_style_linter.domain.registry import Rule
from elixir_style_linter.domain.rules.helpers import (
    block_depths,
    is_op,
    iter_modules,
    module_name_at,
    starts_line,
    to_snake_case,
)
from elixir_style_linter.domain.source import SourceView

# Order of the leading module directives.
DIRECTIVE_ORDER: tuple[str, ...] = ("@moduledoc", "@behaviour", "use", "import", "require", "alias")


def _one_module_per_file(view: SourceView) -> Iterable[Finding]:
    depths = block_depths(view)
    top_level = [(i, name) for i, name, body in iter_modules(view, depths) if body == 1]
    for index, name in top_level[1:]:
        yield Finding(view.tokens[index].position, args={"name": name or "<anonymous>"})


def _directive(view: SourceView, index: int) -> Optional[str]:
    tokens = view.tokens
    token = tokens[index]
    if token.kind is not TokenKind.IDENTIFIER:
        return None
    if token.text in ("moduledoc", "behaviour"):
        if index > 0 and is_op(tokens[index - 1], "@") and starts_line(view, index - 1):
            return "@" + token.text
        return None
    if token.text in ("use", "import", "require", "alias") and starts_line(view, index):
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if following is not None and (following.kind is TokenKind.WHITESPACE or following.text == "("):
            return token.text
    return None


def _attribute_order(view: SourceView) -> Iterable[Finding]:
    depths = block_depths(view)
    # body depth -> highest-ranked directive seen so far in that module body
    seen: dict[int, tuple[int, str]] = {}
    module_starts = {i: body for i, _, body in iter_modules(view, depths)}
    for i in range(len(view.tokens)):
        if i in module_starts:
            seen[module_starts[i]] = (-1, "")
            continue
        if view.tokens[i].text == "end" and view.tokens[i].kind is TokenKind.IDENTIFIER:
            for closed in [depth for depth in seen if depth > depths[i]]:
                del seen[closed]
            continue
        directive = _directive(view, i)
        if directive is None or depths[i] not in seen:
            continue
        rank = DIRECTIVE_ORDER.index(directive)
        best_rank, best_name = seen[depths[i]]
        if rank < best_rank:
            position = view.tokens[i - 1].position if directive.startswith("@") else view.tokens[i].position
            yield Finding(position, args={"directive": directive, "previous": best_name})
        else:
            seen[depths[i]] = (rank, directive)


def _file_name(view: SourceView) -> Iterable[Finding]:
    path = PurePath(view.path)
    if path.suffix != ".ex":
        return
    depths = block_depths(view)
    for index, name, body in iter_modules(view, depths):
        if body != 1 or not name:
            continue
        expected = to_snake_case(name.rsplit(".", 1)[-1])
        if expected != path.stem:
            _, alias_index = module_name_at(view, index)
            token = view.tokens[alias_index if alias_index is not None else index]
            yield Finding(token.position, args={"name": name, "expected": expected + ".ex"})
        return


def build() -> list[Rule]:
    return [
        Rule(
            rule_id="modules/one-module-per-file",
            category=Category.MODULES,
            matcher=CustomMatcher(_one_module_per_file),
            severity=Severity.WARNING,
            message="Define one top-level module per file; move '{name}' to its own file",
            description="Use one module per file unless the module is only used internally.",
        ),
        Rule(
            rule_id="modules/attribute-order",
            category=Category.MODULES,
            matcher=CustomMatcher(_attribute_order),
            severity=Severity.WARNING,
            message="'{directive}' should come before '{previous}'",
            description="List module directives in order: @moduledoc, @behaviour, use, import, require, alias.",
        ),
        Rule(
            rule_id="modules/file-name",
            category=Category.MODULES,
            matcher=CustomMatcher(_file_name),
            severity=Severity.WARNING,
            message="Module '{name}' should live in a file named '{expected}'",
            description="Name files in snake_case after the module they define.",
        ),
    ]
