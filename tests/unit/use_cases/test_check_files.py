"""Unit tests for CheckFilesUseCase."""

import threading
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import ViolationKind
from elixir_style_linter.domain.registry import RuleRegistry
from elixir_style_linter.domain.rules import builtin_rules
from elixir_style_linter.infrastructure.gateways.atomic_file_writer import AtomicFileWriter
from elixir_style_linter.infrastructure.gateways.elixir_tokenizer import ElixirTokenizer
from elixir_style_linter.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from elixir_style_linter.use_cases.check_files import CheckFilesUseCase


@pytest.fixture
def use_case() -> CheckFilesUseCase:
    return CheckFilesUseCase(
        tokenizer=ElixirTokenizer(),
        filesystem=FileSystemGateway(),
        fix_writer=AtomicFileWriter(),
        telemetry=Mock(),
    )


@pytest.fixture
def registry(make_registry) -> RuleRegistry:
    return make_registry(
        "syntax/unterminated-literal",
        "layout/trailing-whitespace",
        "naming/snake-case-variable",
        "layout/no-tabs",
    )


def _write(root: Path, name: str, content: str) -> Path:
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestCheckText:
    def test_unterminated_literal_is_a_violation_not_a_crash(self, use_case, registry) -> None:
        violations = use_case.check_text('fileName = call("open', registry, "lib/a.ex")

        assert [v.kind for v in violations] == [ViolationKind.STYLE, ViolationKind.UNTERMINATED_LITERAL]


class TestCheckFile:
    def test_reports_violations(self, use_case, registry, tmp_path: Path) -> None:
        path = _write(tmp_path, "a.ex", "fileName = 1  \n")

        report = use_case.check_file(str(path), registry)

        assert report.readable
        assert sorted(v.rule_id for v in report.violations) == [
            "layout/trailing-whitespace",
            "naming/snake-case-variable",
        ]

    def test_missing_file_is_recorded_not_raised(self, use_case, registry, tmp_path: Path) -> None:
        report = use_case.check_file(str(tmp_path / "gone.ex"), registry)

        assert not report.readable
        assert "FileNotFoundError" in report.error

    def test_invalid_utf8_is_unreadable(self, use_case, registry, tmp_path: Path) -> None:
        path = tmp_path / "binary.ex"
        path.write_bytes(b"\xff\xfe\x00bad")

        report = use_case.check_file(str(path), registry)

        assert not report.readable
        assert "UnicodeDecodeError" in report.error

    def test_fix_mode_rewrites_the_file(self, use_case, registry, tmp_path: Path) -> None:
        path = _write(tmp_path, "a.ex", "\tfileName = 1  \n")

        report = use_case.check_file(str(path), registry, fix=True)

        assert path.read_text(encoding="utf-8") == "  file_name = 1\n"
        assert report.fixes_applied == 3
        assert report.violations == ()
        assert report.unresolved == ()

    def test_fix_mode_preserves_crlf(self, use_case, registry, tmp_path: Path) -> None:
        path = tmp_path / "a.ex"
        path.write_bytes(b"x = 1  \r\ny = 2\r\n")

        use_case.check_file(str(path), registry, fix=True)

        assert path.read_bytes() == b"x = 1\r\ny = 2\r\n"

    def test_abandoned_write_reports_original_violations(self, registry, tmp_path: Path) -> None:
        writer = Mock()
        writer.write.return_value = False
        use_case = CheckFilesUseCase(ElixirTokenizer(), FileSystemGateway(), writer, Mock())
        path = _write(tmp_path, "a.ex", "foo  \n")

        report = use_case.check_file(str(path), registry, fix=True)

        assert path.read_text(encoding="utf-8") == "foo  \n"
        assert report.fixes_applied == 0
        assert [v.rule_id for v in report.violations] == ["layout/trailing-whitespace"]

    def test_clean_file_is_not_rewritten(self, registry, tmp_path: Path) -> None:
        writer = Mock()
        use_case = CheckFilesUseCase(ElixirTokenizer(), FileSystemGateway(), writer, Mock())
        path = _write(tmp_path, "a.ex", "foo\n")

        use_case.check_file(str(path), registry, fix=True)

        writer.write.assert_not_called()


class TestExecute:
    def test_reports_are_sorted_by_path_whatever_the_completion_order(
        self, use_case, registry, tmp_path: Path
    ) -> None:
        names = ["lib/z.ex", "lib/a.ex", "lib/m/b.exs", "test/c_test.exs", "lib/q.ex"]
        for name in names:
            _write(tmp_path, name, "fileName = 1\n")

        result = use_case.execute([str(tmp_path)], registry, LinterConfig(jobs=3))

        paths = [report.path for report in result.reports]
        assert paths == sorted(paths)
        assert len(paths) == len(names)
        assert not result.cancelled
        assert all(len(report.violations) == 1 for report in result.reports)

    def test_registry_is_frozen_before_dispatch(self, use_case, tmp_path: Path) -> None:
        registry = RuleRegistry()
        for rule in builtin_rules(LinterConfig())[:2]:
            registry.register(rule)

        use_case.execute([str(tmp_path)], registry, LinterConfig(jobs=1))

        assert registry.frozen

    def test_excluded_and_build_directories_are_skipped(self, use_case, registry, tmp_path: Path) -> None:
        _write(tmp_path, "lib/a.ex", "ok\n")
        _write(tmp_path, "_build/dev/lib/b.ex", "ok\n")
        _write(tmp_path, "priv/repo/seeds.exs", "ok\n")

        result = use_case.execute(
            [str(tmp_path)], registry, LinterConfig(jobs=2, exclude=("priv/**",))
        )

        assert [Path(r.path).name for r in result.reports] == ["a.ex"]

    def test_pre_cancelled_run_checks_nothing(self, use_case, registry, tmp_path: Path) -> None:
        _write(tmp_path, "a.ex", "ok\n")
        cancel = threading.Event()
        cancel.set()

        result = use_case.execute([str(tmp_path)], registry, LinterConfig(jobs=2), cancel=cancel)

        assert result.cancelled
        assert result.reports == ()

    def test_keyboard_interrupt_collects_in_flight_files(self, use_case, registry, tmp_path: Path) -> None:
        for index in range(5):
            _write(tmp_path, f"f{index}.ex", "ok\n")
        cancel = threading.Event()

        with patch(
            "elixir_style_linter.use_cases.check_files.wait", side_effect=KeyboardInterrupt
        ):
            result = use_case.execute([str(tmp_path)], registry, LinterConfig(jobs=2), cancel=cancel)

        assert cancel.is_set()
        assert result.cancelled
        assert len(result.reports) == 2
        use_case.telemetry.warning.assert_called_once()
