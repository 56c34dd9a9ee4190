"""Unit tests for run-level entities."""

from elixir_style_linter.domain.entities import FileReport, Fix, Position, RunSummary, Severity, Violation


def _violation(severity: Severity) -> Violation:
    return Violation(rule_id="x", severity=severity, position=Position.at(1, 0, 0), message="m")


class TestFix:
    def test_same_start_conflicts(self) -> None:
        assert Fix.insert(3, "a").conflicts_with(Fix(3, 5, "b"))

    def test_adjacent_spans_do_not_conflict(self) -> None:
        assert not Fix(0, 2, "").conflicts_with(Fix(2, 4, ""))

    def test_overlap(self) -> None:
        assert Fix(0, 3, "").conflicts_with(Fix(2, 4, ""))


class TestFileReport:
    def test_filtered_drops_warnings_below_error_threshold(self) -> None:
        report = FileReport(path="a.ex", violations=(_violation(Severity.WARNING), _violation(Severity.ERROR)))

        filtered = report.filtered(Severity.ERROR)

        assert [v.severity for v in filtered.violations] == [Severity.ERROR]
        assert len(report.violations) == 2


class TestRunSummary:
    def test_clean_run_exits_zero(self) -> None:
        summary = RunSummary.from_reports([FileReport(path="a.ex", violations=(_violation(Severity.WARNING),))])

        assert summary.warnings == 1
        assert summary.exit_code == 0

    def test_errors_exit_one(self) -> None:
        summary = RunSummary.from_reports([FileReport(path="a.ex", violations=(_violation(Severity.ERROR),))])

        assert summary.exit_code == 1

    def test_unreadable_file_exits_two(self) -> None:
        reports = [
            FileReport(path="a.ex", violations=(_violation(Severity.ERROR),)),
            FileReport(path="b.ex", error="PermissionError: denied"),
        ]

        assert RunSummary.from_reports(reports).exit_code == 2

    def test_cancelled_run_exits_two(self) -> None:
        summary = RunSummary.from_reports([], cancelled=True)

        assert summary.exit_code == 2
        assert "interrupted" in summary.render()
        assert summary.to_dict()["cancelled"] is True

    def test_position_renders_one_based_column(self) -> None:
        assert str(Position.at(4, 0, 30)) == "4:1"
