"""Use Case: Check Files - tokenize, evaluate and optionally fix a set of sources."""

import logging
import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Optional

from elixir_style_linter.domain.config import LinterConfig
from elixir_style_linter.domain.entities import CheckResult, FileReport, Violation
from elixir_style_linter.domain.errors import UnterminatedLiteralError
from elixir_style_linter.domain.protocols import (
    FileSystemProtocol,
    FixWriterProtocol,
    TelemetryPort,
    TokenizerProtocol,
)
from elixir_style_linter.domain.registry import RuleRegistry
from elixir_style_linter.use_cases.apply_fixes import ApplyFixesUseCase
from elixir_style_linter.use_cases.evaluate_rules import RuleEvaluator

logger = logging.getLogger(__name__)


class CheckFilesUseCase:
    """Run the frozen rule registry over many files on a bounded worker pool."""

    def __init__(
        self,
        tokenizer: TokenizerProtocol,
        filesystem: FileSystemProtocol,
        fix_writer: FixWriterProtocol,
        telemetry: TelemetryPort,
        evaluator: Optional[RuleEvaluator] = None,
    ) -> None:
        self.tokenizer = tokenizer
        self.filesystem = filesystem
        self.fix_writer = fix_writer
        self.telemetry = telemetry
        self.evaluator = evaluator or RuleEvaluator()

    def check_text(self, text: str, registry: RuleRegistry, path: str = "<string>") -> list[Violation]:
        """
        Evaluate a source text.

        An unterminated literal does not abort the check: the tokens before
        it are still evaluated and the failure is reported as a violation.
        """
        try:
            tokens = self.tokenizer.parse(text)
        except UnterminatedLiteralError as exc:
            logger.debug("%s: %s", path, exc)
            return self.evaluator.evaluate(exc.tokens, registry, path=path, parse_error=exc)
        return self.evaluator.evaluate(tokens, registry, path=path)

    def check_file(
        self,
        path: str,
        registry: RuleRegistry,
        fix: bool = False,
        cancel: Optional[threading.Event] = None,
    ) -> FileReport:
        try:
            text = self.filesystem.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("cannot read %s", path, exc_info=True)
            return FileReport(path=path, error=f"{type(exc).__name__}: {exc}")

        if not fix:
            return FileReport(path=path, violations=tuple(self.check_text(text, registry, path)))

        fixer = ApplyFixesUseCase(lambda current: self.check_text(current, registry, path))
        outcome, remaining = fixer.execute(text)
        if outcome.text == text:
            return FileReport(
                path=path, violations=tuple(remaining), unresolved=outcome.unresolved
            )

        try:
            written = self.fix_writer.write(path, outcome.text, cancel)
        except OSError as exc:
            self.telemetry.error(f"Could not write fixes to {path}: {exc}")
            written = False
        if not written:
            # The original file is untouched, so report what is wrong with it.
            return FileReport(path=path, violations=tuple(self.check_text(text, registry, path)))
        return FileReport(
            path=path,
            violations=tuple(remaining),
            fixes_applied=len(outcome.applied),
            unresolved=outcome.unresolved,
        )

    def execute(
        self,
        paths: list[str],
        registry: RuleRegistry,
        config: LinterConfig,
        fix: bool = False,
        cancel: Optional[threading.Event] = None,
    ) -> CheckResult:
        """
        Check every Elixir source under paths.

        At most config.jobs files are in flight at once. On KeyboardInterrupt
        no new file is started, files already in flight finish (fix writes
        not yet committed are abandoned) and the partial result is returned
        with cancelled set.

        Returns:
            CheckResult whose reports are sorted by path.
        """
        registry.freeze()
        cancel = cancel or threading.Event()
        files = self.filesystem.collect_source_files(paths, config.exclude)
        self.telemetry.step(
            f"Checking {len(files)} file(s) with {len(registry)} rule(s) on {config.jobs} worker(s)"
        )

        reports: list[FileReport] = []
        pending = iter(files)
        in_flight: set[Future[FileReport]] = set()

        def dispatch(executor: ThreadPoolExecutor) -> None:
            while len(in_flight) < config.jobs and not cancel.is_set():
                path = next(pending, None)
                if path is None:
                    return
                in_flight.add(executor.submit(self.check_file, path, registry, fix, cancel))

        with ThreadPoolExecutor(max_workers=config.jobs, thread_name_prefix="exstyle") as executor:
            try:
                dispatch(executor)
                while in_flight:
                    done, _ = wait(in_flight, return_when=FIRST_COMPLETED)
                    for future in done:
                        in_flight.discard(future)
                        reports.append(future.result())
                    dispatch(executor)
            except KeyboardInterrupt:
                cancel.set()
                self.telemetry.warning("Interrupted, finishing files already in progress")
                for future in in_flight:
                    reports.append(future.result())
                in_flight.clear()

        cancelled = cancel.is_set()
        if cancelled:
            logger.info("run cancelled after %d of %d file(s)", len(reports), len(files))
        reports.sort(key=lambda report: report.path)
        return CheckResult(reports=tuple(reports), cancelled=cancelled)
