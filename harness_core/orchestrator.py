# harness_core/orchestrator.py
from __future__ import annotations
import logging
import sys
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Iterable, List, Optional, Sequence, TextIO

from .artifacts import load_artifacts
from .checkers import check_attributes, check_behavior, check_styles, check_tags
from .config import HarnessSettings
from .emitters import LedgerEmitter, RemoteEmitter, XmlReportEmitter
from .normalizer import error_record, normalize
from .rubric import DEFAULT_RUBRIC, load_rubric
from .types import (
    ArtifactBundle,
    CheckOutcome,
    EntryReport,
    ReportBatch,
    RubricEntry,
    RubricError,
    RunSummary,
    Verdict,
)

log = logging.getLogger(__name__)

_RED = "\x1b[31m{}\x1b[0m"
_GREEN = "\x1b[32m{}\x1b[0m"


class Harness:
    """Drives a rubric through check -> normalize -> publish, one entry at a time.

    Lifecycle per run: reset ledgers, load the artifact once, then execute each
    rubric entry in order. Failures inside an entry (checker, normalizer or any
    sink) are logged and contained; only a failed artifact load aborts the run.
    """

    def __init__(
        self,
        settings: HarnessSettings,
        rubric: Optional[Sequence[RubricEntry]] = None,
        *,
        sinks: Optional[Iterable[object]] = None,
        remote: Optional[RemoteEmitter] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.settings = settings
        if rubric is None:
            rubric = load_rubric(settings.rubric_path) if settings.rubric_path else DEFAULT_RUBRIC
        self.rubric: List[RubricEntry] = list(rubric)
        self.sinks = list(sinks) if sinks is not None else [XmlReportEmitter(settings), LedgerEmitter(settings)]
        if remote is None and settings.remote_enabled:
            remote = RemoteEmitter(settings)
        self.remote = remote
        self.out = out or sys.stdout

    # ---- Reset ----
    def reset(self) -> None:
        """Truncate all ledgers so lines from a previous run never accumulate."""
        for path in self.settings.ledger_paths():
            path.unlink(missing_ok=True)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        log.debug("ledgers reset in %s", self.settings.report_dir)

    # ---- Load ----
    def load(self) -> ArtifactBundle:
        return load_artifacts(self.settings.artifact_dir, self.settings.annotation_path)

    # ---- Check dispatch ----
    def check(self, entry: RubricEntry, bundle: ArtifactBundle) -> CheckOutcome:
        text = bundle.select(entry.artifact)
        p = entry.params
        if p.kind == "tags":
            return check_tags(text, p.tags)
        if p.kind == "attributes":
            return check_attributes(text, p.tag, p.attributes)
        if p.kind == "styles":
            return check_styles(text, p.rules)
        if p.kind == "behavior":
            return check_behavior(text, p.behavior, timeout_ms=self.settings.host_timeout_ms)
        raise RubricError(f"no checker for kind {p.kind!r}")

    def _print_outcome(self, entry: RubricEntry, outcome: CheckOutcome) -> None:
        print(f"{entry.reporting.value} Results: {entry.name}", file=self.out)
        for label, verdict in outcome.items():
            mark = _RED.format("FAIL") if verdict is Verdict.FAIL else _GREEN.format("PASS")
            print(f"  {label}: {mark}", file=self.out)
        print("=================", file=self.out)

    # ---- Execute-One ----
    def execute_one(self, entry: RubricEntry, bundle: ArtifactBundle,
                    executor: Optional[ThreadPoolExecutor] = None) -> EntryReport:
        try:
            outcome = self.check(entry, bundle)
            record = normalize(outcome, entry.name, entry.category, entry.reporting,
                               empty_policy=self.settings.empty_outcome_policy)
        except Exception as exc:
            log.exception("Error executing %s test case %r", entry.reporting.value, entry.name)
            return EntryReport(entry=entry, record=error_record(entry.name, entry.category, entry.reporting, exc))

        report = EntryReport(entry=entry, record=record, outcome=dict(outcome))
        self._print_outcome(entry, outcome)
        batch = ReportBatch.single(record, annotation=bundle.annotation)
        log.debug("batch %s", batch.to_wire())

        pending: Optional[Future] = None
        if self.remote is not None:
            if executor is not None:
                pending = executor.submit(self.remote.emit, batch)
            else:
                self._emit(self.remote, batch, report)

        for sink in self.sinks:
            self._emit(sink, batch, report)

        if pending is not None:
            self._await_remote(pending, report)
        report.published = not report.sink_errors
        return report

    def _emit(self, sink, batch: ReportBatch, report: EntryReport) -> None:
        name = getattr(sink, "name", type(sink).__name__)
        try:
            sink.emit(batch)
        except Exception as exc:
            report.sink_errors[name] = f"{type(exc).__name__}: {exc}"
            log.error("%s sink failed for %s test case %r: %s",
                      name, report.entry.reporting.value, report.entry.name, exc)

    @property
    def remote_wait_sec(self) -> float:
        # requests applies its timeout to connect and read separately
        return 2 * self.settings.remote_timeout_sec

    def _await_remote(self, pending: Future, report: EntryReport) -> None:
        entry = report.entry
        wait = self.remote_wait_sec
        try:
            pending.result(timeout=wait)
        except FutureTimeout:
            pending.cancel()
            report.sink_errors["remote"] = f"timed out after {wait}s"
            log.error("remote report for %s test case %r timed out", entry.reporting.value, entry.name)
        except Exception as exc:
            report.sink_errors["remote"] = f"{type(exc).__name__}: {exc}"
            log.error("remote report failed for %s test case %r: %s", entry.reporting.value, entry.name, exc)

    # ---- full run ----
    def run(self) -> RunSummary:
        self.reset()
        bundle = self.load()
        summary = RunSummary()
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="remote-report") as executor:
            for entry in self.rubric:
                summary.entries.append(self.execute_one(entry, bundle, executor))
        log.info("run complete: %d passed, %d failed, %d errored",
                 summary.passed, summary.failed, summary.errored)
        return summary
