"""
Reporter for building and managing run reports.

This module provides the Reporter class which helps construct
run reports from suite executions.
"""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable

from ..execution import Mismatch
from .models import CaseRecord, CaseStatus, RunReport, compute_suite_hash

if TYPE_CHECKING:
    from ..suites import DataSource, Suite


class Reporter:
    """
    Builds and manages run reports.

    Example:
        suite, _ = load_suite("orders.yaml")
        reporter = Reporter.from_suite(suite)

        reporter.start_run()

        reporter.start_case("orders")
        reporter.complete_case_success("orders")

        reporter.start_case("customers")
        reporter.complete_case_failure("customers", result.mismatches)

        report = reporter.finish_run()
        print(report.summary())
    """

    def __init__(self, report: RunReport):
        """
        Initialize with a RunReport.

        Use Reporter.from_suite() for the typical case.
        """
        self.report = report

    @classmethod
    def from_suite(cls, suite: Suite, run_id: str | None = None) -> Reporter:
        """
        Create a Reporter from a parsed Suite.

        Args:
            suite: The parsed suite to create a report for
            run_id: Optional custom run ID (auto-generated if not provided)

        Returns:
            Reporter instance ready to record case results
        """
        report = RunReport(
            suite_name=suite.name,
            suite_version=suite.version,
            suite_hash=compute_suite_hash(_suite_to_dict(suite)),
        )

        if run_id:
            report.run_id = run_id

        for case in suite.cases:
            report.add_case(CaseRecord(
                case_id=case.id,
                subject_source=case.subject.describe(),
                expectation_source=case.expectation.describe(),
                at=case.at,
            ))

        return cls(report)

    def start_run(self) -> None:
        """Mark the run as started."""
        self.report.start()

    def finish_run(self) -> RunReport:
        """
        Mark the run as completed and return the final report.

        Returns:
            The completed RunReport with summary stats
        """
        self.report.complete()
        return self.report

    def start_case(self, case_id: str, options: str | None = None) -> CaseRecord | None:
        """
        Mark a case as started.

        Args:
            case_id: The ID of the case to start
            options: Rendered options the case is compared with

        Returns:
            The CaseRecord, or None if case not found
        """
        case = self.report.get_case(case_id)
        if case:
            case.options = options
            case.start()
        return case

    def complete_case_success(self, case_id: str) -> CaseRecord | None:
        case = self.report.get_case(case_id)
        if case:
            case.complete(CaseStatus.PASSED)
        return case

    def complete_case_failure(
        self,
        case_id: str,
        mismatches: Iterable[Mismatch],
        failure_message: str | None = None,
    ) -> CaseRecord | None:
        """
        Mark a case as failed.

        Args:
            case_id: The ID of the case
            mismatches: Every difference the comparison found
            failure_message: Human-readable failure description
        """
        case = self.report.get_case(case_id)
        if case:
            case.mismatches = list(mismatches)
            case.failure_message = failure_message
            case.complete(CaseStatus.FAILED)
        return case

    def complete_case_error(self, case_id: str, error_message: str) -> CaseRecord | None:
        """
        Mark a case as errored (a usage or data problem, not a mismatch).
        """
        case = self.report.get_case(case_id)
        if case:
            case.error_message = error_message
            case.complete(CaseStatus.ERROR)
        return case

    def save_json(self, path: str | Path) -> None:
        """
        Save the report to a JSON file.

        Args:
            path: Path to save the JSON file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.report.to_json())

    def get_summary(self) -> str:
        """Get a human-readable summary of the run."""
        return self.report.summary()


def _suite_to_dict(suite: Suite) -> dict[str, Any]:
    """Convert a Suite to a dict for hashing, independent of where it lives on disk."""
    return {
        "version": suite.version,
        "name": suite.name,
        "defaults": asdict(suite.defaults),
        "cases": [
            {
                "id": case.id,
                "subject": _source_to_dict(case.subject, suite.base_dir),
                "expectation": _source_to_dict(case.expectation, suite.base_dir),
                "at": case.at,
                "reason": case.reason,
                "options": asdict(case.options),
            }
            for case in suite.cases
        ],
    }


def _source_to_dict(source: DataSource, base_dir: Path) -> dict[str, Any]:
    if source.file is None:
        return {"value": source.value}
    try:
        file = source.file.relative_to(base_dir)
    except ValueError:
        file = source.file
    return {"file": file.as_posix()}
