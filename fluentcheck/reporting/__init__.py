"""
Reporting for Suite Runs

This package provides reporting capabilities for capturing complete
records of comparison suite runs.

Features:
    - Run metadata (ID, timestamp, suite info)
    - Case-by-case records with timing
    - Every mismatch with its path
    - JSON serialization
    - Human-readable summaries

Usage:
    from fluentcheck.suites import load_suite
    from fluentcheck.reporting import Reporter

    suite, _ = load_suite("suite.yaml")
    reporter = Reporter.from_suite(suite)

    reporter.start_run()
    reporter.start_case("orders")
    reporter.complete_case_failure("orders", result.mismatches)

    report = reporter.finish_run()
    print(report.summary())
    reporter.save_json("reports/run.json")
"""

# Models
from .models import (
    CaseRecord,
    CaseStatus,
    RunReport,
    RunStatus,
    compute_suite_hash,
)

# Reporter
from .reporter import Reporter

__all__ = [
    # Models
    "CaseRecord",
    "CaseStatus",
    "RunReport",
    "RunStatus",
    "compute_suite_hash",
    # Reporter
    "Reporter",
]
