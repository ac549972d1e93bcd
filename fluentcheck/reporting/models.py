"""
Report data models for comparison suite runs.

This module defines the data structures for capturing complete
run records including metadata, case results, and timing.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ..execution import Mismatch


class CaseStatus(str, Enum):
    """Status of an individual comparison case."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


class RunStatus(str, Enum):
    """Overall status of a suite run."""
    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class CaseRecord:
    """
    Record of a single comparison case.

    Captures where the data came from, how long the comparison took,
    and every mismatch or error it produced.
    """
    case_id: str
    status: CaseStatus = CaseStatus.PENDING

    # Timing
    started_at: datetime | None = None
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Inputs
    subject_source: str = "inline"
    expectation_source: str = "inline"
    at: str | None = None
    options: str | None = None  # rendered EquivalencyConfig

    # Outcome
    mismatches: list[Mismatch] = field(default_factory=list)
    failure_message: str | None = None
    error_message: str | None = None

    def start(self) -> None:
        """Mark the case as started."""
        self.status = CaseStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self, status: CaseStatus) -> None:
        """Mark the case as completed with given status."""
        self.status = status
        self.ended_at = datetime.now(timezone.utc)
        if self.started_at:
            delta = self.ended_at - self.started_at
            self.duration_ms = delta.total_seconds() * 1000

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "case_id": self.case_id,
            "status": self.status.value,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "subject_source": self.subject_source,
            "expectation_source": self.expectation_source,
            "at": self.at,
            "options": self.options,
            "mismatches": [m.to_dict() for m in self.mismatches],
            "failure_message": self.failure_message,
            "error_message": self.error_message,
        }


@dataclass
class RunReport:
    """
    Complete record of a suite run.

    Contains metadata about the run, the suite being checked,
    and detailed records for each case.
    """
    # Run identification
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # Timing
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    ended_at: datetime | None = None
    duration_ms: float | None = None

    # Suite info
    suite_name: str = ""
    suite_version: int = 1
    suite_hash: str = ""

    # Overall status
    status: RunStatus = RunStatus.PENDING

    # Case records
    cases: list[CaseRecord] = field(default_factory=list)

    # Summary stats
    total_cases: int = 0
    passed_cases: int = 0
    failed_cases: int = 0
    error_cases: int = 0

    def start(self) -> None:
        """Mark the run as started."""
        self.status = RunStatus.RUNNING
        self.started_at = datetime.now(timezone.utc)

    def complete(self) -> None:
        """Mark the run as completed and calculate final status."""
        self.ended_at = datetime.now(timezone.utc)
        delta = self.ended_at - self.started_at
        self.duration_ms = delta.total_seconds() * 1000

        self.total_cases = len(self.cases)
        self.passed_cases = sum(1 for c in self.cases if c.status == CaseStatus.PASSED)
        self.failed_cases = sum(1 for c in self.cases if c.status == CaseStatus.FAILED)
        self.error_cases = sum(1 for c in self.cases if c.status == CaseStatus.ERROR)

        if self.error_cases > 0:
            self.status = RunStatus.ERROR
        elif self.failed_cases > 0:
            self.status = RunStatus.FAILED
        else:
            self.status = RunStatus.PASSED

    @property
    def mismatch_count(self) -> int:
        return sum(len(c.mismatches) for c in self.cases)

    def add_case(self, case: CaseRecord) -> None:
        self.cases.append(case)

    def get_case(self, case_id: str) -> CaseRecord | None:
        """Get a case record by ID."""
        for case in self.cases:
            if case.case_id == case_id:
                return case
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "ended_at": self.ended_at.isoformat() if self.ended_at else None,
            "duration_ms": self.duration_ms,
            "suite_name": self.suite_name,
            "suite_version": self.suite_version,
            "suite_hash": self.suite_hash,
            "status": self.status.value,
            "summary": {
                "total": self.total_cases,
                "passed": self.passed_cases,
                "failed": self.failed_cases,
                "errors": self.error_cases,
                "mismatches": self.mismatch_count,
            },
            "cases": [case.to_dict() for case in self.cases],
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            f"═══════════════════════════════════════════════════════════",
            f"  Run Report: {self.suite_name}",
            f"═══════════════════════════════════════════════════════════",
            f"  Run ID:     {self.run_id}",
            f"  Status:     {_status_icon(self.status)} {self.status.value.upper()}",
            f"  Duration:   {self.duration_ms:.0f}ms" if self.duration_ms else "  Duration:   N/A",
            f"  Started:    {self.started_at.strftime('%Y-%m-%d %H:%M:%S UTC') if self.started_at else 'N/A'}",
            f"───────────────────────────────────────────────────────────",
            f"  Cases: {self.passed_cases} passed, {self.failed_cases} failed, {self.error_cases} errors",
            f"───────────────────────────────────────────────────────────",
        ]

        for case in self.cases:
            icon = _status_icon_case(case.status)
            duration = f"{case.duration_ms:.0f}ms" if case.duration_ms else "N/A"
            lines.append(f"  {icon} [{case.case_id}] {duration}")

            if case.error_message:
                lines.append(f"      └─ Error: {case.error_message}")
            for mismatch in case.mismatches:
                lines.append(f"      └─ {mismatch.message}")

        lines.append(f"═══════════════════════════════════════════════════════════")
        return "\n".join(lines)


def compute_suite_hash(suite_dict: dict[str, Any]) -> str:
    """
    Compute a hash of the suite for tracking/versioning.

    Args:
        suite_dict: The suite data as a dict

    Returns:
        SHA-256 hash (first 12 chars)
    """
    serialized = json.dumps(suite_dict, sort_keys=True, default=str)
    hash_bytes = hashlib.sha256(serialized.encode()).hexdigest()
    return hash_bytes[:12]


def _status_icon(status: RunStatus) -> str:
    return {
        RunStatus.PENDING: "⏳",
        RunStatus.RUNNING: "🔄",
        RunStatus.PASSED: "✅",
        RunStatus.FAILED: "❌",
        RunStatus.ERROR: "⚠️",
    }.get(status, "❓")


def _status_icon_case(status: CaseStatus) -> str:
    return {
        CaseStatus.PENDING: "⏳",
        CaseStatus.RUNNING: "🔄",
        CaseStatus.PASSED: "✅",
        CaseStatus.FAILED: "❌",
        CaseStatus.ERROR: "⚠️",
    }.get(status, "❓")
