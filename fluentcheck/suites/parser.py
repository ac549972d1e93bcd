"""
Suite parser for comparison suites.

This module converts validated YAML data into typed Suite structures.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .models import OPTION_FLAGS, OPTION_INTS, CaseOptions, ComparisonCase, DataSource, Suite


class SuiteParser:
    """Parses and converts validated YAML to a typed Suite structure."""

    def __init__(self, data: dict[str, Any], base_dir: str | Path | None = None):
        self.data = data
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()

    def parse(self) -> Suite:
        """Convert validated data to a typed Suite."""
        return Suite(
            version=self.data["version"],
            name=self.data["name"],
            defaults=self._parse_options(self.data.get("defaults")),
            cases=[self._parse_case(case) for case in self.data["cases"]],
            base_dir=self.base_dir,
        )

    def _parse_case(self, case: dict[str, Any]) -> ComparisonCase:
        return ComparisonCase(
            id=case["id"],
            subject=self._parse_source(case, "subject"),
            expectation=self._parse_source(case, "expectation"),
            at=case.get("at"),
            reason=case.get("reason") or "",
            options=self._parse_options(case.get("options")),
        )

    def _parse_source(self, case: dict[str, Any], side: str) -> DataSource:
        file_key = f"{side}_file"
        if file_key in case:
            return DataSource(file=self._resolve(case[file_key]))
        return DataSource(value=case[side])

    def _resolve(self, file: str) -> Path:
        """Relative data files are resolved against the suite's directory."""
        path = Path(file).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    def _parse_options(self, options: dict[str, Any] | None) -> CaseOptions:
        if not options:
            return CaseOptions()

        parsed = CaseOptions(
            exclude=list(options.get("exclude", [])),
            include=list(options.get("include", [])),
        )
        for name in OPTION_FLAGS | OPTION_INTS:
            if name in options:
                setattr(parsed, name, options[name])
        return parsed
