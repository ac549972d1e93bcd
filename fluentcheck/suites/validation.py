"""
Schema validation for comparison suites.

This module contains the validation logic that checks raw parsed YAML
against the suite schema and reports errors with helpful messages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from .models import OPTION_FLAGS, OPTION_INTS, OPTION_KEYS, OPTION_LISTS


# ─────────────────────────────────────────────────────────────────────────────
# Validation Result Types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ValidationError:
    """Represents a single validation error with context."""
    path: str  # e.g., "cases[0].options.exclude"
    message: str
    value: Any = None
    suggestion: str | None = None

    def __str__(self) -> str:
        parts = [f"❌ {self.path}: {self.message}"]
        if self.value is not None:
            parts.append(f"   Got: {repr(self.value)}")
        if self.suggestion:
            parts.append(f"   💡 {self.suggestion}")
        return "\n".join(parts)


@dataclass
class ValidationResult:
    """Result of schema validation."""
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def add_error(
        self,
        path: str,
        message: str,
        value: Any = None,
        suggestion: str | None = None
    ) -> None:
        self.errors.append(ValidationError(path, message, value, suggestion))

    def __str__(self) -> str:
        if self.is_valid:
            return "✅ Schema validation passed"
        lines = [f"Schema validation failed with {len(self.errors)} error(s):\n"]
        lines.extend(str(e) for e in self.errors)
        return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Suite Validator
# ─────────────────────────────────────────────────────────────────────────────

class SuiteValidator:
    """Validates raw parsed YAML against the suite schema."""

    REQUIRED_TOP_LEVEL = {"version", "name", "cases"}
    OPTIONAL_TOP_LEVEL = {"defaults"}
    CASE_KEYS = {
        "id",
        "subject",
        "subject_file",
        "expectation",
        "expectation_file",
        "at",
        "reason",
        "options",
    }

    def __init__(self, data: dict[str, Any]):
        self.data = data
        self.result = ValidationResult()
        self.case_ids: set[str] = set()

    def validate(self) -> ValidationResult:
        """Run all validation checks and return result."""
        self._validate_top_level()
        if not self.result.is_valid:
            return self.result

        self._validate_version()
        self._validate_name()
        self._validate_defaults()
        self._validate_cases()

        return self.result

    def _validate_top_level(self) -> None:
        """Check required and unknown top-level keys."""
        keys = set(self.data.keys())
        missing = self.REQUIRED_TOP_LEVEL - keys
        unknown = keys - self.REQUIRED_TOP_LEVEL - self.OPTIONAL_TOP_LEVEL

        for key in sorted(missing):
            self.result.add_error(
                key,
                f"Required field '{key}' is missing",
                suggestion=f"Add '{key}:' to your suite file"
            )

        for key in sorted(unknown, key=str):
            self.result.add_error(
                str(key),
                f"Unknown top-level field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.REQUIRED_TOP_LEVEL | self.OPTIONAL_TOP_LEVEL))}"
            )

    def _validate_version(self) -> None:
        version = self.data.get("version")
        if not isinstance(version, int) or isinstance(version, bool):
            self.result.add_error(
                "version",
                "Must be an integer",
                value=version,
                suggestion="Use 'version: 1'"
            )
        elif version < 1:
            self.result.add_error(
                "version",
                "Must be >= 1",
                value=version
            )

    def _validate_name(self) -> None:
        name = self.data.get("name")
        if not isinstance(name, str):
            self.result.add_error(
                "name",
                "Must be a string",
                value=name
            )
        elif not name.strip():
            self.result.add_error(
                "name",
                "Cannot be empty",
                suggestion="Provide a descriptive name for your suite"
            )

    def _validate_defaults(self) -> None:
        defaults = self.data.get("defaults")
        if defaults is None:
            return
        self._validate_options("defaults", defaults)

    def _validate_cases(self) -> None:
        cases = self.data.get("cases")
        if not isinstance(cases, list):
            self.result.add_error(
                "cases",
                "Must be a list",
                value=cases
            )
            return

        if len(cases) == 0:
            self.result.add_error(
                "cases",
                "Must contain at least one case",
                suggestion="Add a case with a subject and an expectation"
            )
            return

        for i, case in enumerate(cases):
            self._validate_case(i, case)

    def _validate_case(self, index: int, case: Any) -> None:
        path = f"cases[{index}]"

        if not isinstance(case, dict):
            self.result.add_error(
                path,
                "Case must be an object",
                value=case
            )
            return

        for key in sorted(set(case.keys()) - self.CASE_KEYS, key=str):
            self.result.add_error(
                f"{path}.{key}",
                f"Unknown case field '{key}'",
                suggestion=f"Valid fields are: {', '.join(sorted(self.CASE_KEYS))}"
            )

        case_id = case.get("id")
        if not case_id:
            self.result.add_error(
                f"{path}.id",
                "Case must have an 'id' field",
                suggestion="Add a unique identifier like 'id: my_case'"
            )
        elif not isinstance(case_id, str):
            self.result.add_error(
                f"{path}.id",
                "Case id must be a string",
                value=case_id
            )
        elif case_id in self.case_ids:
            self.result.add_error(
                f"{path}.id",
                "Duplicate case id",
                value=case_id,
                suggestion="Each case must have a unique id"
            )
        else:
            self.case_ids.add(case_id)

        self._validate_source(path, case, "subject")
        self._validate_source(path, case, "expectation")

        at = case.get("at")
        if at is not None:
            self._validate_jsonpath(f"{path}.at", at)

        reason = case.get("reason")
        if reason is not None and not isinstance(reason, str):
            self.result.add_error(
                f"{path}.reason",
                "Reason must be a string",
                value=reason
            )

        options = case.get("options")
        if options is not None:
            self._validate_options(f"{path}.options", options)

    def _validate_source(self, path: str, case: dict, side: str) -> None:
        """Exactly one of '<side>' and '<side>_file' must be given."""
        file_key = f"{side}_file"
        has_inline = side in case
        has_file = file_key in case

        if has_inline and has_file:
            self.result.add_error(
                f"{path}.{side}",
                f"Use either '{side}' or '{file_key}', not both",
            )
        elif not has_inline and not has_file:
            self.result.add_error(
                f"{path}.{side}",
                f"Case requires '{side}' or '{file_key}'",
                suggestion=f"Give the data inline under '{side}:' or point '{file_key}:' at a JSON/YAML file"
            )
        elif has_file and (not isinstance(case[file_key], str) or not case[file_key].strip()):
            self.result.add_error(
                f"{path}.{file_key}",
                "Must be a non-empty string (file path)",
                value=case[file_key]
            )

    def _validate_jsonpath(self, path: str, expression: Any) -> None:
        if not isinstance(expression, str):
            self.result.add_error(
                path,
                "Must be a string (JSONPath expression)",
                value=expression
            )
            return

        try:
            parse_jsonpath(expression)
        except (JsonPathParserError, JsonPathLexerError) as e:
            self.result.add_error(
                path,
                "Invalid JSONPath expression",
                value=expression,
                suggestion=str(e)
            )

    def _validate_options(self, path: str, options: Any) -> None:
        if not isinstance(options, dict):
            self.result.add_error(
                path,
                "Must be an object",
                value=options
            )
            return

        for key, value in options.items():
            option_path = f"{path}.{key}"

            if key not in OPTION_KEYS:
                self.result.add_error(
                    option_path,
                    f"Unknown option '{key}'",
                    suggestion=f"Valid options: {', '.join(sorted(OPTION_KEYS))}"
                )
            elif key in OPTION_FLAGS and not isinstance(value, bool):
                self.result.add_error(
                    option_path,
                    "Must be true or false",
                    value=value
                )
            elif key in OPTION_LISTS and (
                not isinstance(value, list) or not all(isinstance(p, str) for p in value)
            ):
                self.result.add_error(
                    option_path,
                    "Must be a list of member paths",
                    value=value,
                    suggestion="e.g. ['id', 'orders.created_at']"
                )
            elif key in OPTION_INTS and (
                not isinstance(value, int) or isinstance(value, bool) or value < 1
            ):
                self.result.add_error(
                    option_path,
                    "Must be a positive integer",
                    value=value
                )
