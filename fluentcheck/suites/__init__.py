"""
Comparison Suites

This package provides tools for parsing, validating, and loading
YAML files that describe batches of subject/expectation comparisons.

Usage:
    from fluentcheck.suites import load_suite, validate_suite_yaml

    # Load from file
    suite, result = load_suite("suites/orders.yaml")
    if not result.is_valid:
        print(result)

    # Or validate from string
    suite, result = validate_suite_yaml(yaml_string)
"""

# Public API
from .loader import load_suite, validate_suite_yaml

# Case data
from .data import DataSourceError, load_data_file, resolve_source, select_at

# Models (for type hints and isinstance checks)
from .models import CaseOptions, ComparisonCase, DataSource, Suite

# Validation (for custom validation if needed)
from .parser import SuiteParser
from .validation import SuiteValidator, ValidationError, ValidationResult

__all__ = [
    # Loader functions
    "load_suite",
    "validate_suite_yaml",
    # Case data
    "DataSourceError",
    "load_data_file",
    "resolve_source",
    "select_at",
    # Models
    "CaseOptions",
    "ComparisonCase",
    "DataSource",
    "Suite",
    # Parsing and validation
    "SuiteParser",
    "SuiteValidator",
    "ValidationError",
    "ValidationResult",
]
