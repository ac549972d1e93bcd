"""
Suite loader for comparison suites.

This module provides the public API for loading and validating
suite files from disk or YAML strings.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .models import Suite
from .parser import SuiteParser
from .validation import SuiteValidator, ValidationResult

logger = logging.getLogger(__name__)


def load_suite(path: str | Path) -> tuple[Suite | None, ValidationResult]:
    """
    Load and validate a suite from a YAML file.

    Args:
        path: Path to the YAML suite file

    Returns:
        Tuple of (Suite or None, ValidationResult)
        If validation fails, Suite will be None.

    Example:
        suite, result = load_suite("suites/orders.yaml")
        if not result.is_valid:
            print(result)
            sys.exit(1)
    """
    path = Path(path)

    if not path.exists():
        result = ValidationResult()
        result.add_error(
            str(path),
            "File not found",
            suggestion="Check the file path is correct"
        )
        return None, result

    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        result = ValidationResult()
        result.add_error(str(path), f"Cannot read file: {e}")
        return None, result

    logger.debug(f"Loading suite from {path}")
    return validate_suite_yaml(text, base_dir=path.resolve().parent, source=str(path))


def validate_suite_yaml(
    yaml_string: str,
    base_dir: str | Path | None = None,
    source: str = "yaml",
) -> tuple[Suite | None, ValidationResult]:
    """
    Validate a suite from a YAML string.

    Args:
        yaml_string: YAML content as a string
        base_dir: Directory that relative data files are resolved against
            (defaults to the current directory)
        source: Name used as the error path for whole-document problems

    Returns:
        Tuple of (Suite or None, ValidationResult)
    """
    try:
        data = yaml.safe_load(yaml_string)
    except yaml.YAMLError as e:
        result = ValidationResult()
        result.add_error(
            source,
            f"Invalid YAML syntax: {e}",
            suggestion="Check YAML formatting (indentation, colons, etc.)"
        )
        return None, result

    if not isinstance(data, dict):
        result = ValidationResult()
        result.add_error(
            source,
            "Content must be a YAML object (not a list or scalar)",
            value=type(data).__name__
        )
        return None, result

    validator = SuiteValidator(data)
    result = validator.validate()

    if not result.is_valid:
        return None, result

    parser = SuiteParser(data, base_dir)
    return parser.parse(), result
