"""
Loading the data a comparison case runs on.

Each side of a case is either inline YAML or a JSON/YAML file. An
optional JSONPath expression narrows both sides down before comparing.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from jsonpath_ng import parse as parse_jsonpath
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from ..execution import FluentCheckError
from .models import DataSource

logger = logging.getLogger(__name__)

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


class DataSourceError(FluentCheckError):
    """Raised when case data cannot be loaded or selected."""


def load_data_file(path: str | Path) -> Any:
    """
    Load a JSON or YAML document from disk.

    Files ending in .json are read as JSON; everything else is read as
    YAML, which also accepts plain JSON.

    Raises:
        DataSourceError: If the file is missing or cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        raise DataSourceError(f"Data file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataSourceError(f"Cannot read data file {path}: {e}") from e

    try:
        if path.suffix.lower() in JSON_SUFFIXES:
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise DataSourceError(f"Cannot parse data file {path}: {e}") from e


def resolve_source(source: DataSource) -> Any:
    """Return the value a DataSource stands for."""
    if source.is_file:
        logger.debug(f"Reading case data from {source.file}")
        return load_data_file(source.file)
    return source.value


def select_at(data: Any, expression: str) -> Any:
    """
    Narrow data down with a JSONPath expression.

    A single match yields its value; several matches yield a list of
    values, in document order.

    Raises:
        DataSourceError: If the expression is invalid or matches nothing
    """
    try:
        jsonpath_expr = parse_jsonpath(expression)
    except (JsonPathParserError, JsonPathLexerError) as e:
        raise DataSourceError(f"Invalid JSONPath expression {expression!r}: {e}") from e

    matches = jsonpath_expr.find(data)
    if not matches:
        raise DataSourceError(f"JSONPath {expression!r} matched nothing")
    if len(matches) == 1:
        return matches[0].value
    return [match.value for match in matches]
