# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Test-case parsing and loading.

The problem store hands the engine a list of `{input, output}` mappings
(a problem's `examples`). This module turns those into TestCase objects,
and loads the same shape from a YAML or JSON file for the CLI.

Accepted file layouts:

    # a bare list
    - input: "1 2"
      output: "3"

    # or a problem document with an `examples` (or `test_cases`) list
    title: A+B
    examples:
      - input: "1 2"
        output: "3"

Scalar values (`output: 3`) are turned into strings, since that's what
the program will print. Anything else missing or malformed is an error:
silently dropping a hidden test would let wrong solutions through.
"""

import json
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from cjudge.judge.exceptions import TestCaseFileError
from cjudge.judge.models import TestCase
from cjudge.logging.logger import get_logger

logger = get_logger(__name__)

_LIST_KEYS: tuple[str, ...] = ("examples", "test_cases")


def _as_text(value: Any, field_name: str, index: int) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ValueError(
        f"Test case {index + 1}: '{field_name}' must be a string, got {type(value).__name__}"
    )


def coerce_test_case(item: TestCase | Mapping[str, Any], index: int = 0) -> TestCase:
    """
    Accept a TestCase or an `{input, output}` mapping and return a TestCase.

    Raises:
        ValueError: If a mapping lacks either key or holds a non-scalar value.
    """
    if isinstance(item, TestCase):
        return item
    if not isinstance(item, Mapping):
        raise ValueError(
            f"Test case {index + 1} must be a mapping with 'input' and 'output', "
            f"got {type(item).__name__}"
        )
    for key in ("input", "output"):
        if key not in item:
            raise ValueError(f"Test case {index + 1} is missing '{key}'")
    return TestCase(
        input=_as_text(item["input"], "input", index),
        output=_as_text(item["output"], "output", index),
    )


def coerce_test_cases(items: Iterable[TestCase | Mapping[str, Any]]) -> tuple[TestCase, ...]:
    """Coerce every entry, keeping order. Order matters: judging stops at the first failure."""
    return tuple(coerce_test_case(item, index) for index, item in enumerate(items))


def _parse_document(path: Path, raw_text: str) -> Any:
    if path.suffix.lower() == ".json":
        try:
            return json.loads(raw_text)
        except json.JSONDecodeError as err:
            raise TestCaseFileError(f"Invalid JSON in {path}: {err}") from err
    try:
        return yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise TestCaseFileError(f"Invalid YAML in {path}: {err}") from err


def _extract_entries(path: Path, document: Any) -> list[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, dict):
        for key in _LIST_KEYS:
            entries = document.get(key)
            if isinstance(entries, list):
                return entries
    raise TestCaseFileError(
        f"{path} must contain a list of test cases or a mapping with one of: "
        f"{', '.join(_LIST_KEYS)}"
    )


def load_test_cases(path: Path) -> tuple[TestCase, ...]:
    """
    Load test cases from a YAML or JSON file.

    Raises:
        TestCaseFileError: Missing/unreadable file, bad syntax, wrong shape,
            or an entry without `input`/`output`.
    """
    if not path.is_file():
        raise TestCaseFileError(f"Test case file not found: {path}")

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as err:
        raise TestCaseFileError(f"Cannot read test case file {path}: {err}") from err

    entries = _extract_entries(path, _parse_document(path, raw_text))

    try:
        test_cases = coerce_test_cases(entries)
    except ValueError as err:
        raise TestCaseFileError(f"{path}: {err}") from err

    logger.debug(
        "Test cases loaded",
        extra={"path": str(path), "count": len(test_cases)},
    )
    return test_cases
