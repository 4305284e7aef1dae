# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Judge report writer.

When the CLI is asked for `--output DIR`, the result lands on disk as:

    DIR/
    ├── result.json           # the JudgeResult in the API wire shape
    ├── report.txt            # human-readable summary
    └── config_snapshot.yaml  # the judge limits used (optional)

result.json is the authoritative output. report.txt shows the same data
in a form that's easier to read.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

import yaml

from cjudge.judge.models import JudgeResult
from cjudge.logging.logger import get_logger
from cjudge.utils.filesystem import atomic_write

logger = get_logger(__name__)

_RULE = "=" * 60


def write_report(
    result: JudgeResult,
    output_dir: Path,
    config_snapshot: dict[str, object] | None = None,
) -> Path:
    """Write result.json, report.txt and (optionally) config_snapshot.yaml. Returns output_dir."""
    output_dir.mkdir(parents=True, exist_ok=True)

    atomic_write(
        output_dir / "result.json",
        json.dumps(result.to_dict(), indent=2, sort_keys=True, ensure_ascii=False) + "\n",
    )
    atomic_write(output_dir / "report.txt", format_report_text(result))

    if config_snapshot is not None:
        atomic_write(
            output_dir / "config_snapshot.yaml",
            yaml.safe_dump(config_snapshot, default_flow_style=False, sort_keys=True),
        )

    logger.info(
        "Judge report written",
        extra={"output_dir": str(output_dir), "verdict": result.verdict.value},
    )
    return output_dir


def format_report_text(result: JudgeResult) -> str:
    timestamp = datetime.now(tz=timezone.utc).isoformat()
    lines: list[str] = [
        _RULE,
        "CJUDGE RESULT",
        f"Generated: {timestamp}",
        _RULE,
        "",
        f"Verdict: {result.verdict.value}",
    ]

    if result.execution_time_ms is not None:
        lines.append(f"Execution Time: {result.execution_time_ms} ms")
    if result.memory_usage_kb is not None:
        lines.append(f"Memory Usage: {result.memory_usage_kb} KB (placeholder)")

    if result.compile_error:
        lines.extend(["", "--- COMPILER OUTPUT ---", result.compile_error.rstrip()])

    if result.test_results:
        lines.extend(["", "--- TEST CASES ---"])
        for test in result.test_results:
            line = f"  #{test.number}: {test.status.value} ({round(test.execution_time_ms)} ms)"
            if test.error:
                line += f" - {test.error.splitlines()[0]}"
            lines.append(line)
            if not test.passed and test.error is None:
                lines.append(f"    expected: {test.expected_output!r}")
                lines.append(f"    actual:   {test.actual_output!r}")

    lines.extend(["", _RULE])
    return "\n".join(lines) + "\n"
