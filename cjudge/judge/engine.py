# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Judge engine: the entry points the submission service calls.

`judge_code` runs the whole pipeline for one submission:

  1. Write the source to a fresh file in the scratch directory
  2. Compile it (compile failure ends the run as COMPILE_ERROR)
  3. Run the binary on each test case in order, stopping at the first failure
  4. Resolve the verdict
  5. Delete the source and the binary, no matter how 1-4 went

The caller always gets a JudgeResult back. Verdict-level failures
(compile errors, wrong answers, crashes, timeouts) are ordinary results.
If something unexpected breaks the pipeline itself, an unwritable scratch
directory say, the run is reported as RUNTIME_ERROR with the exception
text in `compile_error`, after cleanup.

`validate_code` is the cheap pre-flight: compile only, no execution.

Every call is self-contained. There is no shared state between
invocations beyond the scratch directory, and no cap on how many run at
once: each concurrent submission spawns its own compiler and program
processes.
"""

import asyncio
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from cjudge.config.schema import JudgeConfig
from cjudge.judge.artifacts import ArtifactContext, materialize_source
from cjudge.judge.compiler import compile_c
from cjudge.judge.executor import run_test_case
from cjudge.judge.models import (
    CompileResult,
    JudgeArtifacts,
    JudgeRequest,
    JudgeResult,
    TestCase,
    TestCaseResult,
    ValidationResult,
    Verdict,
)
from cjudge.judge.testcases import coerce_test_cases
from cjudge.judge.verdict import resolve_verdict, total_execution_time_ms
from cjudge.logging.logger import get_logger
from cjudge.utils.paths import resolve_against

logger = get_logger(__name__)


def resolve_scratch_directory(config: JudgeConfig) -> Path:
    """The configured scratch directory; relative paths hang off the current working directory."""
    return resolve_against(Path.cwd(), config.scratch_directory)


def _compile(artifacts: JudgeArtifacts, config: JudgeConfig) -> CompileResult:
    return compile_c(
        artifacts.source_path,
        artifacts.executable_path,
        timeout_seconds=config.compile_timeout_seconds,
        compiler=config.compiler,
        flags=config.compiler_flags,
    )


def _run_test_cases(
    executable_path: Path,
    test_cases: tuple[TestCase, ...],
    config: JudgeConfig,
) -> list[TestCaseResult]:
    results: list[TestCaseResult] = []
    for number, test_case in enumerate(test_cases, start=1):
        result = run_test_case(
            executable_path,
            test_case,
            number,
            timeout_seconds=config.execution_timeout_seconds,
            max_output_bytes=config.max_output_bytes,
        )
        results.append(result)
        if not result.passed:
            break
    return results


def judge_code(
    code: str,
    test_cases: Iterable[TestCase | Mapping[str, Any]],
    config: JudgeConfig | None = None,
) -> JudgeResult:
    """
    Compile `code` and run it against `test_cases`.

    Test cases may be TestCase objects or `{"input": ..., "output": ...}`
    mappings straight from the problem store. A malformed entry is
    reported as RUNTIME_ERROR like any other pipeline fault, before
    anything touches the disk.
    """
    config = config or JudgeConfig()
    scratch_dir = resolve_scratch_directory(config)

    try:
        cases = coerce_test_cases(test_cases)
        with ArtifactContext(scratch_dir, prefix="submission") as artifacts:
            logger.info(
                "Judging submission",
                extra={
                    "submission_id": artifacts.submission_id,
                    "test_cases": len(cases),
                },
            )
            materialize_source(code, artifacts)

            compile_result = _compile(artifacts, config)
            if not compile_result.success:
                result = JudgeResult(
                    verdict=Verdict.COMPILE_ERROR,
                    compile_error=compile_result.diagnostic,
                )
            else:
                test_results = _run_test_cases(artifacts.executable_path, cases, config)
                result = JudgeResult(
                    verdict=resolve_verdict(compile_result, test_results),
                    test_results=tuple(test_results),
                    execution_time_ms=total_execution_time_ms(test_results),
                    memory_usage_kb=config.memory_usage_placeholder_kb,
                )
            submission_id = artifacts.submission_id

    except Exception as exc:
        logger.error(
            "Judge error",
            extra={"error": str(exc), "error_type": type(exc).__name__},
            exc_info=True,
        )
        return JudgeResult(verdict=Verdict.RUNTIME_ERROR, compile_error=str(exc))

    logger.info(
        "Judging finished",
        extra={
            "submission_id": submission_id,
            "verdict": result.verdict.value,
            "executed": len(result.test_results),
            "execution_time_ms": result.execution_time_ms,
        },
    )
    return result


def judge_request(request: JudgeRequest, config: JudgeConfig | None = None) -> JudgeResult:
    return judge_code(request.code, request.test_cases, config)


def validate_code(code: str, config: JudgeConfig | None = None) -> ValidationResult:
    """
    Check that `code` compiles, without running anything.

    Uses exactly the compile step judge_code uses, so `valid` here means
    judge_code would get past compilation too. Unexpected errors (the
    scratch directory can't be written, for one) propagate to the caller,
    after cleanup.
    """
    config = config or JudgeConfig()
    scratch_dir = resolve_scratch_directory(config)

    with ArtifactContext(scratch_dir, prefix="validate") as artifacts:
        materialize_source(code, artifacts)
        compile_result = _compile(artifacts, config)

    if compile_result.success:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error=compile_result.diagnostic)


async def judge_code_async(
    code: str,
    test_cases: Iterable[TestCase | Mapping[str, Any]],
    config: JudgeConfig | None = None,
) -> JudgeResult:
    """judge_code on a worker thread, for callers living in an event loop."""
    return await asyncio.to_thread(judge_code, code, list(test_cases), config)


async def validate_code_async(code: str, config: JudgeConfig | None = None) -> ValidationResult:
    return await asyncio.to_thread(validate_code, code, config)
