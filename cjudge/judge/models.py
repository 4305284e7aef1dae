# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the judging engine.

Everything here is a frozen dataclass: a judge run produces results, it
never edits them. The one exception to "plain data" is JudgeResult.to_dict,
which renders the camelCase shape the submission API stores and returns.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class Verdict(str, Enum):
    """
    Final classification of a submission.

    PENDING is the state a submission sits in before the engine has run;
    the engine itself only ever returns one of the other four.
    """

    PENDING = "pending"
    ACCEPTED = "accepted"
    WRONG_ANSWER = "wrong_answer"
    COMPILE_ERROR = "compile_error"
    RUNTIME_ERROR = "runtime_error"


class TestCaseStatus(str, Enum):
    __test__ = False

    PASSED = "passed"
    FAILED = "failed"


# Per-test error strings. Consumers match on these, so they're part of
# the result format.
TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
OUTPUT_LIMIT_EXCEEDED = "Output Limit Exceeded"
RUNTIME_ERROR_MESSAGE = "Runtime Error"


@dataclass(frozen=True)
class TestCase:
    """One hidden test: stdin for the program and the stdout we expect back."""

    __test__ = False  # not a pytest class, despite the name

    input: str
    output: str


@dataclass(frozen=True)
class JudgeRequest:
    code: str
    test_cases: tuple[TestCase, ...] = ()


@dataclass(frozen=True)
class JudgeArtifacts:
    """
    The two files one judge invocation owns.

    Both names derive from submission_id, which is unique per invocation,
    so concurrent runs sharing a scratch directory never touch each
    other's files.
    """

    submission_id: str
    source_path: Path
    executable_path: Path


@dataclass(frozen=True)
class CompileResult:
    """What came back from running the compiler on a submission."""

    success: bool
    exit_code: int
    stdout: str
    stderr: str
    elapsed_seconds: float
    timed_out: bool = False

    @property
    def diagnostic(self) -> str:
        """The text to show the submitter: stderr, or stdout if stderr was empty."""
        return self.stderr or self.stdout or f"Compilation failed with exit code {self.exit_code}"


@dataclass(frozen=True)
class ExecutionOutcome:
    """
    Raw outcome of running the submitted binary once.

    This is what the process did, before any judging. exit_code is the
    subprocess return code, so a negative value means the process died
    from that signal.
    """

    exit_code: int
    stdout: str
    stderr: str
    elapsed_ms: float
    timed_out: bool = False
    output_limit_exceeded: bool = False


@dataclass(frozen=True)
class TestCaseResult:
    """
    How one test case went.

    `number` is 1-based, matching how test cases are shown to users.
    expected_output and actual_output are only filled in when the program
    ran to completion; error carries the reason for everything else.
    """

    __test__ = False

    number: int
    status: TestCaseStatus
    execution_time_ms: float
    input: str | None = None
    expected_output: str | None = None
    actual_output: str | None = None
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.status is TestCaseStatus.PASSED

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "number": self.number,
            "status": self.status.value,
            "executionTime": round(self.execution_time_ms),
        }
        optional = {
            "input": self.input,
            "expectedOutput": self.expected_output,
            "actualOutput": self.actual_output,
            "error": self.error,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


@dataclass(frozen=True)
class JudgeResult:
    """
    The complete outcome of judging one submission.

    test_results is a prefix of the test suite: judging stops at the first
    failure, so a failed entry is always the last one. It's empty for
    compile errors and engine faults.
    """

    verdict: Verdict
    test_results: tuple[TestCaseResult, ...] = field(default_factory=tuple)
    execution_time_ms: int | None = None
    memory_usage_kb: int | None = None
    compile_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "verdict": self.verdict.value,
            "testResults": [result.to_dict() for result in self.test_results],
        }
        if self.execution_time_ms is not None:
            payload["executionTime"] = self.execution_time_ms
        if self.memory_usage_kb is not None:
            payload["memoryUsage"] = self.memory_usage_kb
        if self.compile_error is not None:
            payload["compileError"] = self.compile_error
        return payload


@dataclass(frozen=True)
class ValidationResult:
    """Result of a compile-only syntax check."""

    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"valid": self.valid}
        if self.error is not None:
            payload["error"] = self.error
        return payload
