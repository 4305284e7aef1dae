# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The judging engine.

Most callers only need `judge_code` and `validate_code`; the component
modules (artifacts, compiler, executor, verdict) are importable on their
own for tests and tooling.
"""

from cjudge.judge.engine import (
    judge_code,
    judge_code_async,
    judge_request,
    validate_code,
    validate_code_async,
)
from cjudge.judge.models import (
    JudgeRequest,
    JudgeResult,
    TestCase,
    TestCaseResult,
    TestCaseStatus,
    ValidationResult,
    Verdict,
)

__all__ = [
    "JudgeRequest",
    "JudgeResult",
    "TestCase",
    "TestCaseResult",
    "TestCaseStatus",
    "ValidationResult",
    "Verdict",
    "judge_code",
    "judge_code_async",
    "judge_request",
    "validate_code",
    "validate_code_async",
]
