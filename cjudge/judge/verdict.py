# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Verdict resolution: collapse one compile result and the per-test results into a single verdict.

Every judge run is one path out of PENDING:

    PENDING -> COMPILE_ERROR   the compiler failed
    PENDING -> ACCEPTED        every executed test passed (vacuously true for zero tests)
    PENDING -> WRONG_ANSWER    the last executed test failed

A timeout, a crash and a plain mismatch all end up as WRONG_ANSWER. Only
the per-test `error` field tells them apart. Downstream consumers
(submission stats, the "wrong answers" list) key off this coarse verdict,
so it has to stay that way until they're changed too.

RUNTIME_ERROR never comes out of here. The engine assigns it when the
pipeline itself blows up.
"""

from collections.abc import Sequence

from cjudge.judge.models import CompileResult, TestCaseResult, Verdict


def resolve_verdict(
    compile_result: CompileResult,
    test_results: Sequence[TestCaseResult],
) -> Verdict:
    if not compile_result.success:
        return Verdict.COMPILE_ERROR
    if all(result.passed for result in test_results):
        return Verdict.ACCEPTED
    return Verdict.WRONG_ANSWER


def total_execution_time_ms(test_results: Sequence[TestCaseResult]) -> int:
    """Sum of elapsed time across executed tests, rounded to whole milliseconds."""
    return round(sum(result.execution_time_ms for result in test_results))
