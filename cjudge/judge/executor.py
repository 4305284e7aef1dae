# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Test-case execution: run the compiled submission once per test case.

Two layers live here. `run_process` is pure process plumbing: start the
binary, feed stdin, collect stdout/stderr, enforce the wall-clock timeout
and the output cap, and report what happened. `run_test_case` takes that
outcome and judges it against the expected output.

Why threads instead of `subprocess.run(capture_output=True)`: run() buffers
everything the child prints. A submission doing `for(;;) putchar('x');`
would fill memory long before the 5 second timeout. Here each stream is
drained by its own reader that kills the process as soon as it crosses
`max_output_bytes`. A separate writer feeds stdin so a program that
doesn't read its input can't deadlock us on a full pipe.

The child runs in its own session, and kills go to the whole process
group, so a submission that forks doesn't leave orphans behind holding
our pipes open.

Comparison is exact equality after stripping leading/trailing whitespace
on both sides. Differences inside the output (an extra space between
numbers, "\\r\\n" line endings in the middle) are wrong answers.
"""

import os
import signal
import subprocess
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any

from cjudge.judge.models import (
    OUTPUT_LIMIT_EXCEEDED,
    RUNTIME_ERROR_MESSAGE,
    TIME_LIMIT_EXCEEDED,
    ExecutionOutcome,
    TestCase,
    TestCaseResult,
    TestCaseStatus,
)
from cjudge.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_EXECUTION_TIMEOUT_SECONDS = 5.0
DEFAULT_MAX_OUTPUT_BYTES = 1024 * 1024

_CHUNK_SIZE = 64 * 1024
# How long to wait for the pipe readers once the process is gone.
_READER_JOIN_SECONDS = 2.0


def kill_process_group(proc: subprocess.Popen[Any]) -> None:
    """SIGKILL the whole session started for `proc`, children included."""
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        # Already reaped, nothing left to kill.
        pass


def run_process(
    argv: Sequence[str],
    input_text: str,
    timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> ExecutionOutcome:
    """
    Run a command with stdin input, a wall-clock timeout and a per-stream output cap.

    Raises OSError if the command can't be started at all (missing binary,
    not executable). That's an infrastructure problem, not something the
    submission did, so it isn't folded into the outcome.
    """
    payload = input_text.encode("utf-8")
    stdout_buffer = bytearray()
    stderr_buffer = bytearray()
    limit_hit = threading.Event()

    start = time.monotonic()
    proc = subprocess.Popen(
        list(argv),
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        start_new_session=True,
    )

    def _drain(stream: IO[bytes], buffer: bytearray) -> None:
        while True:
            try:
                chunk = stream.read1(_CHUNK_SIZE)  # type: ignore[attr-defined]
            except (OSError, ValueError):
                # Stream closed under us after the join gave up.
                return
            if not chunk:
                return
            room = max_output_bytes - len(buffer)
            if len(chunk) > room:
                buffer.extend(chunk[:room])
                limit_hit.set()
                kill_process_group(proc)
                return
            buffer.extend(chunk)

    def _feed(stream: IO[bytes]) -> None:
        try:
            stream.write(payload)
        except OSError:
            # The program exited (or closed stdin) before reading everything.
            pass
        finally:
            try:
                stream.close()
            except OSError:
                pass

    threads = {
        proc.stdout: threading.Thread(target=_drain, args=(proc.stdout, stdout_buffer), daemon=True),
        proc.stderr: threading.Thread(target=_drain, args=(proc.stderr, stderr_buffer), daemon=True),
    }
    writer = threading.Thread(target=_feed, args=(proc.stdin,), daemon=True)
    for thread in threads.values():
        thread.start()
    writer.start()

    timed_out = False
    try:
        proc.wait(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        timed_out = True
        kill_process_group(proc)
        proc.wait()
    elapsed_ms = (time.monotonic() - start) * 1000.0

    # Anything the program left running in the background dies with it.
    # The group outlives its reaped leader only while such descendants exist.
    kill_process_group(proc)

    writer.join(_READER_JOIN_SECONDS)
    for stream, thread in threads.items():
        thread.join(_READER_JOIN_SECONDS)
        stream.close()

    return ExecutionOutcome(
        exit_code=proc.returncode,
        stdout=stdout_buffer.decode("utf-8", errors="replace"),
        stderr=stderr_buffer.decode("utf-8", errors="replace"),
        elapsed_ms=elapsed_ms,
        timed_out=timed_out,
        output_limit_exceeded=limit_hit.is_set() and not timed_out,
    )


def describe_exit(exit_code: int) -> str:
    """Turn a failing return code into `Runtime Error (SIGSEGV)` / `Runtime Error (exit code 3)`."""
    if exit_code < 0:
        try:
            name = signal.Signals(-exit_code).name
        except ValueError:
            name = f"signal {-exit_code}"
        return f"{RUNTIME_ERROR_MESSAGE} ({name})"
    return f"{RUNTIME_ERROR_MESSAGE} (exit code {exit_code})"


def _stdin_payload(test_input: str) -> str:
    # Inputs are stored without the trailing newline a terminal would send.
    if test_input.endswith("\n"):
        return test_input
    return test_input + "\n"


def run_test_case(
    executable_path: Path,
    test_case: TestCase,
    number: int,
    timeout_seconds: float = DEFAULT_EXECUTION_TIMEOUT_SECONDS,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> TestCaseResult:
    """
    Run the binary against one test case and judge the outcome.

    Outcomes, in the order they're checked:
      - killed by the timeout  -> failed, "Time Limit Exceeded", elapsed = the limit
      - output cap exceeded    -> failed, "Output Limit Exceeded"
      - nonzero exit           -> failed, stderr text or a "Runtime Error (...)" summary
      - trimmed stdout differs -> failed, actual and expected attached
      - otherwise              -> passed
    """
    outcome = run_process(
        [str(executable_path)],
        _stdin_payload(test_case.input),
        timeout_seconds=timeout_seconds,
        max_output_bytes=max_output_bytes,
    )

    if outcome.timed_out:
        result = TestCaseResult(
            number=number,
            status=TestCaseStatus.FAILED,
            execution_time_ms=timeout_seconds * 1000.0,
            input=test_case.input,
            error=TIME_LIMIT_EXCEEDED,
        )
    elif outcome.output_limit_exceeded:
        result = TestCaseResult(
            number=number,
            status=TestCaseStatus.FAILED,
            execution_time_ms=outcome.elapsed_ms,
            input=test_case.input,
            error=OUTPUT_LIMIT_EXCEEDED,
        )
    elif outcome.exit_code != 0:
        result = TestCaseResult(
            number=number,
            status=TestCaseStatus.FAILED,
            execution_time_ms=outcome.elapsed_ms,
            input=test_case.input,
            error=outcome.stderr.strip() or describe_exit(outcome.exit_code),
        )
    else:
        actual = outcome.stdout.strip()
        expected = test_case.output.strip()
        result = TestCaseResult(
            number=number,
            status=TestCaseStatus.PASSED if actual == expected else TestCaseStatus.FAILED,
            execution_time_ms=outcome.elapsed_ms,
            input=test_case.input,
            expected_output=expected,
            actual_output=actual,
        )

    logger.debug(
        "Test case finished",
        extra={
            "number": number,
            "status": result.status.value,
            "exit_code": outcome.exit_code,
            "elapsed_ms": round(outcome.elapsed_ms, 1),
            "error": result.error,
        },
    )
    return result
