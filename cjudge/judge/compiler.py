# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
C compilation step.

Runs the compiler on a materialized source file with a hard timeout and
reports what happened. The rules are simple:

  - exit code 0 means success, even if the compiler printed warnings
    (those get logged, never shown to the submitter)
  - a nonzero exit, a timeout, or a missing compiler are all failures,
    and the diagnostic text travels back in the CompileResult

The compiler is invoked with an argv list, never through a shell, so a
path or flag can't smuggle in extra commands.
"""

import subprocess
import time
from collections.abc import Sequence
from pathlib import Path

from cjudge.judge.executor import kill_process_group
from cjudge.judge.models import CompileResult
from cjudge.logging.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COMPILER = "gcc"
DEFAULT_FLAGS: tuple[str, ...] = ("-O2", "-Wall")
DEFAULT_COMPILE_TIMEOUT_SECONDS = 10.0


def build_compile_command(
    source_path: Path,
    executable_path: Path,
    compiler: str = DEFAULT_COMPILER,
    flags: Sequence[str] = DEFAULT_FLAGS,
) -> list[str]:
    """`gcc <source> -o <binary> -O2 -Wall`, as an argv list."""
    return [compiler, str(source_path), "-o", str(executable_path), *flags]


def compile_c(
    source_path: Path,
    executable_path: Path,
    timeout_seconds: float = DEFAULT_COMPILE_TIMEOUT_SECONDS,
    compiler: str = DEFAULT_COMPILER,
    flags: Sequence[str] = DEFAULT_FLAGS,
) -> CompileResult:
    """
    Compile `source_path` into `executable_path` and capture the result.

    The timeout kills the compiler and everything it spawned if it hangs
    (huge macro expansions and #include loops do happen), so a single
    submission can't stall the judge.
    """
    command = build_compile_command(source_path, executable_path, compiler, flags)
    start = time.monotonic()

    try:
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            start_new_session=True,
        )
    except FileNotFoundError:
        elapsed = time.monotonic() - start
        logger.error(
            "Compiler not found",
            extra={"compiler": compiler, "source": str(source_path)},
        )
        return CompileResult(
            success=False,
            exit_code=-1,
            stdout="",
            stderr=f"{compiler} executable not found",
            elapsed_seconds=elapsed,
        )

    try:
        stdout, stderr = proc.communicate(timeout=timeout_seconds)
    except subprocess.TimeoutExpired:
        # gcc forks cc1/as/ld; kill the group so none of them keep the pipes open.
        kill_process_group(proc)
        proc.communicate()
        elapsed = time.monotonic() - start
        logger.warning(
            "Compilation timed out",
            extra={
                "timeout_seconds": timeout_seconds,
                "source": str(source_path),
            },
        )
        return CompileResult(
            success=False,
            exit_code=-1,
            stdout="",
            stderr=f"Compilation timed out after {timeout_seconds:g}s",
            elapsed_seconds=elapsed,
            timed_out=True,
        )

    elapsed = time.monotonic() - start
    success = proc.returncode == 0

    if success and stderr:
        logger.warning(
            "Compilation warnings",
            extra={"source": str(source_path), "warnings": stderr},
        )
    elif not success:
        logger.info(
            "Compilation failed",
            extra={
                "source": str(source_path),
                "exit_code": proc.returncode,
                "diagnostic": stderr or stdout,
            },
        )

    logger.debug(
        "Compilation finished",
        extra={
            "success": success,
            "exit_code": proc.returncode,
            "elapsed_seconds": round(elapsed, 3),
        },
    )

    return CompileResult(
        success=success,
        exit_code=proc.returncode,
        stdout=stdout,
        stderr=stderr,
        elapsed_seconds=elapsed,
    )
