# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for cjudge.

Each config section is a frozen pydantic model. Frozen means a judge run
can't tweak its own limits halfway through: the timeouts a submission was
judged under are the ones that were loaded at startup.

All models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": a typo like `compile_timeout: 10` fails loudly instead
    of silently falling back to the default
  - validate_default=True: even defaults get type-checked
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GlobalConfig(BaseModel):
    """Cross-cutting settings: project identity and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="cjudge", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class JudgeConfig(BaseModel):
    """
    Limits and toolchain settings for the judging engine.

    The defaults are the production values: gcc with -O2 -Wall, 10 seconds
    to compile, 5 seconds per test case, 1 MB of output per stream. The
    memory figure is a placeholder reported on every judged submission;
    nothing actually measures memory.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    scratch_directory: str = Field(
        default="tmp/submissions",
        description="Where source files and binaries live while a submission is judged",
    )
    compiler: str = Field(
        default="gcc",
        description="C compiler executable, looked up on PATH",
    )
    compiler_flags: tuple[str, ...] = Field(
        default=("-O2", "-Wall"),
        description="Flags appended after `<source> -o <binary>`",
    )
    compile_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=300,
        description="Max seconds the compiler may run before the submission is a compile error",
    )
    execution_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=300,
        description="Max seconds one test case may run before it's Time Limit Exceeded",
    )
    max_output_bytes: int = Field(
        default=1024 * 1024,
        ge=1,
        description="Per-stream cap on captured stdout/stderr; the process is killed past it",
    )
    memory_usage_placeholder_kb: int = Field(
        default=2048,
        ge=0,
        description="Constant reported as memoryUsage for judged submissions",
    )


class CJudgeConfig(BaseModel):
    """
    Top-level config container.

    A YAML file needs at least the `global:` section. `judge:` is optional;
    when it's missing the engine runs with JudgeConfig's defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    judge: JudgeConfig = Field(default_factory=JudgeConfig)
