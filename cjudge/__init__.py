# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
cjudge: compile-and-run judging for C submissions.

Subsystems:
  - judge: materialize, compile, execute, resolve the verdict, clean up
  - config: YAML config validated into frozen pydantic models
  - logging: structured JSON logging
  - runtime: environment checks and bootstrap
  - reporting: result files for CLI runs
  - cli: the `cjudge` command
"""

__version__ = "0.1.0"
