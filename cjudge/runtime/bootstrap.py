# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for cjudge.

Runs once before a CLI command does real work:
  1. Validate the Python version
  2. Configure the `cjudge` logger from the global config
  3. Create the scratch directory
  4. Warn if the configured compiler isn't on PATH

A missing compiler is a warning, not a failure: `cjudge info` should
still work on a machine without gcc, and judging will report the problem
per submission anyway.
"""

from pathlib import Path

from cjudge.config.schema import CJudgeConfig
from cjudge.logging.logger import get_logger
from cjudge.runtime.environment import check_minimum_python, find_compiler, get_system_info
from cjudge.utils.paths import ensure_directory, resolve_against


def bootstrap(config: CJudgeConfig) -> None:
    check_minimum_python()

    global_config = config.global_config
    log_file = Path(global_config.log_file) if global_config.log_file is not None else None
    logger = get_logger("cjudge.runtime", log_level=global_config.log_level, log_file=log_file)

    scratch_dir = ensure_directory(resolve_against(Path.cwd(), config.judge.scratch_directory))

    compiler_path = find_compiler(config.judge.compiler)
    if compiler_path is None:
        logger.warning(
            "Configured compiler not found on PATH",
            extra={"compiler": config.judge.compiler},
        )

    system_info = get_system_info()
    logger.info(
        "cjudge bootstrap complete",
        extra={
            "project": global_config.project_name,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "scratch_directory": str(scratch_dir),
            "compiler": compiler_path,
        },
    )
