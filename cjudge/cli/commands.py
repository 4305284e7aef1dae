# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the cjudge CLI.

Each handler takes the parsed argparse namespace and returns an exit code.
No print() calls: verdicts, diagnostics and errors all go through the
structured logger, so a CI job can parse the output line by line.
"""

import argparse
import logging
from pathlib import Path

from cjudge.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from cjudge.config.exceptions import ConfigError
from cjudge.config.loader import load_config
from cjudge.config.schema import CJudgeConfig, JudgeConfig
from cjudge.logging.logger import get_logger
from cjudge.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, CJudgeConfig | None, logging.Logger]:
    """
    Shared setup: load the config (if given) and run bootstrap.

    Returns (exit_code, config, logger). Anything other than SUCCESS means
    the caller should return that code straight away.
    """
    logger = get_logger(f"cjudge.cli.{command_name}", log_level=args.log_level)

    config = None
    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger

        try:
            bootstrap(config)
        except ValueError as err:
            # Bad log_level: the schema accepts any string, the logger does not.
            logger.error(
                "Configuration error",
                extra={"command": command_name, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger
        except (OSError, RuntimeError) as err:
            logger.error(
                "Bootstrap failed",
                extra={"command": command_name, "error": str(err)},
            )
            return RUNTIME_ERROR, None, logger
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )

    return SUCCESS, config, logger


def _judge_config(config: CJudgeConfig | None) -> JudgeConfig:
    return config.judge if config is not None else JudgeConfig()


def _read_source(path_arg: str, logger: logging.Logger) -> str | None:
    source_path = Path(path_arg)
    if not source_path.is_file():
        logger.error("Source file not found", extra={"path": str(source_path)})
        return None
    try:
        return source_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        logger.error(
            "Cannot read source file",
            extra={"path": str(source_path), "error": str(err)},
        )
        return None


def handle_judge(args: argparse.Namespace) -> int:
    """Judge a source file against a test-case file."""
    exit_code, config, logger = _load_and_bootstrap(args, "judge")
    if exit_code != SUCCESS:
        return exit_code

    from cjudge.judge.engine import judge_code
    from cjudge.judge.exceptions import TestCaseFileError
    from cjudge.judge.models import Verdict
    from cjudge.judge.testcases import load_test_cases

    code = _read_source(args.source, logger)
    if code is None:
        return USER_ERROR

    try:
        test_cases = load_test_cases(Path(args.tests))
    except TestCaseFileError as err:
        logger.error("Invalid test case file", extra={"error": str(err)})
        return USER_ERROR

    judge_config = _judge_config(config)
    result = judge_code(code, test_cases, judge_config)

    logger.info(
        "Verdict",
        extra={
            "verdict": result.verdict.value,
            "execution_time_ms": result.execution_time_ms,
            "executed": len(result.test_results),
            "total": len(test_cases),
            "compile_error": result.compile_error,
        },
    )
    for test in result.test_results:
        if not test.passed:
            logger.info(
                "Failed test case",
                extra={
                    "number": test.number,
                    "error": test.error,
                    "expected": test.expected_output,
                    "actual": test.actual_output,
                },
            )

    if args.output is not None:
        from cjudge.reporting.writer import write_report

        try:
            write_report(
                result,
                Path(args.output),
                config_snapshot=judge_config.model_dump(mode="json"),
            )
        except OSError as err:
            logger.error("Could not write report", extra={"error": str(err)}, exc_info=True)
            return RUNTIME_ERROR

    if result.verdict is Verdict.ACCEPTED:
        return SUCCESS
    if result.verdict is Verdict.RUNTIME_ERROR:
        return RUNTIME_ERROR
    return VALIDATION_ERROR


def handle_validate(args: argparse.Namespace) -> int:
    """Compile-only syntax check of a source file."""
    exit_code, config, logger = _load_and_bootstrap(args, "validate")
    if exit_code != SUCCESS:
        return exit_code

    from cjudge.judge.engine import validate_code

    code = _read_source(args.source, logger)
    if code is None:
        return USER_ERROR

    try:
        result = validate_code(code, _judge_config(config))
    except OSError as err:
        logger.error("Validation failed", extra={"error": str(err)}, exc_info=True)
        return RUNTIME_ERROR

    logger.info("Validation", extra=result.to_dict())
    return SUCCESS if result.valid else VALIDATION_ERROR


def handle_info(args: argparse.Namespace) -> int:
    """Display environment, compiler and configuration information."""
    exit_code, config, logger = _load_and_bootstrap(args, "info")
    if exit_code != SUCCESS:
        return exit_code

    from cjudge import __version__
    from cjudge.runtime.environment import find_compiler, get_system_info

    judge_config = _judge_config(config)
    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "cjudge_version": __version__,
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
            "hostname": system_info.hostname,
            "compiler": judge_config.compiler,
            "compiler_path": find_compiler(judge_config.compiler),
            "compile_timeout_seconds": judge_config.compile_timeout_seconds,
            "execution_timeout_seconds": judge_config.execution_timeout_seconds,
            "config": args.config,
        },
    )
    return SUCCESS
