# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for cjudge.

One root command, every operation a subcommand:

    cjudge judge --source solution.c --tests problem.yaml [--output results/]
    cjudge validate --source solution.c
    cjudge info

The global options (--config, --log-level) are shared by every subcommand
through argparse's parent parser mechanism.
"""

import argparse
import sys

from cjudge.cli.commands import handle_info, handle_judge, handle_validate
from cjudge.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False keeps its -h from colliding with each subcommand's own.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level.",
    )
    return parent


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    judge_parser = subparsers.add_parser(
        "judge",
        parents=[parent],
        help="Compile a C source file and run it against test cases.",
    )
    judge_parser.add_argument(
        "--source",
        type=str,
        required=True,
        help="Path to the C source file to judge.",
    )
    judge_parser.add_argument(
        "--tests",
        type=str,
        required=True,
        help="YAML or JSON file with the test cases ({input, output} entries).",
    )
    judge_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Directory to write result.json and report.txt into.",
    )
    judge_parser.set_defaults(func=handle_judge)

    validate_parser = subparsers.add_parser(
        "validate",
        parents=[parent],
        help="Check that a C source file compiles, without running it.",
    )
    validate_parser.add_argument(
        "--source",
        type=str,
        required=True,
        help="Path to the C source file to check.",
    )
    validate_parser.set_defaults(func=handle_validate)

    info_parser = subparsers.add_parser(
        "info",
        parents=[parent],
        help="Display environment, compiler and config info.",
    )
    info_parser.set_defaults(func=handle_info)


def build_parser() -> argparse.ArgumentParser:
    parent = _build_global_parser()
    root_parser = argparse.ArgumentParser(
        prog="cjudge",
        description="cjudge: compile and judge C submissions against test cases.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)
    return root_parser


def main() -> None:
    """
    Main CLI entrypoint, referenced from pyproject.toml's [project.scripts].

    Parses the command line, dispatches to the subcommand handler and exits
    with its return code. No subcommand shows help and exits with USER_ERROR.
    """
    root_parser = build_parser()
    args = root_parser.parse_args()

    if getattr(args, "func", None) is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
