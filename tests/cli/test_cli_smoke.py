# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

CLI tests verify that:
  - commands execute
  - exit codes are correct
  - help text exists

We use subprocess to drive the real entrypoint the way a user would. This
catches issues that unit tests miss, like broken imports or a handler that
was never registered. Runs happen inside tmp_path so the default scratch
directory never lands in the repo.
"""

import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from cjudge.cli.main import build_parser

_REPO_ROOT = Path(__file__).resolve().parents[2]

ECHO_SUM = "#!/bin/sh\nread a b\necho $((a + b))\n"


def _run_cli(*args: str, cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run `cjudge` with the given arguments and capture output."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(_REPO_ROOT), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "cjudge.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=60,
        cwd=cwd,
        env=env,
    )


def _log_lines(stdout: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in stdout.splitlines() if line.startswith("{")]


@pytest.fixture()
def judge_yaml(tmp_path: Path, fake_compiler: Path) -> Path:
    """A config that judges with the fake compiler, so no gcc is needed."""
    config_file = tmp_path / "cjudge.yaml"
    config_file.write_text(textwrap.dedent(f"""\
        global:
          config_version: "1.0.0"
          log_level: "WARNING"
        judge:
          scratch_directory: "{tmp_path / 'scratch'}"
          compiler: "{fake_compiler}"
          execution_timeout_seconds: 2
    """), encoding="utf-8")
    return config_file


@pytest.fixture()
def sum_tests(tmp_path: Path) -> Path:
    tests_file = tmp_path / "problem.yaml"
    tests_file.write_text(textwrap.dedent("""\
        title: A+B
        examples:
          - input: "1 2"
            output: "3"
          - input: "40 2"
            output: "42"
    """), encoding="utf-8")
    return tests_file


def _source(tmp_path: Path, code: str) -> Path:
    source = tmp_path / "solution.c"
    source.write_text(code, encoding="utf-8")
    return source


class TestHelpTexts:
    @pytest.mark.parametrize("subcommand", ["judge", "validate", "info"])
    def test_subcommand_help_exits_zero(self, subcommand: str, tmp_path: Path) -> None:
        result = _run_cli(subcommand, "--help", cwd=tmp_path)
        assert result.returncode == 0
        assert "usage" in result.stdout.lower()

    def test_root_help_exits_with_user_error(self, tmp_path: Path) -> None:
        result = _run_cli(cwd=tmp_path)
        assert result.returncode == 1


class TestSubcommandExecution:
    def test_info_runs_without_config(self, tmp_path: Path) -> None:
        result = _run_cli("info", cwd=tmp_path)
        assert result.returncode == 0
        assert any(line["msg"] == "System information" for line in _log_lines(result.stdout))

    def test_judge_accepted(
        self, tmp_path: Path, judge_yaml: Path, sum_tests: Path,
    ) -> None:
        source = _source(tmp_path, ECHO_SUM)
        out_dir = tmp_path / "results"

        result = _run_cli(
            "judge", "--config", str(judge_yaml), "--log-level", "INFO",
            "--source", str(source), "--tests", str(sum_tests), "--output", str(out_dir),
            cwd=tmp_path,
        )

        assert result.returncode == 0
        payload = json.loads((out_dir / "result.json").read_text(encoding="utf-8"))
        assert payload["verdict"] == "accepted"
        assert len(payload["testResults"]) == 2
        assert (out_dir / "config_snapshot.yaml").is_file()
        assert list((tmp_path / "scratch").iterdir()) == []

    def test_judge_wrong_answer_is_validation_error(
        self, tmp_path: Path, judge_yaml: Path, sum_tests: Path,
    ) -> None:
        source = _source(tmp_path, "#!/bin/sh\necho 0\n")

        result = _run_cli(
            "judge", "--config", str(judge_yaml),
            "--source", str(source), "--tests", str(sum_tests),
            cwd=tmp_path,
        )

        assert result.returncode == 4

    def test_judge_compile_error_is_validation_error(
        self, tmp_path: Path, judge_yaml: Path, sum_tests: Path,
    ) -> None:
        source = _source(tmp_path, "#!/bin/sh\nSYNTAX_ERROR\n")

        result = _run_cli(
            "judge", "--config", str(judge_yaml),
            "--source", str(source), "--tests", str(sum_tests),
            cwd=tmp_path,
        )

        assert result.returncode == 4

    def test_validate(self, tmp_path: Path, judge_yaml: Path) -> None:
        good = _source(tmp_path, ECHO_SUM)
        ok = _run_cli("validate", "--config", str(judge_yaml), "--source", str(good), cwd=tmp_path)
        assert ok.returncode == 0

        bad = _source(tmp_path, "#!/bin/sh\nSYNTAX_ERROR\n")
        fail = _run_cli("validate", "--config", str(judge_yaml), "--source", str(bad), cwd=tmp_path)
        assert fail.returncode == 4


class TestUserErrors:
    def test_missing_source_file(self, tmp_path: Path, judge_yaml: Path, sum_tests: Path) -> None:
        result = _run_cli(
            "judge", "--config", str(judge_yaml),
            "--source", str(tmp_path / "nope.c"), "--tests", str(sum_tests),
            cwd=tmp_path,
        )
        assert result.returncode == 1

    def test_source_that_is_not_utf8(self, tmp_path: Path, judge_yaml: Path, sum_tests: Path) -> None:
        source = tmp_path / "latin1.c"
        source.write_bytes(b"int main(void) { /* caf\xe9 */ return 0; }\n")

        judged = _run_cli(
            "judge", "--config", str(judge_yaml),
            "--source", str(source), "--tests", str(sum_tests),
            cwd=tmp_path,
        )
        validated = _run_cli(
            "validate", "--config", str(judge_yaml), "--source", str(source), cwd=tmp_path,
        )

        assert judged.returncode == 1
        assert validated.returncode == 1
        assert "Traceback" not in judged.stderr
        assert any(line["msg"] == "Cannot read source file" for line in _log_lines(judged.stdout))

    def test_broken_test_file(self, tmp_path: Path, judge_yaml: Path) -> None:
        tests_file = tmp_path / "tests.yaml"
        tests_file.write_text("- input: '1'\n", encoding="utf-8")

        result = _run_cli(
            "judge", "--config", str(judge_yaml),
            "--source", str(_source(tmp_path, ECHO_SUM)), "--tests", str(tests_file),
            cwd=tmp_path,
        )
        assert result.returncode == 1


class TestConfigLoading:
    def test_nonexistent_config_returns_config_error(self, tmp_path: Path) -> None:
        result = _run_cli("info", "--config", "/nonexistent/path.yaml", cwd=tmp_path)
        assert result.returncode == 2

    def test_invalid_config_returns_config_error(
        self, tmp_path: Path, invalid_config_file: Path,
    ) -> None:
        result = _run_cli("info", "--config", str(invalid_config_file), cwd=tmp_path)
        assert result.returncode == 2

    def test_bad_log_level_in_config_returns_config_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "bad_level.yaml"
        config_file.write_text(
            'global:\n  config_version: "1.0.0"\n  log_level: "LOUD"\n', encoding="utf-8",
        )
        result = _run_cli("info", "--config", str(config_file), cwd=tmp_path)
        assert result.returncode == 2

    def test_valid_config_is_accepted(self, tmp_path: Path, tmp_config_file: Path) -> None:
        result = _run_cli("info", "--config", str(tmp_config_file), cwd=tmp_path)
        assert result.returncode == 0


class TestParser:
    def test_judge_arguments(self) -> None:
        args = build_parser().parse_args(
            ["judge", "--source", "a.c", "--tests", "t.yaml", "--log-level", "DEBUG"],
        )
        assert args.command == "judge"
        assert args.source == "a.c"
        assert args.tests == "t.yaml"
        assert args.output is None
        assert args.log_level == "DEBUG"

    def test_judge_requires_tests(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["judge", "--source", "a.c"])

    def test_unknown_log_level_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["info", "--log-level", "LOUD"])
