# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for cjudge tests.

Judge tests never use the default `tmp/submissions` scratch directory:
every test gets its own under tmp_path, so "nothing left behind" can be
checked by listing a directory nobody else writes to.
"""

import stat
import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from cjudge.config.schema import JudgeConfig


@pytest.fixture()
def scratch_dir(tmp_path: Path) -> Path:
    return tmp_path / "scratch"


@pytest.fixture()
def judge_config(scratch_dir: Path) -> JudgeConfig:
    """Production limits except for a short execution timeout, so TLE tests stay quick."""
    return JudgeConfig(
        scratch_directory=str(scratch_dir),
        execution_timeout_seconds=1.0,
    )


@pytest.fixture()
def make_script(tmp_path: Path) -> Callable[[str], Path]:
    """
    Build an executable shell script that stands in for a compiled binary.

    The executor only cares that it can exec a path, so `/bin/sh` scripts
    let us test it without a C compiler.
    """
    counter = {"n": 0}

    def _make(body: str) -> Path:
        counter["n"] += 1
        script = tmp_path / f"program_{counter['n']}"
        script.write_text("#!/bin/sh\n" + textwrap.dedent(body), encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture()
def fake_compiler(make_script: Callable[[str], Path]) -> Path:
    """
    A stand-in "C compiler" that copies the source to the output path and marks it executable.

    Paired with shell-script "sources", it drives the whole engine pipeline
    without gcc. A source containing SYNTAX_ERROR fails to "compile" and
    one containing WARNING compiles with a warning on stderr.
    """
    return make_script("""\
        src="$1"
        out="$3"
        if grep -q SYNTAX_ERROR "$src"; then
            echo "$src:1:1: error: expected ';' before '}' token" >&2
            exit 1
        fi
        if grep -q WARNING "$src"; then
            echo "$src:1:1: warning: unused variable" >&2
        fi
        cp "$src" "$out" && chmod +x "$out"
    """)


@pytest.fixture()
def script_judge_config(scratch_dir: Path, fake_compiler: Path) -> JudgeConfig:
    return JudgeConfig(
        scratch_directory=str(scratch_dir),
        compiler=str(fake_compiler),
        execution_timeout_seconds=1.0,
    )


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "cjudge-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (config_version is missing)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "cjudge-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
