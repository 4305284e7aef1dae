# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for scratch artifact naming, materialization and cleanup.
"""

import re
from pathlib import Path

import pytest

from cjudge.judge.artifacts import (
    ArtifactContext,
    allocate_artifacts,
    cleanup_artifacts,
    ensure_scratch_directory,
    materialize_source,
    new_submission_id,
)
from cjudge.judge.models import JudgeArtifacts


class TestSubmissionIds:
    def test_id_format(self) -> None:
        assert re.fullmatch(r"submission_\d+_[0-9a-z]{9}", new_submission_id())

    def test_prefix_is_used(self) -> None:
        assert new_submission_id("validate").startswith("validate_")

    def test_ids_are_unique(self) -> None:
        ids = {new_submission_id() for _ in range(2000)}
        assert len(ids) == 2000


class TestScratchDirectory:
    def test_creates_nested_directory(self, tmp_path: Path) -> None:
        scratch = tmp_path / "tmp" / "submissions"
        ensure_scratch_directory(scratch)
        assert scratch.is_dir()

    def test_is_idempotent(self, tmp_path: Path) -> None:
        scratch = tmp_path / "scratch"
        ensure_scratch_directory(scratch)
        ensure_scratch_directory(scratch)
        assert scratch.is_dir()


class TestMaterialize:
    def test_paths_share_the_submission_id(self, tmp_path: Path) -> None:
        artifacts = allocate_artifacts(tmp_path)

        assert artifacts.source_path == tmp_path / f"{artifacts.submission_id}.c"
        assert artifacts.executable_path == tmp_path / artifacts.submission_id
        assert not artifacts.source_path.exists()

    def test_writes_source_verbatim(self, tmp_path: Path) -> None:
        artifacts = allocate_artifacts(tmp_path)
        code = '#include <stdio.h>\n// 안녕하세요\nint main(void) { puts("ok"); }\n'

        path = materialize_source(code, artifacts)

        assert path == artifacts.source_path
        assert path.read_text(encoding="utf-8") == code

    def test_empty_source_is_allowed(self, tmp_path: Path) -> None:
        artifacts = allocate_artifacts(tmp_path)
        materialize_source("", artifacts)
        assert artifacts.source_path.read_text(encoding="utf-8") == ""


class TestCleanup:
    def test_removes_both_files(self, tmp_path: Path) -> None:
        artifacts = allocate_artifacts(tmp_path)
        artifacts.source_path.write_text("x", encoding="utf-8")
        artifacts.executable_path.write_bytes(b"\x7fELF")

        cleanup_artifacts(artifacts)

        assert list(tmp_path.iterdir()) == []

    def test_missing_files_are_fine(self, tmp_path: Path) -> None:
        cleanup_artifacts(allocate_artifacts(tmp_path))

    def test_deletion_failure_is_swallowed(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.mkdir()
        (blocker / "keep").write_text("x", encoding="utf-8")
        source = tmp_path / "s.c"
        source.write_text("x", encoding="utf-8")
        artifacts = JudgeArtifacts(
            submission_id="s", source_path=source, executable_path=blocker,
        )

        cleanup_artifacts(artifacts)

        assert not source.exists()
        assert blocker.is_dir()


class TestArtifactContext:
    def test_cleans_up_on_exit(self, tmp_path: Path) -> None:
        scratch = tmp_path / "scratch"
        with ArtifactContext(scratch) as artifacts:
            materialize_source("int main(void){}", artifacts)
            artifacts.executable_path.write_bytes(b"bin")
            assert len(list(scratch.iterdir())) == 2

        assert list(scratch.iterdir()) == []

    def test_cleans_up_on_error_and_reraises(self, tmp_path: Path) -> None:
        scratch = tmp_path / "scratch"
        with pytest.raises(RuntimeError, match="boom"):
            with ArtifactContext(scratch) as artifacts:
                materialize_source("int main(void){}", artifacts)
                raise RuntimeError("boom")

        assert list(scratch.iterdir()) == []

    def test_unusable_scratch_directory_raises_on_enter(self, tmp_path: Path) -> None:
        not_a_dir = tmp_path / "file.txt"
        not_a_dir.write_text("x", encoding="utf-8")

        with pytest.raises(OSError):
            with ArtifactContext(not_a_dir / "scratch"):
                pass
