# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Scratch artifacts for a judge run: the source file and the compiled binary.

Every invocation gets its own pair of files in a shared scratch directory.
Nothing is locked. Isolation comes entirely from the names: each one
carries a millisecond timestamp plus a random suffix, so two submissions
arriving in the same millisecond still land on different paths.

The lifecycle is owned by ArtifactContext:

    with ArtifactContext(scratch_dir) as artifacts:
        materialize_source(code, artifacts)
        compile_c(artifacts.source_path, artifacts.executable_path)
        ...
    # both files are gone here, whatever happened inside the block

Deleting is best-effort. A file that refuses to go away gets logged, but
it never replaces the verdict or the exception coming out of the block.
"""

import secrets
import string
import time
from pathlib import Path
from types import TracebackType

from cjudge.judge.models import JudgeArtifacts
from cjudge.logging.logger import get_logger
from cjudge.utils.filesystem import safe_delete
from cjudge.utils.paths import ensure_directory

logger = get_logger(__name__)

_SUFFIX_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9


def ensure_scratch_directory(scratch_dir: Path) -> Path:
    """Create the scratch directory if needed. Idempotent, like `mkdir -p`."""
    return ensure_directory(scratch_dir)


def new_submission_id(prefix: str = "submission") -> str:
    """
    Build a unique, filesystem-safe id like `submission_1760886000123_k3x9q0a1z`.

    The suffix comes from `secrets` rather than `random` so it can't be
    made to repeat by someone seeding the global generator.
    """
    millis = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{prefix}_{millis}_{suffix}"


def allocate_artifacts(scratch_dir: Path, prefix: str = "submission") -> JudgeArtifacts:
    """Pick the source and executable paths for one invocation. Touches nothing on disk."""
    submission_id = new_submission_id(prefix)
    return JudgeArtifacts(
        submission_id=submission_id,
        source_path=scratch_dir / f"{submission_id}.c",
        executable_path=scratch_dir / submission_id,
    )


def materialize_source(code: str, artifacts: JudgeArtifacts) -> Path:
    """
    Write the submitted code to the invocation's source file, verbatim.

    No validation happens here: length limits and language checks belong
    to whoever accepted the submission.
    """
    artifacts.source_path.write_text(code, encoding="utf-8")
    logger.debug(
        "Source materialized",
        extra={
            "submission_id": artifacts.submission_id,
            "path": str(artifacts.source_path),
            "bytes": len(code.encode("utf-8")),
        },
    )
    return artifacts.source_path


def cleanup_artifacts(artifacts: JudgeArtifacts) -> None:
    """Delete the source file and binary. Missing files are fine; failures are logged and swallowed."""
    for path in (artifacts.source_path, artifacts.executable_path):
        try:
            safe_delete(path)
        except OSError as exc:
            logger.error(
                "Failed to remove judge artifact",
                extra={
                    "submission_id": artifacts.submission_id,
                    "path": str(path),
                    "error": str(exc),
                },
            )


class ArtifactContext:
    """
    Context manager that hands out artifact paths on enter and deletes them on exit.

    Entering also makes sure the scratch directory exists, so an unwritable
    location surfaces as an OSError right at the start of the run. Exiting
    never suppresses an exception from the block.
    """

    def __init__(self, scratch_dir: Path, prefix: str = "submission") -> None:
        self._scratch_dir = scratch_dir
        self._prefix = prefix
        self._artifacts: JudgeArtifacts | None = None

    def __enter__(self) -> JudgeArtifacts:
        ensure_scratch_directory(self._scratch_dir)
        self._artifacts = allocate_artifacts(self._scratch_dir, self._prefix)
        return self._artifacts

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._artifacts is not None:
            cleanup_artifacts(self._artifacts)
            self._artifacts = None
