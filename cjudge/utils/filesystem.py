# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Filesystem operations with the failure behaviour the judge needs.

Two flavours live here:
  - atomic writes for reports, so a crash never leaves a half-written
    result.json behind
  - tolerant deletes for scratch artifacts, where "already gone" is a
    perfectly good outcome
"""

import tempfile
from pathlib import Path


def atomic_write(target_path: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Write content to a file atomically.

    We write to a temp file in the same directory and rename it over the
    target. A rename within one filesystem is atomic on POSIX, so readers
    see either the old file or the complete new one.

    Raises:
        OSError: If the write or rename fails.
    """
    target_path.parent.mkdir(parents=True, exist_ok=True)

    temp_fd = tempfile.NamedTemporaryFile(
        mode="w",
        encoding=encoding,
        dir=str(target_path.parent),
        prefix=".cjudge_tmp_",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(temp_fd.name)

    try:
        temp_fd.write(content)
        temp_fd.flush()
        temp_fd.close()
        temp_path.replace(target_path)
    except BaseException:
        temp_fd.close()
        if temp_path.exists():
            temp_path.unlink()
        raise


def safe_delete(file_path: Path) -> bool:
    """
    Delete a file if it exists. Returns whether anything was actually deleted.

    A missing file is not an error. Anything else (permissions, the path
    being a directory) still raises OSError for the caller to decide on.
    """
    try:
        file_path.unlink()
    except FileNotFoundError:
        return False
    return True
