# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Path helpers shared by the engine, the bootstrap and the CLI."""

from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.

    Safe to call from several judge runs at once: exist_ok swallows the
    race where another thread created it first.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_against(base: Path, target: str | Path) -> Path:
    """
    Resolve a possibly-relative configured path against a base directory.

    Absolute paths come back untouched; relative ones are joined onto `base`.
    """
    candidate = Path(target)
    if candidate.is_absolute():
        return candidate
    return base / candidate
