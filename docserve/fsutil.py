"""File-system helpers: recursive copies and cleanup of stale build directories."""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path

TEMPDIR_PREFIX = "docsrs-docs"


def copy_dir_all(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy the contents of ``src`` into ``dst`` recursively, like ``cp -r``."""
    dst = Path(dst)
    dst.mkdir(parents=True, exist_ok=True)
    with os.scandir(src) as entries:
        for entry in entries:
            target = dst / entry.name
            if entry.is_dir(follow_symlinks=False):
                copy_dir_all(entry.path, target)
            else:
                shutil.copy(entry.path, target)


def remove_tempdirs(tempdir: str | os.PathLike | None = None) -> None:
    """Remove leftover build directories whose names start with the build prefix.

    Only directories are removed; files with the prefix are left alone.
    """
    root = tempdir if tempdir is not None else tempfile.gettempdir()
    with os.scandir(root) as entries:
        for entry in entries:
            if not entry.is_dir(follow_symlinks=False):
                continue
            if entry.name.startswith(TEMPDIR_PREFIX):
                shutil.rmtree(entry.path)