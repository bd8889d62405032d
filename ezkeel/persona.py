"""Copying of AI persona directories between projects."""

from __future__ import annotations

import os
import shutil
from pathlib import Path


def copy_persona(src_dir: str | os.PathLike, dst_dir: str | os.PathLike) -> Path:
    """Recursively copy every file under ``src_dir`` into ``dst_dir``.

    Directories are created as needed and existing files are overwritten.
    Returns the destination path.
    """
    source = Path(src_dir)
    destination = Path(dst_dir)
    if source.is_file():
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
        return destination
    shutil.copytree(
        source,
        destination,
        copy_function=shutil.copyfile,
        dirs_exist_ok=True,
    )
    return destination