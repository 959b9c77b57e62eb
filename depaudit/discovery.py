"""Source tree discovery: enumerate candidate source files."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path, PurePath

from depaudit.config import DEFAULT_EXCLUDE_DIRS, DEFAULT_EXTENSIONS


def iter_source_files(
    project_root: Path,
    extensions: frozenset[str] = DEFAULT_EXTENSIONS,
    exclude_dirs: frozenset[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[str]:
    """Yield project-relative POSIX paths of source files under *project_root*.

    Directories named in *exclude_dirs* are pruned at any depth. Walk order
    is lexicographic so repeated runs see files in the same order. Symlinked
    directories are not followed.
    """
    root = Path(project_root)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in exclude_dirs)
        rel_dir = PurePath(dirpath).relative_to(root)
        for name in sorted(filenames):
            if has_source_extension(name, extensions):
                yield (rel_dir / name).as_posix()


def has_source_extension(filename: str, extensions: frozenset[str]) -> bool:
    suffix = PurePath(filename).suffix.lower()
    return bool(suffix) and suffix in extensions
