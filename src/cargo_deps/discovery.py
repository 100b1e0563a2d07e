"""Manifest discovery: walk a directory tree for Cargo.toml files."""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from .parsers import MANIFEST_NAME


def iter_manifests(
    root: Union[str, Path],
    exclude_dirs: Optional[Iterable[str]] = None,
    follow_symlinks: bool = False,
) -> Iterator[str]:
    """
    Yield the path of every Cargo.toml under ``root`` in a reproducible order.

    Paths are joined onto ``root`` as given, so a root of ``.`` yields
    ``./Cargo.toml``, ``./app/Cargo.toml`` and so on. Directory entries are
    visited sorted by name, with the files of a directory yielded before its
    subdirectories are entered. Unreadable directories are skipped.

    Args:
        root: Directory to walk; a manifest path itself is yielded as is
        exclude_dirs: Directory names pruned from the walk
        follow_symlinks: Whether to descend into symlinked directories
    """
    root = os.fspath(root)
    if os.path.isfile(root):
        if os.path.basename(root) == MANIFEST_NAME:
            yield root
        return

    excluded = set(exclude_dirs or ())
    seen_dirs = set()

    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        if follow_symlinks:
            # symlink cycles
            real = os.path.realpath(dirpath)
            if real in seen_dirs:
                dirnames[:] = []
                continue
            seen_dirs.add(real)
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        if MANIFEST_NAME in filenames:
            candidate = os.path.join(dirpath, MANIFEST_NAME)
            if os.path.isfile(candidate):
                yield candidate


def discover_manifests(
    root: Union[str, Path],
    exclude_dirs: Optional[Iterable[str]] = None,
    follow_symlinks: bool = False,
) -> List[str]:
    """Return the manifest paths found under ``root`` as a list."""
    return list(iter_manifests(root, exclude_dirs, follow_symlinks))
