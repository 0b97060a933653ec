"""Removal of git repositories embedded in an install tree.

Snapshotting a tree that contains another repository's internals partially
versions them, which makes later ``add``/``commit`` runs fail. These helpers
find such directories and delete them before each snapshot.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import List

CONFIG_FILENAME = "config"
REQUIRED_GIT_FILES: tuple[str, ...] = (
    "HEAD",
    "description",
    "hooks",
    "info",
    "objects",
    "refs",
)


def is_embedded_repository(directory: Path) -> bool:
    """Return True if *directory* holds a git config and every required marker."""

    if not (directory / CONFIG_FILENAME).is_file():
        return False
    return all((directory / name).exists() for name in REQUIRED_GIT_FILES)


def find_embedded_repositories(install_dir: Path | str) -> List[Path]:
    """Return every repository directory below *install_dir*, hidden ones included."""

    root = Path(install_dir)
    if not root.is_dir():
        return []
    found: List[Path] = []
    for dirpath, dirnames, _filenames in os.walk(root, topdown=True):
        current = Path(dirpath)
        kept: list[str] = []
        for dirname in sorted(dirnames):
            child = current / dirname
            if not child.is_symlink() and is_embedded_repository(child):
                found.append(child)
                continue
            kept.append(dirname)
        dirnames[:] = kept
    return found


def scrub(
    install_dir: Path | str,
    *,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> List[Path]:
    """Delete every embedded repository below *install_dir*; return the removed paths."""

    log = logger or logging.getLogger("buildcache.scrub")
    log.info("Removing git directories")
    removed = find_embedded_repositories(install_dir)
    for path in removed:
        log.info("Removing git dir `%s'", path)
        shutil.rmtree(path)
    return removed
