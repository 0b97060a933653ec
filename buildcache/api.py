"""Public Python API for buildcache."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from .cache import (
    cache_path_for,
    clear_cache as _clear_repository,
    list_cache_repositories,
    normalize_install_dir,
    resolve_cache_root,
)
from .config import Config, load_config
from .errors import BuildCacheError, CommandFailedError, ManifestError
from .log import component_logger
from .models import Component
from .services.fingerprint_service import FingerprintResolver, compute_tag, default_resolver
from .services.scrub_service import scrub
from .services.shell_service import Executor, SubprocessExecutor
from .services.store_service import VersionedStore

__all__ = [
    "BuildCacheError",
    "CommandFailedError",
    "GitCache",
    "ManifestError",
    "clear_cache",
    "compute_tag",
    "list_cache",
    "restore",
    "snapshot",
]


def _store_from_config(config: Config, executor: Executor | None, logger) -> VersionedStore:
    return VersionedStore(
        executor or SubprocessExecutor(timeout=config.command_timeout),
        git_command=config.git_command,
        committer_name=config.committer_name,
        committer_email=config.committer_email,
        logger=logger,
    )


class GitCache:
    """Snapshot and restore one component's install directory.

    ``install_dir``, ``cache_path`` and ``tag`` are fixed at construction; build
    a new instance when the component or build order changes.
    """

    def __init__(
        self,
        component: Component,
        build_order: Sequence[Component],
        *,
        install_dir: Path | str | None = None,
        cache_root: Path | str | None = None,
        config: Config | None = None,
        executor: Executor | None = None,
        store: VersionedStore | None = None,
        resolver: FingerprintResolver | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        target = str(install_dir or component.install_dir or "").strip()
        if not target:
            raise BuildCacheError(
                f"{component.name} {component.version} has no install directory"
            )
        config = config or load_config()
        self.component = component
        self.log = logger or component_logger(component.name)
        self.work_tree = Path(target)
        self.install_dir = normalize_install_dir(self.work_tree)
        root = Path(cache_root) if cache_root is not None else resolve_cache_root(config)
        self.cache_path = cache_path_for(self.install_dir, root)
        self.store = store or _store_from_config(config, executor, self.log)

        self.log.info("Calculating tag")
        self.tag = (resolver or default_resolver).tag(component, build_order)
        self.log.debug("tag: %s", self.tag)

    def create_cache_path(self) -> bool:
        """Initialize the cache repository; True if it was created just now."""
        return self.store.ensure_initialized(self.cache_path)

    def remove_git_dirs(self) -> list[Path]:
        return scrub(self.work_tree, logger=self.log)

    def incremental(self) -> None:
        """Snapshot the install directory under this component's tag."""

        self.log.info("Performing incremental cache")
        self.create_cache_path()
        self.remove_git_dirs()
        self.store.commit_all(self.cache_path, self.work_tree, f"Backup of {self.tag}")
        self.store.force_tag(self.cache_path, self.tag, work_tree=self.work_tree)

    def restore(self) -> bool:
        """Check out the snapshot for this tag, returning False when none exists."""

        self.log.info("Performing cache restoration")
        self.create_cache_path()
        if not self.store.has_tag(self.cache_path, self.tag, work_tree=self.work_tree):
            self.log.debug("Could not find tag `%s', skipping restore", self.tag)
            return False
        self.log.debug("Detected tag `%s' can be restored, restoring", self.tag)
        self.store.checkout(self.cache_path, self.work_tree, self.tag)
        return True


def snapshot(
    component: Component,
    build_order: Sequence[Component],
    *,
    cache_root: Path | str | None = None,
) -> str:
    """Snapshot *component*'s install directory and return its tag."""

    cache = GitCache(component, build_order, cache_root=cache_root)
    cache.incremental()
    return cache.tag


def restore(
    component: Component,
    build_order: Sequence[Component],
    *,
    cache_root: Path | str | None = None,
) -> bool:
    """Restore *component*'s install directory if its tag is cached."""

    return GitCache(component, build_order, cache_root=cache_root).restore()


def list_cache(cache_root: Path | str | None = None) -> list[dict[str, object]]:
    """Return every cache repository with its tags."""

    config = load_config()
    root = Path(cache_root) if cache_root is not None else resolve_cache_root(config)
    return list_cache_repositories(root, _store_from_config(config, None, None))


def clear_cache(install_dir: Path | str, cache_root: Path | str | None = None) -> bool:
    """Remove the cache repository for *install_dir*."""

    root = Path(cache_root) if cache_root is not None else resolve_cache_root()
    return _clear_repository(install_dir, root)
