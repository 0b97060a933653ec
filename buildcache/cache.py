"""Cache root resolution and repository bookkeeping."""

from __future__ import annotations

import os
import re
import shutil
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path

from .config import ENV_CACHE_DIR, Config, load_config
from .services.store_service import VersionedStore

DEFAULT_CACHE_DIR = Path(os.path.expanduser("~")) / ".buildcache" / "git_cache"
CACHE_DIR: Path | None = None
_CACHE_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "buildcache_cache_dir_override",
    default=None,
)
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")
_REPOSITORY_MARKERS = ("HEAD", "objects", "refs")


def normalize_install_dir(install_dir: Path | str) -> str:
    """Strip a leading drive letter so cache paths match across platforms."""

    return _DRIVE_PREFIX.sub("", str(install_dir), count=1)


def cache_path_for(install_dir: Path | str, cache_root: Path | str) -> Path:
    """Return the repository path for *install_dir* below *cache_root*."""

    relative = normalize_install_dir(install_dir).lstrip("/\\")
    return Path(cache_root) / relative


@contextmanager
def cache_dir_context(path: Path | str | None):
    """Temporarily override the cache root for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CACHE_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CACHE_DIR_OVERRIDE.reset(token)


def set_cache_dir(path: Path | str | None) -> None:
    global CACHE_DIR
    if path is None:
        CACHE_DIR = None
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    CACHE_DIR = dir_path


def resolve_cache_root(config: Config | None = None) -> Path:
    """Return the cache root: context override, process override, env, config, default."""

    override = _CACHE_DIR_OVERRIDE.get()
    if override is not None:
        return override
    if CACHE_DIR is not None:
        return CACHE_DIR
    env_value = os.environ.get(ENV_CACHE_DIR)
    if env_value:
        return Path(env_value).expanduser().resolve()
    if config is None:
        config = load_config()
    if config.cache_dir:
        return Path(config.cache_dir).expanduser()
    return DEFAULT_CACHE_DIR


def _is_repository(path: Path) -> bool:
    return all((path / marker).exists() for marker in _REPOSITORY_MARKERS)


def iter_cache_repositories(cache_root: Path | str):
    """Yield every repository directory below *cache_root*."""

    root = Path(cache_root)
    if not root.is_dir():
        return
    for dirpath, dirnames, _filenames in os.walk(root, topdown=True):
        current = Path(dirpath)
        if current != root and _is_repository(current):
            dirnames[:] = []
            yield current
            continue
        dirnames.sort()


def list_cache_repositories(
    cache_root: Path | str, store: VersionedStore | None = None
) -> list[dict[str, object]]:
    """Return metadata for every cache repository under *cache_root*."""

    store = store or VersionedStore()
    root = Path(cache_root)
    entries: list[dict[str, object]] = []
    for repo in iter_cache_repositories(root):
        install_dir = "/" + repo.relative_to(root).as_posix()
        entries.append(
            {
                "path": repo,
                "install_dir": install_dir,
                "tags": store.list_tags(repo, "*"),
            }
        )
    return entries


def clear_cache(install_dir: Path | str, cache_root: Path | str) -> bool:
    """Remove the repository cached for *install_dir*; return True if one existed."""

    repo = cache_path_for(install_dir, cache_root)
    if not repo.is_dir():
        return False
    shutil.rmtree(repo)
    return True
