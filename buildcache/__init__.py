"""buildcache package initialization."""

from __future__ import annotations

from .api import (
    BuildCacheError,
    GitCache,
    clear_cache,
    compute_tag,
    list_cache,
    restore,
    snapshot,
)

__all__ = [
    "__version__",
    "BuildCacheError",
    "GitCache",
    "clear_cache",
    "compute_tag",
    "get_version",
    "list_cache",
    "restore",
    "snapshot",
]

__version__ = "0.3.0"


def get_version() -> str:
    """Return the current package version."""
    return __version__
