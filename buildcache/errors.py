"""Exception types raised by buildcache."""

from __future__ import annotations

from typing import Sequence


class BuildCacheError(RuntimeError):
    """Base class for buildcache failures."""


class ManifestError(BuildCacheError, ValueError):
    """Raised when a project manifest cannot be parsed."""


class CommandFailedError(BuildCacheError):
    """Raised when an external command exits unsuccessfully."""

    def __init__(self, command: Sequence[str], exit_status: int, output: str) -> None:
        self.command = tuple(command)
        self.exit_status = exit_status
        self.output = output
        super().__init__(
            f"Command {' '.join(self.command)!r} failed with exit status {exit_status}:\n{output}"
        )
