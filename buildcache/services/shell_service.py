"""Synchronous execution of external commands."""

from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass, field
from typing import Mapping, Protocol, Sequence

from ..errors import CommandFailedError

logger = logging.getLogger("buildcache.shell")


@dataclass(frozen=True, slots=True)
class ShellResult:
    command: tuple[str, ...]
    exit_status: int
    stdout_lines: list[str] = field(default_factory=list)
    stderr: str = ""


class Executor(Protocol):
    """Runs one command to completion, raising CommandFailedError on failure."""

    def execute(
        self,
        command: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> ShellResult:
        ...


class SubprocessExecutor:
    """Executor backed by :func:`subprocess.run`."""

    def __init__(self, *, timeout: float | None = None) -> None:
        self.timeout = timeout

    def execute(
        self,
        command: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
    ) -> ShellResult:
        argv = [str(part) for part in command]
        merged_env = None
        if env:
            merged_env = dict(os.environ)
            merged_env.update(env)
        logger.debug("$ %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                check=False,
                capture_output=True,
                text=True,
                env=merged_env,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise CommandFailedError(argv, 127, str(exc)) from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandFailedError(
                argv, 124, f"timed out after {self.timeout} seconds"
            ) from exc
        stdout = completed.stdout or ""
        stderr = completed.stderr or ""
        if completed.returncode != 0:
            output = "\n".join(part for part in (stdout.strip(), stderr.strip()) if part)
            raise CommandFailedError(argv, int(completed.returncode), output)
        return ShellResult(
            command=tuple(argv),
            exit_status=int(completed.returncode),
            stdout_lines=stdout.splitlines(),
            stderr=stderr,
        )
