"""Git-backed snapshot store for install directories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from ..config import DEFAULT_COMMITTER_EMAIL, DEFAULT_COMMITTER_NAME, DEFAULT_GIT_COMMAND
from ..errors import CommandFailedError
from .shell_service import Executor, SubprocessExecutor

NOTHING_TO_COMMIT = "nothing to commit"


class VersionedStore:
    """Run the git commands that back a cache repository.

    The repository lives at ``path`` (a ``--git-dir``) and always operates on
    an external ``--work-tree``; nothing is ever written inside the work tree
    except by :meth:`checkout`.
    """

    def __init__(
        self,
        executor: Executor | None = None,
        *,
        git_command: str = DEFAULT_GIT_COMMAND,
        committer_name: str = DEFAULT_COMMITTER_NAME,
        committer_email: str = DEFAULT_COMMITTER_EMAIL,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self.executor = executor if executor is not None else SubprocessExecutor()
        self.git_command = git_command
        self.committer_name = committer_name
        self.committer_email = committer_email
        self.log = logger or logging.getLogger("buildcache.store")

    def _git(self, path: Path | str, work_tree: Path | str | None = None) -> list[str]:
        argv = [self.git_command, f"--git-dir={path}"]
        if work_tree is not None:
            argv.append(f"--work-tree={work_tree}")
        return argv

    def _commit_env(self) -> Mapping[str, str]:
        return {
            "LC_ALL": "C",
            "GIT_AUTHOR_NAME": self.committer_name,
            "GIT_AUTHOR_EMAIL": self.committer_email,
            "GIT_COMMITTER_NAME": self.committer_name,
            "GIT_COMMITTER_EMAIL": self.committer_email,
        }

    def ensure_initialized(self, path: Path | str) -> bool:
        """Create the repository at *path* unless it already exists.

        Returns True if the repository was created.
        """

        repo = Path(path)
        if repo.is_dir():
            self.log.info("Cache path `%s' exists, skipping creation", repo)
            return False
        self.log.info("Creating cache path `%s'", repo)
        repo.parent.mkdir(parents=True, exist_ok=True)
        self.executor.execute(self._git(repo) + ["init", "-q"])
        return True

    def commit_all(self, path: Path | str, work_tree: Path | str, message: str) -> None:
        """Stage everything under *work_tree*, ignored files included, and commit."""

        self.executor.execute(self._git(path, work_tree) + ["add", "-A", "-f"])
        try:
            self.executor.execute(
                self._git(path, work_tree) + ["commit", "-q", "-m", message],
                env=self._commit_env(),
            )
        except CommandFailedError as exc:
            if NOTHING_TO_COMMIT not in exc.output:
                raise
            self.log.debug("Nothing new to commit for `%s'", work_tree)

    def force_tag(
        self, path: Path | str, tag: str, *, work_tree: Path | str | None = None
    ) -> None:
        self.executor.execute(self._git(path, work_tree) + ["tag", "-f", tag])

    def list_tags(
        self, path: Path | str, pattern: str, *, work_tree: Path | str | None = None
    ) -> list[str]:
        result = self.executor.execute(self._git(path, work_tree) + ["tag", "-l", pattern])
        return [line.strip() for line in result.stdout_lines if line.strip()]

    def has_tag(
        self, path: Path | str, tag: str, *, work_tree: Path | str | None = None
    ) -> bool:
        """Return True if a tag named exactly *tag* exists."""
        return any(line == tag for line in self.list_tags(path, tag, work_tree=work_tree))

    def checkout(self, path: Path | str, work_tree: Path | str, tag: str) -> None:
        """Force the snapshot recorded under *tag* into *work_tree*.

        Uncommitted changes to tracked files in the work tree are discarded.
        A missing work tree is created first.
        """

        Path(work_tree).mkdir(parents=True, exist_ok=True)
        self.executor.execute(self._git(path, work_tree) + ["checkout", "-f", tag])
