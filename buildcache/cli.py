"""Command line interface for buildcache."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Sequence

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .api import GitCache, clear_cache, list_cache
from .cache import cache_dir_context, resolve_cache_root
from .config import (
    SUPPORTED_LOG_LEVELS,
    load_config,
    resolve_log_level,
    set_cache_dir_option,
    set_git_command,
    set_log_level,
)
from .errors import BuildCacheError, CommandFailedError, ManifestError
from .log import configure_logging
from .models import Component, Project, load_project
from .output import format_status_icon
from .services.fingerprint_service import compute_tag
from .services.scrub_service import find_embedded_repositories, scrub as scrub_tree
from .text import Messages, Styles

console = Console()

app = typer.Typer(
    help=Messages.APP_HELP,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

MANIFEST_OPTION = typer.Option(..., "--manifest", "-m", help=Messages.HELP_MANIFEST)
COMPONENT_OPTION = typer.Option(..., "--component", "-c", help=Messages.HELP_COMPONENT)
COMPONENT_VERSION_OPTION = typer.Option(
    None, "--component-version", help=Messages.HELP_COMPONENT_VERSION
)
CACHE_DIR_OPTION = typer.Option(None, "--cache-dir", help=Messages.HELP_CACHE_DIR)


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _plural(count: int) -> str:
    return "y" if count == 1 else "ies"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"buildcache v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help=Messages.HELP_VERBOSE),
) -> None:
    """Global options."""
    level = "DEBUG" if verbose else resolve_log_level()
    configure_logging(level)


def _fail(message: str) -> NoReturn:
    console.print(_styled(escape(message), Styles.ERROR), highlight=False)
    raise typer.Exit(code=1)


def _load_project(manifest: Path) -> Project:
    try:
        return load_project(manifest)
    except FileNotFoundError:
        _fail(Messages.ERROR_MANIFEST_MISSING.format(path=manifest))
    except ManifestError as exc:
        _fail(Messages.ERROR_MANIFEST_INVALID.format(path=manifest, reason=str(exc)))


def _resolve_component(
    project: Project, name: str, version: str | None
) -> Component:
    component = project.find(name, version)
    if component is None:
        _fail(Messages.ERROR_COMPONENT_MISSING.format(name=name))
    return component


def _report_failure(exc: BuildCacheError) -> NoReturn:
    if isinstance(exc, CommandFailedError):
        _fail(
            Messages.ERROR_COMMAND_FAILED.format(
                status=exc.exit_status,
                command=" ".join(exc.command),
                output=exc.output,
            )
        )
    _fail(str(exc))


def _build_cache(
    manifest: Path,
    component_name: str,
    component_version: str | None,
) -> GitCache:
    project = _load_project(manifest)
    component = _resolve_component(project, component_name, component_version)
    return GitCache(component, project.build_order, install_dir=project.install_dir)


@app.command(help=Messages.HELP_INCREMENTAL)
def incremental(
    manifest: Path = MANIFEST_OPTION,
    component: str = COMPONENT_OPTION,
    component_version: str | None = COMPONENT_VERSION_OPTION,
    cache_dir: Path | None = CACHE_DIR_OPTION,
) -> None:
    with cache_dir_context(cache_dir):
        cache = _build_cache(manifest, component, component_version)
        try:
            cache.incremental()
        except BuildCacheError as exc:
            _report_failure(exc)
    console.print(
        _styled(
            Messages.INFO_INCREMENTAL_DONE.format(path=cache.work_tree, tag=cache.tag),
            Styles.SUCCESS,
        )
    )


@app.command(help=Messages.HELP_RESTORE)
def restore(
    manifest: Path = MANIFEST_OPTION,
    component: str = COMPONENT_OPTION,
    component_version: str | None = COMPONENT_VERSION_OPTION,
    cache_dir: Path | None = CACHE_DIR_OPTION,
) -> None:
    """Exit status is 0 on a hit and 2 on a miss."""
    with cache_dir_context(cache_dir):
        cache = _build_cache(manifest, component, component_version)
        try:
            restored = cache.restore()
        except BuildCacheError as exc:
            _report_failure(exc)
    icon = format_status_icon(restored, console)
    if restored:
        console.print(
            f"{icon} "
            + _styled(
                Messages.INFO_RESTORE_HIT.format(path=cache.work_tree, tag=cache.tag),
                Styles.SUCCESS,
            )
        )
        return
    console.print(
        f"{icon} " + _styled(Messages.INFO_RESTORE_MISS.format(tag=cache.tag), Styles.WARNING)
    )
    raise typer.Exit(code=2)


@app.command(help=Messages.HELP_TAG)
def tag(
    manifest: Path = MANIFEST_OPTION,
    component: str = COMPONENT_OPTION,
    component_version: str | None = COMPONENT_VERSION_OPTION,
) -> None:
    project = _load_project(manifest)
    target = _resolve_component(project, component, component_version)
    typer.echo(compute_tag(target, project.build_order))


@app.command(help=Messages.HELP_SCRUB)
def scrub(
    path: Path = typer.Argument(..., help=Messages.HELP_SCRUB_PATH),
    dry_run: bool = typer.Option(False, "--dry-run", help=Messages.HELP_SCRUB_DRY),
) -> None:
    if dry_run:
        found = find_embedded_repositories(path)
        for repo in found:
            typer.echo(str(repo))
        console.print(
            _styled(
                Messages.INFO_SCRUB_FOUND.format(
                    count=len(found), plural=_plural(len(found)), path=path
                ),
                Styles.INFO,
            )
        )
        return
    removed = scrub_tree(path)
    console.print(
        _styled(
            Messages.INFO_SCRUB_REMOVED.format(
                count=len(removed), plural=_plural(len(removed)), path=path
            ),
            Styles.SUCCESS,
        )
    )


@app.command(name="list", help=Messages.HELP_LIST)
def list_command(cache_dir: Path | None = CACHE_DIR_OPTION) -> None:
    with cache_dir_context(cache_dir):
        root = resolve_cache_root()
        try:
            entries = list_cache(root)
        except BuildCacheError as exc:
            _report_failure(exc)
    if not entries:
        console.print(_styled(Messages.INFO_CACHE_EMPTY.format(path=root), Styles.INFO))
        return
    table = Table(title=Messages.TABLE_TITLE, header_style=Styles.TABLE_HEADER)
    table.add_column(Messages.TABLE_HEADER_INSTALL_DIR)
    table.add_column(Messages.TABLE_HEADER_TAGS)
    table.add_column(Messages.TABLE_HEADER_PATH, overflow="fold")
    for entry in entries:
        tags = entry["tags"] or []
        table.add_row(str(entry["install_dir"]), "\n".join(tags), str(entry["path"]))
    console.print(table)


@app.command(help=Messages.HELP_CLEAR)
def clear(
    path: Path = typer.Argument(..., help=Messages.HELP_CLEAR_PATH),
    cache_dir: Path | None = CACHE_DIR_OPTION,
) -> None:
    with cache_dir_context(cache_dir):
        removed = clear_cache(path)
    if removed:
        console.print(_styled(Messages.INFO_CACHE_CLEARED.format(path=path), Styles.SUCCESS))
    else:
        console.print(_styled(Messages.INFO_CACHE_CLEAR_NONE.format(path=path), Styles.INFO))


@app.command(help=Messages.HELP_CONFIG)
def config(
    set_cache_dir: str | None = typer.Option(
        None, "--set-cache-dir", help=Messages.HELP_SET_CACHE_DIR
    ),
    clear_cache_dir: bool = typer.Option(
        False, "--clear-cache-dir", help=Messages.HELP_CLEAR_CACHE_DIR
    ),
    set_git_command_option: str | None = typer.Option(
        None, "--set-git-command", help=Messages.HELP_SET_GIT_COMMAND
    ),
    set_log_level_option: str | None = typer.Option(
        None, "--set-log-level", help=Messages.HELP_SET_LOG_LEVEL
    ),
    show: bool = typer.Option(False, "--show", help=Messages.HELP_SHOW_CONFIG),
) -> None:
    if set_cache_dir and clear_cache_dir:
        raise typer.BadParameter(Messages.ERROR_CACHE_DIR_CONFLICT)
    if set_log_level_option is not None:
        normalized_level = set_log_level_option.strip().upper()
        if normalized_level not in SUPPORTED_LOG_LEVELS:
            raise typer.BadParameter(
                Messages.ERROR_LOG_LEVEL_INVALID.format(
                    value=set_log_level_option, allowed=", ".join(SUPPORTED_LOG_LEVELS)
                )
            )
        set_log_level_option = normalized_level

    changed = False
    if set_cache_dir:
        set_cache_dir_option(set_cache_dir)
        console.print(
            _styled(Messages.INFO_CACHE_DIR_SET.format(value=set_cache_dir), Styles.SUCCESS)
        )
        changed = True
    if clear_cache_dir:
        set_cache_dir_option(None)
        console.print(_styled(Messages.INFO_CACHE_DIR_CLEARED, Styles.SUCCESS))
        changed = True
    if set_git_command_option is not None:
        set_git_command(set_git_command_option)
        console.print(
            _styled(
                Messages.INFO_GIT_COMMAND_SET.format(value=set_git_command_option),
                Styles.SUCCESS,
            )
        )
        changed = True
    if set_log_level_option is not None:
        set_log_level(set_log_level_option)
        console.print(
            _styled(Messages.INFO_LOG_LEVEL_SET.format(value=set_log_level_option), Styles.SUCCESS)
        )
        changed = True

    if show:
        cfg = load_config()
        console.print(
            Messages.INFO_CONFIG_SUMMARY.format(
                cache_dir=resolve_cache_root(cfg),
                git_command=cfg.git_command,
                committer_name=cfg.committer_name,
                committer_email=cfg.committer_email,
                log_level=cfg.log_level,
                timeout=cfg.command_timeout if cfg.command_timeout is not None else "none",
            ),
            markup=False,
        )
        return
    if not changed:
        console.print(_styled(Messages.INFO_NO_CHANGES, Styles.INFO))


def run(argv: Sequence[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    if argv is None:
        app()
    else:
        app(args=list(argv))


if __name__ == "__main__":  # pragma: no cover
    run(sys.argv[1:])
