from __future__ import annotations

import os
from pathlib import Path

import pytest

from buildcache.services import scrub_service


def _make_repo(path: Path, *, skip: str | None = None) -> Path:
    path.mkdir(parents=True)
    (path / "config").write_text("[core]\n", encoding="utf-8")
    for name in ("HEAD", "description"):
        if name != skip:
            (path / name).write_text("ref: refs/heads/master\n", encoding="utf-8")
    for name in ("hooks", "info", "objects", "refs"):
        if name != skip:
            (path / name).mkdir()
    return path


def test_finds_hidden_and_visible_repositories_at_any_depth(tmp_path: Path):
    top = _make_repo(tmp_path / "embedded" / "lib" / "ruby" / "gems" / "foo" / ".git")
    bare = _make_repo(tmp_path / "share" / "mirror.git")
    shallow = _make_repo(tmp_path / ".git")
    (tmp_path / "bin").mkdir()
    (tmp_path / "bin" / "tool").write_text("#!/bin/sh\n", encoding="utf-8")

    found = scrub_service.find_embedded_repositories(tmp_path)

    assert sorted(found) == sorted([top, bare, shallow])


@pytest.mark.parametrize(
    "missing", ["HEAD", "description", "hooks", "info", "objects", "refs"]
)
def test_partial_repositories_are_left_alone(tmp_path: Path, missing: str):
    partial = _make_repo(tmp_path / "vendor" / ".git", skip=missing)

    removed = scrub_service.scrub(tmp_path)

    assert removed == []
    assert partial.is_dir()


def test_directory_without_config_file_is_not_a_repository(tmp_path: Path):
    candidate = _make_repo(tmp_path / "vendor" / ".git")
    (candidate / "config").unlink()

    assert scrub_service.find_embedded_repositories(tmp_path) == []


def test_scrub_deletes_only_full_repositories(tmp_path: Path):
    full = _make_repo(tmp_path / "gems" / "a" / ".git")
    partial = _make_repo(tmp_path / "gems" / "b" / ".git", skip="objects")
    (tmp_path / "gems" / "a" / "lib.rb").write_text("puts 1\n", encoding="utf-8")

    removed = scrub_service.scrub(tmp_path)

    assert removed == [full]
    assert not full.exists()
    assert partial.is_dir()
    assert (tmp_path / "gems" / "a" / "lib.rb").read_text(encoding="utf-8") == "puts 1\n"


def test_nested_repository_goes_with_its_parent(tmp_path: Path):
    outer = _make_repo(tmp_path / "src" / ".git")
    _make_repo(outer / "modules" / "inner")

    removed = scrub_service.scrub(tmp_path)

    assert removed == [outer]
    assert not outer.exists()


def test_install_dir_root_is_never_removed(tmp_path: Path):
    root = _make_repo(tmp_path / "install")

    assert scrub_service.scrub(root) == []
    assert root.is_dir()


def test_scrub_missing_directory_is_noop(tmp_path: Path):
    assert scrub_service.scrub(tmp_path / "missing") == []


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_symlinked_repository_is_not_followed(tmp_path: Path):
    outside = _make_repo(tmp_path / "outside" / ".git")
    install = tmp_path / "install"
    install.mkdir()
    try:
        (install / "linked").symlink_to(outside, target_is_directory=True)
    except OSError:
        pytest.skip("symlink creation not permitted")

    assert scrub_service.scrub(install) == []
    assert outside.is_dir()


def test_scrub_logs_each_removal(tmp_path: Path):
    repo = _make_repo(tmp_path / "vendor" / ".git")
    messages: list[str] = []

    class RecordingLogger:
        def info(self, msg, *args):
            messages.append(msg % args if args else msg)

    scrub_service.scrub(tmp_path, logger=RecordingLogger())

    assert messages[0] == "Removing git directories"
    assert messages[1] == f"Removing git dir `{repo}'"
