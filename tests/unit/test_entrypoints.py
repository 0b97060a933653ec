from __future__ import annotations

from typer.testing import CliRunner

import buildcache
from buildcache.cli import app


def test_get_version_matches_dunder():
    assert buildcache.get_version() == buildcache.__version__


def test_module_main_calls_run(monkeypatch):
    import buildcache.__main__ as main_mod

    called = {"ok": False}

    def fake_run():
        called["ok"] = True

    monkeypatch.setattr(main_mod, "run", fake_run)
    main_mod.main()
    assert called["ok"] is True


def test_cli_help_lists_commands():
    result = CliRunner().invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("incremental", "restore", "tag", "scrub", "list", "clear", "config"):
        assert command in result.output
