"""Helpers for formatting CLI output safely across terminals."""

from __future__ import annotations

import sys

from rich.console import Console


def _encoding_supports(text: str, encoding: str | None) -> bool:
    if not encoding:
        return False
    try:
        text.encode(encoding)
    except (LookupError, UnicodeEncodeError):
        return False
    return True


def supports_unicode_output(console: Console | None = None) -> bool:
    sample = "\u2713\u2717"
    if console is not None and _encoding_supports(sample, console.encoding):
        return True
    return _encoding_supports(sample, sys.stdout.encoding)


def format_status_icon(hit: bool, console: Console | None = None) -> str:
    """Return a colored marker for a cache hit or miss."""
    if supports_unicode_output(console):
        return "[green]\u2713[/green]" if hit else "[yellow]\u2717[/yellow]"
    return "[green]HIT[/green]" if hit else "[yellow]MISS[/yellow]"
