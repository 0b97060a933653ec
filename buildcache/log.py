"""Logging helpers for buildcache."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "buildcache"
LOG_KEY = "GitCache"


class ComponentLogger(logging.LoggerAdapter):
    """Prefix every record with the component it concerns."""

    def __init__(self, logger: logging.Logger, component: str) -> None:
        super().__init__(logger, {"component": component})
        self.component = component
        self.log_key = f"{LOG_KEY}: {component}"

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("component", self.component)
        kwargs["extra"] = extra
        return f"{self.log_key} | {msg}", kwargs


def get_logger(name: str | None = None) -> logging.Logger:
    if not name:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def component_logger(component: str, *, logger: logging.Logger | None = None) -> ComponentLogger:
    """Return a logger bound to *component*."""

    return ComponentLogger(logger or get_logger("cache"), component)


def configure_logging(level: str = "INFO", *, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the package logger, replacing any earlier one."""

    root = get_logger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
    return root
