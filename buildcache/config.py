"""Global configuration management for buildcache."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict

DEFAULT_CONFIG_DIR = Path(os.path.expanduser("~")) / ".buildcache"
CONFIG_DIR = DEFAULT_CONFIG_DIR
CONFIG_FILE = CONFIG_DIR / "config.json"
_CONFIG_DIR_OVERRIDE: ContextVar[Path | None] = ContextVar(
    "buildcache_config_dir_override",
    default=None,
)
DEFAULT_GIT_COMMAND = "git"
DEFAULT_COMMITTER_NAME = "buildcache"
DEFAULT_COMMITTER_EMAIL = "buildcache@localhost"
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")
ENV_CACHE_DIR = "BUILDCACHE_CACHE_DIR"
ENV_LOG_LEVEL = "BUILDCACHE_LOG_LEVEL"


@dataclass
class Config:
    cache_dir: str | None = None
    git_command: str = DEFAULT_GIT_COMMAND
    committer_name: str = DEFAULT_COMMITTER_NAME
    committer_email: str = DEFAULT_COMMITTER_EMAIL
    log_level: str = DEFAULT_LOG_LEVEL
    command_timeout: float | None = None


def _resolve_config_dir() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    return override if override is not None else CONFIG_DIR


def _resolve_config_file() -> Path:
    override = _CONFIG_DIR_OVERRIDE.get()
    if override is not None:
        return override / "config.json"
    return CONFIG_FILE


@contextmanager
def config_dir_context(path: Path | str | None):
    """Temporarily override the config directory for the current context."""

    if path is None:
        yield
        return
    dir_path = Path(path).expanduser().resolve()
    if dir_path.exists() and not dir_path.is_dir():
        raise NotADirectoryError(f"Path is not a directory: {dir_path}")
    token = _CONFIG_DIR_OVERRIDE.set(dir_path)
    try:
        yield
    finally:
        _CONFIG_DIR_OVERRIDE.reset(token)


def _coerce_log_level(value: object) -> str:
    token = str(value or "").strip().upper()
    if token not in SUPPORTED_LOG_LEVELS:
        return DEFAULT_LOG_LEVEL
    return token


def _coerce_timeout(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        return None
    return timeout if timeout > 0 else None


def load_config() -> Config:
    config_file = _resolve_config_file()
    if not config_file.exists():
        return Config()
    raw = json.loads(config_file.read_text(encoding="utf-8"))
    return Config(
        cache_dir=raw.get("cache_dir") or None,
        git_command=raw.get("git_command") or DEFAULT_GIT_COMMAND,
        committer_name=raw.get("committer_name") or DEFAULT_COMMITTER_NAME,
        committer_email=raw.get("committer_email") or DEFAULT_COMMITTER_EMAIL,
        log_level=_coerce_log_level(raw.get("log_level")),
        command_timeout=_coerce_timeout(raw.get("command_timeout")),
    )


def save_config(config: Config) -> None:
    config_dir = _resolve_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    data: Dict[str, Any] = {}
    if config.cache_dir:
        data["cache_dir"] = config.cache_dir
    if config.git_command:
        data["git_command"] = config.git_command
    if config.committer_name:
        data["committer_name"] = config.committer_name
    if config.committer_email:
        data["committer_email"] = config.committer_email
    data["log_level"] = config.log_level
    if config.command_timeout is not None:
        data["command_timeout"] = config.command_timeout
    config_file = _resolve_config_file()
    config_file.write_text(
        json.dumps(data, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def set_config_dir(path: Path | str | None) -> None:
    global CONFIG_DIR, CONFIG_FILE
    if path is None:
        CONFIG_DIR = DEFAULT_CONFIG_DIR
    else:
        dir_path = Path(path).expanduser().resolve()
        if dir_path.exists() and not dir_path.is_dir():
            raise NotADirectoryError(f"Path is not a directory: {dir_path}")
        CONFIG_DIR = dir_path
    CONFIG_FILE = CONFIG_DIR / "config.json"


def set_cache_dir_option(value: str | None) -> None:
    config = load_config()
    if value:
        config.cache_dir = str(Path(value).expanduser().resolve())
    else:
        config.cache_dir = None
    save_config(config)


def set_git_command(value: str) -> None:
    config = load_config()
    config.git_command = value.strip() or DEFAULT_GIT_COMMAND
    save_config(config)


def set_log_level(value: str) -> None:
    token = value.strip().upper()
    if token not in SUPPORTED_LOG_LEVELS:
        raise ValueError(f"Unsupported log level: {value}")
    config = load_config()
    config.log_level = token
    save_config(config)


def resolve_log_level(config: Config | None = None) -> str:
    """Return the effective log level, letting the environment win over config."""

    env_value = os.environ.get(ENV_LOG_LEVEL)
    if env_value:
        return _coerce_log_level(env_value)
    if config is None:
        config = load_config()
    return config.log_level
