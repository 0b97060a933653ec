"""Centralized user-facing text for the buildcache CLI."""

from __future__ import annotations

class Styles:
    ERROR = "red"
    WARNING = "yellow"
    SUCCESS = "green"
    INFO = "dim"
    TITLE = "bold cyan"
    TABLE_HEADER = "bold magenta"


class Messages:
    APP_HELP = "buildcache – snapshot and restore install directories keyed by dependency fingerprints."
    HELP_MANIFEST = "JSON project manifest describing the install dir and build order."
    HELP_COMPONENT = "Name of the component to act on."
    HELP_COMPONENT_VERSION = "Version of the component (defaults to the first entry with that name)."
    HELP_CACHE_DIR = "Override the cache root directory for this invocation."
    HELP_VERBOSE = "Enable debug logging."
    HELP_INCREMENTAL = "Snapshot the install directory under the component's fingerprint."
    HELP_RESTORE = "Restore the install directory from the component's fingerprint, if cached."
    HELP_TAG = "Print the fingerprint tag computed for a component."
    HELP_SCRUB = "Remove embedded git repositories from a directory tree."
    HELP_SCRUB_PATH = "Directory tree to scrub."
    HELP_SCRUB_DRY = "Only list the repositories that would be removed."
    HELP_LIST = "List cache repositories and their tags."
    HELP_CLEAR = "Remove the cache repository for an install directory."
    HELP_CLEAR_PATH = "Install directory whose cache repository should be removed."
    HELP_CONFIG = "Manage configuration stored in ~/.buildcache/config.json."
    HELP_SET_CACHE_DIR = "Persist the cache root directory."
    HELP_CLEAR_CACHE_DIR = "Reset the cache root directory to the default."
    HELP_SET_GIT_COMMAND = "Set the git executable used for cache repositories."
    HELP_SET_LOG_LEVEL = "Set the default log level."
    HELP_SHOW_CONFIG = "Show current configuration."

    ERROR_MANIFEST_MISSING = "Manifest not found: {path}"
    ERROR_MANIFEST_INVALID = "Invalid manifest {path}: {reason}"
    ERROR_COMPONENT_MISSING = "Component `{name}` is not part of the build order."
    ERROR_COMMAND_FAILED = (
        "Command failed with exit status {status}: {command}\n{output}"
    )
    ERROR_LOG_LEVEL_INVALID = "Unsupported log level `{value}`. Allowed values: {allowed}."
    ERROR_CACHE_DIR_CONFLICT = "Use either --set-cache-dir or --clear-cache-dir, not both."

    INFO_INCREMENTAL_DONE = "Cached {path} as {tag}."
    INFO_RESTORE_HIT = "Restored {path} from {tag}."
    INFO_RESTORE_MISS = "No cached snapshot for {tag}; nothing restored."
    INFO_SCRUB_REMOVED = "Removed {count} embedded repositor{plural} under {path}."
    INFO_SCRUB_FOUND = "Found {count} embedded repositor{plural} under {path}."
    INFO_CACHE_EMPTY = "No cache repositories found under {path}."
    INFO_CACHE_CLEARED = "Removed cache repository {path}."
    INFO_CACHE_CLEAR_NONE = "No cache repository found for {path}."
    INFO_CACHE_DIR_SET = "Cache directory set to {value}."
    INFO_CACHE_DIR_CLEARED = "Cache directory reset to the default."
    INFO_GIT_COMMAND_SET = "Git command set to {value}."
    INFO_LOG_LEVEL_SET = "Default log level set to {value}."
    INFO_NO_CHANGES = "No configuration changes requested."
    INFO_CONFIG_SUMMARY = (
        "Cache directory: {cache_dir}\n"
        "Git command: {git_command}\n"
        "Committer: {committer_name} <{committer_email}>\n"
        "Log level: {log_level}\n"
        "Command timeout: {timeout}"
    )

    TABLE_TITLE = "buildcache repositories"
    TABLE_HEADER_INSTALL_DIR = "Install dir"
    TABLE_HEADER_TAGS = "Tags"
    TABLE_HEADER_PATH = "Repository"
