"""Data model shared with the build orchestrator."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from .errors import ManifestError


@dataclass(frozen=True, slots=True)
class Component:
    name: str
    version: str
    shasum: str
    install_dir: str

    def matches(self, other: "Component") -> bool:
        """Return True if *other* names the same build step."""
        return self.name == other.name and self.version == other.version


@dataclass(frozen=True, slots=True)
class Project:
    name: str
    install_dir: str
    build_order: tuple[Component, ...] = field(default_factory=tuple)

    def find(self, name: str, version: str | None = None) -> Component | None:
        """Return the first component called *name* (and *version*, if given)."""
        for component in self.build_order:
            if component.name != name:
                continue
            if version is not None and component.version != version:
                continue
            return component
        return None


def _require_str(raw: Mapping[str, object], key: str, where: str) -> str:
    value = raw.get(key)
    if value is None:
        raise ManifestError(f"{where}: missing `{key}`")
    if not isinstance(value, (str, int, float)):
        raise ManifestError(f"{where}: `{key}` must be a string")
    text = str(value).strip()
    if not text:
        raise ManifestError(f"{where}: `{key}` must not be empty")
    return text


def project_from_mapping(raw: Mapping[str, object]) -> Project:
    """Build a Project from decoded manifest data."""

    if not isinstance(raw, Mapping):
        raise ManifestError("manifest root must be an object")
    name = _require_str(raw, "name", "project")
    install_dir = _require_str(raw, "install_dir", "project")
    entries = raw.get("build_order") or []
    if not isinstance(entries, Sequence) or isinstance(entries, (str, bytes)):
        raise ManifestError("project: `build_order` must be a list")
    components: list[Component] = []
    for idx, entry in enumerate(entries):
        where = f"build_order[{idx}]"
        if not isinstance(entry, Mapping):
            raise ManifestError(f"{where}: entry must be an object")
        components.append(
            Component(
                name=_require_str(entry, "name", where),
                version=_require_str(entry, "version", where),
                shasum=_require_str(entry, "shasum", where),
                install_dir=install_dir,
            )
        )
    return Project(name=name, install_dir=install_dir, build_order=tuple(components))


def load_project(path: Path | str) -> Project:
    """Load a project manifest from *path*."""

    manifest = Path(path).expanduser()
    try:
        raw = json.loads(manifest.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    return project_from_mapping(raw)
