"""Manifest reader for package.json."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depaudit.exceptions import ManifestMalformedError, ManifestNotFoundError
from depaudit.models import DeclaredDependency

log = structlog.get_logger("depaudit.manifest")

MANIFEST_NAME = "package.json"


@dataclass
class Manifest:
    """Declared dependencies of one project, in declaration order."""

    path: Path
    name: str | None
    dependencies: dict[str, DeclaredDependency] = field(default_factory=dict)

    @property
    def declared_names(self) -> list[str]:
        return list(self.dependencies)


def read_manifest(project_root: Path, include_dev: bool = False) -> Manifest:
    """Load ``package.json`` from *project_root*.

    Runtime ``dependencies`` come first. With *include_dev*, ``devDependencies``
    are merged in without replacing a runtime entry of the same name.

    Raises :class:`ManifestNotFoundError` or :class:`ManifestMalformedError`.
    """
    path = Path(project_root) / MANIFEST_NAME
    try:
        content = path.read_text(encoding="utf-8")
    except (FileNotFoundError, NotADirectoryError):
        raise ManifestNotFoundError(path) from None
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestMalformedError(path, f"unreadable: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestMalformedError(path, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestMalformedError(path, "top-level value must be a JSON object")

    name = data.get("name")
    if name is not None and not isinstance(name, str):
        raise ManifestMalformedError(path, "'name' must be a string")

    deps: dict[str, DeclaredDependency] = {}
    for dep_name, version in _section(path, data, "dependencies").items():
        deps[dep_name] = DeclaredDependency(dep_name, version, is_dev=False)

    if include_dev:
        for dep_name, version in _section(path, data, "devDependencies").items():
            if dep_name not in deps:
                deps[dep_name] = DeclaredDependency(dep_name, version, is_dev=True)

    log.debug(
        "manifest.loaded",
        path=str(path),
        name=name,
        declared=len(deps),
        include_dev=include_dev,
    )
    return Manifest(path=path, name=name, dependencies=deps)


def _section(path: Path, data: dict, key: str) -> dict[str, str]:
    """Return a name -> version-range section; absent or null means empty."""
    section = data.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ManifestMalformedError(path, f"'{key}' must be an object")
    for dep_name, version in section.items():
        if not isinstance(version, str):
            raise ManifestMalformedError(
                path, f"'{key}.{dep_name}' must be a version string"
            )
    return section
