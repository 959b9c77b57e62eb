"""Shared pytest fixtures for depaudit tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest


class ProjectBuilder:
    """Lay out a throwaway npm project under a temp directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def manifest(self, dependencies=None, dev_dependencies=None, name="demo-app") -> Path:
        data: dict = {"name": name, "version": "1.0.0"}
        if dependencies is not None:
            data["dependencies"] = dependencies
        if dev_dependencies is not None:
            data["devDependencies"] = dev_dependencies
        path = self.root / "package.json"
        path.write_text(json.dumps(data, indent=2))
        return path

    def source(self, rel_path: str, content: str) -> Path:
        path = self.root / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    def install(self, name: str, version: str = "1.0.0", files=None) -> Path:
        """Create node_modules/<name> with a package.json and extra files."""
        pkg_dir = self.root / "node_modules" / name
        pkg_dir.mkdir(parents=True, exist_ok=True)
        (pkg_dir / "package.json").write_text(json.dumps({"name": name, "version": version}))
        for rel, content in (files or {}).items():
            path = pkg_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return pkg_dir


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    return ProjectBuilder(tmp_path)
