"""Analyzer settings with environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

DEFAULT_EXTENSIONS: frozenset[str] = frozenset(
    {
        ".js",
        ".jsx",
        ".ts",
        ".tsx",
        ".mjs",
        ".cjs",
        ".mts",
        ".cts",
        ".vue",
        ".svelte",
    }
)

DEFAULT_EXCLUDE_DIRS: frozenset[str] = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".git",
    }
)

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class AnalyzerConfig:
    """Knobs for one analysis run."""

    include_dev: bool = False
    extensions: frozenset[str] = DEFAULT_EXTENSIONS
    exclude_dirs: frozenset[str] = DEFAULT_EXCLUDE_DIRS
    modules_dir: str = "node_modules"
    max_workers: int = 4
    self_name: str | None = None  # None = use the manifest "name"
    extra_excludes: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if self.extra_excludes:
            self.exclude_dirs = frozenset(self.exclude_dirs | set(self.extra_excludes))

    @classmethod
    def from_env(cls, **overrides) -> AnalyzerConfig:
        """Build a config from DEPAUDIT_* variables; keyword overrides win.

        Supported variables:
            DEPAUDIT_INCLUDE_DEV   1/true/yes/on to include devDependencies
            DEPAUDIT_EXCLUDE_DIRS  comma-separated extra directory names to skip
            DEPAUDIT_MAX_WORKERS   thread count for package size collection
        """
        values: dict = {}
        include_dev = os.environ.get("DEPAUDIT_INCLUDE_DEV")
        if include_dev is not None:
            values["include_dev"] = include_dev.strip().lower() in _TRUTHY
        extra = os.environ.get("DEPAUDIT_EXCLUDE_DIRS")
        if extra:
            values["extra_excludes"] = [d.strip() for d in extra.split(",") if d.strip()]
        workers = os.environ.get("DEPAUDIT_MAX_WORKERS")
        if workers:
            values["max_workers"] = int(workers)

        if "extra_excludes" in overrides and "extra_excludes" in values:
            overrides["extra_excludes"] = values["extra_excludes"] + list(
                overrides["extra_excludes"]
            )
        values.update(overrides)
        return cls(**values)
