"""Installed package metadata and on-disk size aggregation.

Everything here is best-effort: a missing install, unreadable metadata or an
unreadable file degrades the resulting :class:`PackageDetail` and adds a
:class:`FileAnalysisError`, but always yields a detail for the package.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depaudit.models import DeclaredDependency, FileAnalysisError, PackageDetail

log = structlog.get_logger("depaudit.packages")


@dataclass
class SizeReading:
    """Outcome of summing file sizes under a directory."""

    size_bytes: int = 0
    files_counted: int = 0
    failures: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failures


@dataclass
class MetadataReading:
    """Outcome of reading an installed package's package.json."""

    version: str | None = None
    failure: str | None = None


@dataclass
class PackageReport:
    detail: PackageDetail
    errors: list[FileAnalysisError] = field(default_factory=list)


def measure_directory(path: Path) -> SizeReading:
    """Sum the sizes of regular files under *path*.

    Symlinks and entries whose name starts with ``.`` are skipped. A file or
    directory that cannot be read contributes 0 and is recorded as a failure.
    """
    reading = SizeReading()
    stack = [Path(path)]
    while stack:
        current = stack.pop()
        try:
            with os.scandir(current) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            reading.failures.append((current, e.strerror or str(e)))
            continue
        for entry in entries:
            if entry.name.startswith("."):
                continue
            try:
                if entry.is_symlink():
                    continue
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                elif entry.is_file(follow_symlinks=False):
                    reading.size_bytes += entry.stat(follow_symlinks=False).st_size
                    reading.files_counted += 1
            except OSError as e:
                reading.failures.append((Path(entry.path), e.strerror or str(e)))
    return reading


def read_installed_version(package_dir: Path) -> MetadataReading:
    meta_path = package_dir / "package.json"
    try:
        data = json.loads(meta_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return MetadataReading(failure="package.json not found")
    except (OSError, UnicodeDecodeError) as e:
        return MetadataReading(failure=f"unreadable package.json: {e}")
    except json.JSONDecodeError as e:
        return MetadataReading(failure=f"invalid package.json: {e}")

    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version:
        return MetadataReading(failure="package.json has no version field")
    return MetadataReading(version=version)


def collect_package_detail(
    project_root: Path,
    dependency: DeclaredDependency,
    modules_dir: str = "node_modules",
) -> PackageReport:
    """Build the detail for one dependency from its installed copy."""
    root = Path(project_root)
    package_dir = root / modules_dir / dependency.name
    rel_dir = f"{modules_dir}/{dependency.name}"

    if not package_dir.is_dir():
        log.info("packages.not_installed", package=dependency.name)
        return PackageReport(
            detail=PackageDetail(
                name=dependency.name,
                version=dependency.version_range,
                size_bytes=0,
                version_source="declared",
                size_complete=False,
            ),
            errors=[FileAnalysisError(rel_dir, "package is not installed")],
        )

    errors: list[FileAnalysisError] = []

    meta = read_installed_version(package_dir)
    if meta.version is not None:
        version, version_source = meta.version, "installed"
    else:
        version, version_source = dependency.version_range, "declared"
        errors.append(FileAnalysisError(f"{rel_dir}/package.json", meta.failure or "unreadable"))

    size = measure_directory(package_dir)
    for failed_path, message in size.failures:
        errors.append(FileAnalysisError(_relative(failed_path, root), message))

    if errors:
        log.warning(
            "packages.degraded",
            package=dependency.name,
            version_source=version_source,
            size_failures=len(size.failures),
        )

    return PackageReport(
        detail=PackageDetail(
            name=dependency.name,
            version=version,
            size_bytes=size.size_bytes,
            version_source=version_source,
            size_complete=size.complete,
        ),
        errors=errors,
    )


def collect_package_details(
    project_root: Path,
    dependencies: Iterable[DeclaredDependency],
    modules_dir: str = "node_modules",
    max_workers: int = 4,
) -> list[PackageReport]:
    """Collect details for every dependency, preserving input order."""
    deps = list(dependencies)
    if max_workers <= 1 or len(deps) <= 1:
        return [collect_package_detail(project_root, d, modules_dir) for d in deps]

    workers = min(max_workers, len(deps))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        return list(
            executor.map(lambda d: collect_package_detail(project_root, d, modules_dir), deps)
        )


def _relative(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)
