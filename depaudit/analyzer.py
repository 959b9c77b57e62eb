"""Dependency usage analysis: pipeline entry point."""

from __future__ import annotations

import time
from pathlib import Path

import structlog

from depaudit.config import AnalyzerConfig
from depaudit.discovery import iter_source_files
from depaudit.extractor import analyze_file
from depaudit.manifest import read_manifest
from depaudit.models import AnalysisResult, FileAnalysisError
from depaudit.packages import collect_package_details
from depaudit.reconciler import UsageReconciler
from depaudit.report import build_report

log = structlog.get_logger("depaudit.analyzer")


def analyze(
    project_path: str | Path,
    include_dev: bool | None = None,
    config: AnalyzerConfig | None = None,
) -> AnalysisResult:
    """Report which declared dependencies of *project_path* are referenced.

    ``unused`` is advisory: a dependency loaded only through a runtime-built
    string is reported as unused.

    Raises :class:`~depaudit.exceptions.ManifestError` when package.json is
    missing or malformed. Every other failure is recorded in
    ``AnalysisResult.errors``.
    """
    config = config or AnalyzerConfig()
    if include_dev is None:
        include_dev = config.include_dev
    root = Path(project_path)
    started = time.monotonic()

    manifest = read_manifest(root, include_dev=include_dev)
    self_name = config.self_name or manifest.name

    reconciler = UsageReconciler(manifest.declared_names, self_name=self_name)
    file_errors: list[FileAnalysisError] = []
    file_count = 0
    for rel_path in iter_source_files(root, config.extensions, config.exclude_dirs):
        file_count += 1
        extraction = analyze_file(root, rel_path)
        if extraction.error is not None:
            log.warning("analyzer.file_failed", file=rel_path, error=extraction.error.message)
            file_errors.append(extraction.error)
            continue
        reconciler.add_references(extraction.references)

    used = reconciler.used()
    unused = reconciler.unused()

    reports = collect_package_details(
        root,
        [manifest.dependencies[name] for name in [*used, *unused]],
        modules_dir=config.modules_dir,
        max_workers=config.max_workers,
    )

    result = build_report(
        used,
        unused,
        reports,
        file_errors,
        includes_dev_dependencies=include_dev,
        declared=manifest.dependencies,
    )
    log.info(
        "analyzer.completed",
        project=str(root),
        files=file_count,
        used=len(result.used),
        unused=len(result.unused),
        errors=len(result.errors),
        duration=round(time.monotonic() - started, 2),
    )
    return result
