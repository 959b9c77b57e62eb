"""Analysis report builder."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from depaudit.models import AnalysisResult, DeclaredDependency, FileAnalysisError, PackageDetail
from depaudit.packages import PackageReport


def build_report(
    used: list[str],
    unused: list[str],
    package_reports: Iterable[PackageReport],
    file_errors: Iterable[FileAnalysisError],
    includes_dev_dependencies: bool,
    declared: Mapping[str, DeclaredDependency],
) -> AnalysisResult:
    """Join reconciler output and package reports into an AnalysisResult.

    Every name in ``used + unused`` gets a detail; names without a package
    report fall back to the declared version and size 0.
    """
    errors = list(file_errors)
    details: dict[str, PackageDetail] = {}
    for report in package_reports:
        details[report.detail.name] = report.detail
        errors.extend(report.errors)

    ordered: dict[str, PackageDetail] = {}
    for name in [*used, *unused]:
        detail = details.get(name)
        if detail is None:
            dep = declared.get(name)
            detail = PackageDetail(
                name=name,
                version=dep.version_range if dep else "",
                size_bytes=0,
                version_source="declared",
                size_complete=False,
            )
        ordered[name] = detail

    return AnalysisResult(
        used=list(used),
        unused=list(unused),
        package_details=ordered,
        errors=errors,
        includes_dev_dependencies=includes_dev_dependencies,
    )
