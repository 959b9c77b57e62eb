"""depaudit: find declared npm dependencies a project never imports."""

__version__ = "0.1.0"

from depaudit.analyzer import analyze
from depaudit.config import AnalyzerConfig
from depaudit.exceptions import (
    AnalyzerError,
    ManifestError,
    ManifestMalformedError,
    ManifestNotFoundError,
)
from depaudit.models import (
    AnalysisResult,
    DeclaredDependency,
    FileAnalysisError,
    ImportKind,
    ImportReference,
    PackageDetail,
)

__all__ = [
    "AnalysisResult",
    "AnalyzerConfig",
    "AnalyzerError",
    "DeclaredDependency",
    "FileAnalysisError",
    "ImportKind",
    "ImportReference",
    "ManifestError",
    "ManifestMalformedError",
    "ManifestNotFoundError",
    "PackageDetail",
    "analyze",
]
