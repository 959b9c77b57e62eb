"""Data models for the dependency usage engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from depaudit.sizes import format_size


class ImportKind(Enum):
    """How a module reference appeared in source."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    REQUIRE = "require"
    TEMPLATE_LITERAL = "template_literal"


@dataclass(frozen=True)
class DeclaredDependency:
    """A single dependency declared in package.json."""

    name: str
    version_range: str
    is_dev: bool = False


@dataclass(frozen=True)
class ImportReference:
    """One import/require occurrence found in a source file."""

    raw_path: str
    origin_file: str
    kind: ImportKind


@dataclass(frozen=True)
class FileAnalysisError:
    """A non-fatal failure tied to one file or installed package."""

    file: str
    message: str

    def __str__(self) -> str:
        return f"{self.file}: {self.message}"


@dataclass
class PackageDetail:
    """Reporting record for a used or unused dependency."""

    name: str
    version: str
    size_bytes: int = 0
    version_source: str = "installed"  # "installed" | "declared"
    size_complete: bool = True

    @property
    def degraded(self) -> bool:
        return self.version_source != "installed" or not self.size_complete


@dataclass
class AnalysisResult:
    """Final output of one analysis run."""

    used: list[str] = field(default_factory=list)
    unused: list[str] = field(default_factory=list)
    package_details: dict[str, PackageDetail] = field(default_factory=dict)
    errors: list[FileAnalysisError] = field(default_factory=list)
    includes_dev_dependencies: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "used": list(self.used),
            "unused": list(self.unused),
            "packageDetails": {
                name: {
                    "version": d.version,
                    "size": format_size(d.size_bytes),
                    "sizeBytes": d.size_bytes,
                    "versionSource": d.version_source,
                    "sizeComplete": d.size_complete,
                }
                for name, d in self.package_details.items()
            },
            "errors": [{"file": e.file, "message": e.message} for e in self.errors],
            "includesDevDependencies": self.includes_dev_dependencies,
        }
