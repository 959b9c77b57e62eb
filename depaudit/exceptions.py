"""Custom exceptions for depaudit."""

from __future__ import annotations

from pathlib import Path


class AnalyzerError(Exception):
    """Base exception for all analyzer errors."""


class ManifestError(AnalyzerError):
    """Raised when the project manifest cannot be used. Always fatal."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(message)


class ManifestNotFoundError(ManifestError):
    """Raised when package.json is missing from the project root."""

    def __init__(self, path: Path):
        super().__init__(path, f"Manifest not found: {path}")


class ManifestMalformedError(ManifestError):
    """Raised when package.json is not valid JSON or has the wrong shape."""

    def __init__(self, path: Path, reason: str):
        self.reason = reason
        super().__init__(path, f"Malformed manifest {path}: {reason}")
