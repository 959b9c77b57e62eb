"""Per-file import extraction."""

from depaudit.extractor.extractor import Extraction, analyze_file, extract_references

__all__ = ["Extraction", "analyze_file", "extract_references"]
