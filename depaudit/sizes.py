"""Human-readable byte sizes."""

from __future__ import annotations

_UNITS = ("kB", "MB", "GB", "TB")


def format_size(size_bytes: int) -> str:
    """Decimal units, e.g. '42 B', '3.4 kB', '1.2 MB'."""
    if size_bytes < 1000:
        return f"{size_bytes} B"
    value = size_bytes / 1000
    for unit in _UNITS[:-1]:
        if value < 1000:
            return f"{value:.1f} {unit}"
        value /= 1000
    return f"{value:.1f} {_UNITS[-1]}"
