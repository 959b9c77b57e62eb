"""Usage reconciler: fold resolved package names into used/unused sets."""

from __future__ import annotations

from collections.abc import Iterable

from depaudit.models import ImportReference
from depaudit.resolver import resolve_reference


class UsageReconciler:
    """Accumulate the used set for one run.

    Only declared names are recorded. ``self_name`` (the project's own
    package name) is never reported as used or unused.
    """

    def __init__(self, declared_names: Iterable[str], self_name: str | None = None) -> None:
        self._declared: list[str] = list(dict.fromkeys(declared_names))
        self._declared_set = set(self._declared)
        self._self_name = self_name
        self._used: set[str] = set()

    def add(self, package_name: str | None) -> bool:
        """Record *package_name*; returns True if it is a declared dependency."""
        if package_name is None or package_name not in self._declared_set:
            return False
        self._used.add(package_name)
        return True

    def add_references(self, refs: Iterable[ImportReference]) -> int:
        """Resolve and record each reference; returns how many matched."""
        return sum(1 for ref in refs if self.add(resolve_reference(ref)))

    def merge(self, partial: Iterable[str]) -> None:
        """Union a partial used set computed elsewhere."""
        for name in partial:
            self.add(name)

    def used(self) -> list[str]:
        return [n for n in self._declared if n in self._used and n != self._self_name]

    def unused(self) -> list[str]:
        return [n for n in self._declared if n not in self._used and n != self._self_name]
