"""Tests for installed package metadata and size aggregation."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

from depaudit.models import DeclaredDependency
from depaudit.packages import (
    collect_package_detail,
    collect_package_details,
    measure_directory,
    read_installed_version,
)


class TestMeasureDirectory:
    def test_sums_regular_files_recursively(self, tmp_path: Path):
        (tmp_path / "a.js").write_bytes(b"x" * 10)
        (tmp_path / "lib").mkdir()
        (tmp_path / "lib" / "b.js").write_bytes(b"y" * 25)

        reading = measure_directory(tmp_path)
        assert reading.size_bytes == 35
        assert reading.files_counted == 2
        assert reading.complete

    def test_skips_hidden_entries_and_symlinks(self, tmp_path: Path):
        (tmp_path / "a.js").write_bytes(b"x" * 10)
        (tmp_path / ".npmignore").write_bytes(b"z" * 100)
        (tmp_path / ".cache").mkdir()
        (tmp_path / ".cache" / "blob").write_bytes(b"z" * 100)
        os.symlink(tmp_path / "a.js", tmp_path / "link.js")

        reading = measure_directory(tmp_path)
        assert reading.size_bytes == 10
        assert reading.files_counted == 1

    def test_unreadable_directory_is_a_failure(self, tmp_path: Path):
        (tmp_path / "a.js").write_bytes(b"x" * 10)
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "b.js").write_bytes(b"y" * 10)

        real_scandir = os.scandir

        def fake_scandir(path):
            if Path(path).name == "locked":
                raise PermissionError(13, "Permission denied")
            return real_scandir(path)

        with patch("depaudit.packages.os.scandir", side_effect=fake_scandir):
            reading = measure_directory(tmp_path)

        assert reading.size_bytes == 10
        assert not reading.complete
        assert reading.failures == [(locked, "Permission denied")]

    def test_missing_directory(self, tmp_path: Path):
        reading = measure_directory(tmp_path / "nope")
        assert reading.size_bytes == 0
        assert not reading.complete


class TestReadInstalledVersion:
    def test_reads_version(self, project):
        pkg_dir = project.install("left-pad", "1.3.0")
        assert read_installed_version(pkg_dir).version == "1.3.0"

    def test_missing_metadata(self, tmp_path: Path):
        reading = read_installed_version(tmp_path)
        assert reading.version is None
        assert "not found" in reading.failure

    def test_invalid_metadata(self, tmp_path: Path):
        (tmp_path / "package.json").write_text("{oops")
        assert "invalid package.json" in read_installed_version(tmp_path).failure

    def test_metadata_without_version(self, tmp_path: Path):
        (tmp_path / "package.json").write_text('{"name": "x"}')
        assert "no version" in read_installed_version(tmp_path).failure


class TestCollectPackageDetail:
    def test_installed_package(self, project):
        pkg_dir = project.install("left-pad", "1.3.0", {"index.js": "module.exports = 1;\n"})
        expected = sum(p.stat().st_size for p in pkg_dir.rglob("*") if p.is_file())

        report = collect_package_detail(project.root, DeclaredDependency("left-pad", "^1.0.0"))
        assert report.errors == []
        assert report.detail.version == "1.3.0"
        assert report.detail.version_source == "installed"
        assert report.detail.size_bytes == expected
        assert not report.detail.degraded

    def test_scoped_package(self, project):
        project.install("@scope/tool", "2.0.0", {"dist/index.js": "x"})
        report = collect_package_detail(project.root, DeclaredDependency("@scope/tool", "^2"))
        assert report.detail.version == "2.0.0"
        assert report.detail.size_bytes > 0

    def test_not_installed(self, project):
        report = collect_package_detail(project.root, DeclaredDependency("ghost", "^1.0.0"))

        assert report.detail.name == "ghost"
        assert report.detail.size_bytes == 0
        assert report.detail.version == "^1.0.0"
        assert report.detail.version_source == "declared"
        assert report.detail.degraded
        assert len(report.errors) == 1
        assert report.errors[0].file == "node_modules/ghost"

    def test_missing_metadata_falls_back_to_declared_version(self, project):
        pkg_dir = project.root / "node_modules" / "bare"
        pkg_dir.mkdir(parents=True)
        (pkg_dir / "index.js").write_bytes(b"abc")

        report = collect_package_detail(project.root, DeclaredDependency("bare", "~0.1.0"))
        assert report.detail.version == "~0.1.0"
        assert report.detail.version_source == "declared"
        assert report.detail.size_bytes == 3
        assert [e.file for e in report.errors] == ["node_modules/bare/package.json"]

    def test_unreadable_file_degrades_size(self, project):
        project.install("left-pad", "1.3.0", {"lib/a.js": "a" * 40, "lib/b.js": "b" * 50})
        meta_size = (project.root / "node_modules" / "left-pad" / "package.json").stat().st_size

        real_scandir = os.scandir

        class _Entry:
            def __init__(self, entry):
                self._entry = entry
                self.name = entry.name
                self.path = entry.path

            def is_symlink(self):
                return self._entry.is_symlink()

            def is_dir(self, follow_symlinks=True):
                return self._entry.is_dir(follow_symlinks=follow_symlinks)

            def is_file(self, follow_symlinks=True):
                return self._entry.is_file(follow_symlinks=follow_symlinks)

            def stat(self, follow_symlinks=True):
                if self.name == "a.js":
                    raise PermissionError(13, "Permission denied")
                return self._entry.stat(follow_symlinks=follow_symlinks)

        @contextmanager
        def fake_scandir(path):
            with real_scandir(path) as it:
                yield [_Entry(e) for e in it]

        with patch("depaudit.packages.os.scandir", side_effect=fake_scandir):
            report = collect_package_detail(project.root, DeclaredDependency("left-pad", "^1"))

        assert report.detail.version == "1.3.0"
        assert report.detail.size_bytes == meta_size + 50
        assert report.detail.size_complete is False
        assert report.detail.degraded
        assert [(e.file, e.message) for e in report.errors] == [
            ("node_modules/left-pad/lib/a.js", "Permission denied")
        ]

    def test_custom_modules_dir(self, project):
        pkg_dir = project.root / "vendor_modules" / "left-pad"
        pkg_dir.mkdir(parents=True)
        (pkg_dir / "package.json").write_text('{"version": "9.9.9"}')

        report = collect_package_detail(
            project.root, DeclaredDependency("left-pad", "^9"), modules_dir="vendor_modules"
        )
        assert report.detail.version == "9.9.9"


class TestCollectPackageDetails:
    def test_preserves_order_in_parallel(self, project):
        names = [f"pkg-{i}" for i in range(8)]
        for i, name in enumerate(names):
            project.install(name, f"1.0.{i}")
        deps = [DeclaredDependency(n, "*") for n in names]

        reports = collect_package_details(project.root, deps, max_workers=4)
        assert [r.detail.name for r in reports] == names
        assert [r.detail.version for r in reports] == [f"1.0.{i}" for i in range(8)]

    def test_serial_matches_parallel(self, project):
        project.install("a", "1.0.0", {"x.js": "12345"})
        deps = [DeclaredDependency("a", "*"), DeclaredDependency("b", "*")]
        serial = collect_package_details(project.root, deps, max_workers=1)
        parallel = collect_package_details(project.root, deps, max_workers=2)
        assert [r.detail for r in serial] == [r.detail for r in parallel]

    def test_empty(self, project):
        assert collect_package_details(project.root, []) == []
