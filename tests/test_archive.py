"""Unit tests for archive materialisation (snowdrop_scaffold.archive).

Tests cover:
- archive_path_for
- write_archive / remove_archive error wrapping
- extract_archive: directories, files, modes, entry order, bad archives,
  entries escaping the destination
- materialize: full round trip and temporary zip cleanup
"""

from __future__ import annotations

import stat
import zipfile
from pathlib import Path

import pytest

from snowdrop_scaffold.archive import (
    ArchiveError,
    archive_path_for,
    extract_archive,
    materialize,
    remove_archive,
    write_archive,
)


def file_mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestArchivePath:
    @pytest.mark.unit
    def test_zip_sits_next_to_destination(self, tmp_path):
        assert archive_path_for(tmp_path / "demo") == tmp_path / "demo.zip"


class TestWriteAndRemove:
    @pytest.mark.unit
    def test_write_archive(self, tmp_path):
        target = write_archive(b"PK", tmp_path / "demo.zip")
        assert target.read_bytes() == b"PK"

    @pytest.mark.unit
    def test_write_failure_is_wrapped(self, tmp_path):
        with pytest.raises(ArchiveError) as exc_info:
            write_archive(b"PK", tmp_path / "missing" / "demo.zip")
        assert exc_info.value.step == "write"
        assert exc_info.value.path.endswith("demo.zip")

    @pytest.mark.unit
    def test_remove_failure_is_wrapped(self, tmp_path):
        with pytest.raises(ArchiveError) as exc_info:
            remove_archive(tmp_path / "absent.zip")
        assert exc_info.value.step == "cleanup"


class TestExtractArchive:
    @pytest.mark.unit
    def test_directory_and_file_entries(self, tmp_path, zip_builder):
        zip_path = tmp_path / "demo.zip"
        zip_path.write_bytes(
            zip_builder({"docs/": None, "README.md": b"# demo\n"}, modes={"README.md": 0o644})
        )
        dest = extract_archive(zip_path, tmp_path / "demo")
        assert (dest / "docs").is_dir()
        assert (dest / "README.md").read_bytes() == b"# demo\n"
        assert file_mode(dest / "README.md") == 0o644

    @pytest.mark.unit
    def test_executable_mode_applied(self, tmp_path, zip_builder):
        zip_path = tmp_path / "demo.zip"
        zip_path.write_bytes(zip_builder({"mvnw": b"#!/bin/sh\n"}, modes={"mvnw": 0o755}))
        dest = extract_archive(zip_path, tmp_path / "demo")
        assert file_mode(dest / "mvnw") == 0o755

    @pytest.mark.unit
    def test_missing_parent_directories_created(self, tmp_path, zip_builder):
        zip_path = tmp_path / "demo.zip"
        zip_path.write_bytes(zip_builder({"src/main/java/me/App.java": b"class App {}\n"}))
        dest = extract_archive(zip_path, tmp_path / "demo")
        assert (dest / "src/main/java/me/App.java").read_text() == "class App {}\n"

    @pytest.mark.unit
    @pytest.mark.filterwarnings("ignore:Duplicate name")
    def test_later_entries_overwrite_earlier(self, tmp_path):
        zip_path = tmp_path / "demo.zip"
        with zipfile.ZipFile(zip_path, "w") as archive:
            archive.writestr("pom.xml", b"first")
            archive.writestr("pom.xml", b"second")
        dest = extract_archive(zip_path, tmp_path / "demo")
        assert (dest / "pom.xml").read_bytes() == b"second"

    @pytest.mark.unit
    def test_not_a_zip(self, tmp_path):
        zip_path = tmp_path / "demo.zip"
        zip_path.write_bytes(b"<html>oops</html>")
        with pytest.raises(ArchiveError) as exc_info:
            extract_archive(zip_path, tmp_path / "demo")
        assert exc_info.value.step == "extract"
        assert "demo.zip" in exc_info.value.path

    @pytest.mark.unit
    def test_entry_outside_destination_rejected(self, tmp_path, zip_builder):
        zip_path = tmp_path / "demo.zip"
        zip_path.write_bytes(zip_builder({"../evil.txt": b"x"}))
        with pytest.raises(ArchiveError, match="outside"):
            extract_archive(zip_path, tmp_path / "demo")
        assert not (tmp_path / "evil.txt").exists()


class TestMaterialize:
    @pytest.mark.unit
    def test_round_trip_removes_zip(self, tmp_path, project_zip):
        dest = tmp_path / "demo"
        result = materialize(project_zip, dest)
        assert result == dest
        assert (dest / "demo").is_dir()
        assert (dest / "demo/pom.xml").read_bytes() == b"<project/>\n"
        assert file_mode(dest / "demo/pom.xml") == 0o644
        assert (dest / "demo/src/main/java/App.java").read_bytes() == b"class App {}\n"
        assert not (tmp_path / "demo.zip").exists()

    @pytest.mark.unit
    def test_failed_extraction_leaves_zip_behind(self, tmp_path):
        with pytest.raises(ArchiveError):
            materialize(b"not a zip", tmp_path / "demo")
        assert (tmp_path / "demo.zip").exists()
