"""
Tests for archive.zip_writer
"""

import zipfile
from datetime import datetime, timedelta, timezone

import pytest

from slice_studio.archive import ExportError, export_filename, write_slices_zip, write_zip
from slice_studio.core.models import ZipEntry


@pytest.fixture
def entries():
    return [ZipEntry("1.png", b"first"), ZipEntry("2.png", b"second")]


class TestExportFilename:

    def test_export_filename_when_utc_then_iso_with_dashes(self):
        moment = datetime(2024, 3, 15, 13, 45, 31, 123000, tzinfo=timezone.utc)
        assert export_filename(moment) == "slices_2024-03-15T13-45-31-123Z.zip"

    def test_export_filename_when_other_zone_then_converted_to_utc(self):
        moment = datetime(2024, 3, 15, 15, 45, 31, 5000, tzinfo=timezone(timedelta(hours=2)))
        assert export_filename(moment) == "slices_2024-03-15T13-45-31-005Z.zip"

    def test_export_filename_when_prefix_then_used(self):
        moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        assert export_filename(moment, prefix="batch") == "batch_2024-01-02T03-04-05-000Z.zip"


class TestWriteZip:

    def test_write_zip_when_valid_then_archive_on_disk(self, tmp_path, entries):
        path = write_zip(entries, tmp_path / "out.zip")
        assert path == tmp_path / "out.zip"
        with zipfile.ZipFile(path) as zf:
            assert zf.read("2.png") == b"second"

    def test_write_zip_when_no_suffix_then_zip_appended(self, tmp_path, entries):
        path = write_zip(entries, tmp_path / "nested" / "out")
        assert path.name == "out.zip"
        assert path.exists()

    def test_write_zip_when_written_then_no_temp_files_left(self, tmp_path, entries):
        write_zip(entries, tmp_path / "out.zip")
        assert [p.name for p in tmp_path.iterdir()] == ["out.zip"]

    def test_write_zip_when_too_many_entries_then_export_error(self, tmp_path, monkeypatch, entries):
        monkeypatch.setattr("slice_studio.archive.zip_builder.MAX_ENTRIES", 1)
        with pytest.raises(ExportError, match="Cannot build archive"):
            write_zip(entries, tmp_path / "out.zip")
        assert not (tmp_path / "out.zip").exists()

    def test_write_zip_when_parent_is_file_then_export_error(self, tmp_path, entries):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(ExportError, match="Failed to write"):
            write_zip(entries, blocker / "out.zip")


class TestWriteSlicesZip:

    def test_write_slices_zip_when_entries_then_timestamped_file(self, tmp_path, entries):
        now = datetime(2024, 3, 15, 13, 45, 31, 123000, tzinfo=timezone.utc)
        path = write_slices_zip(entries, tmp_path, now=now)
        assert path.name == "slices_2024-03-15T13-45-31-123Z.zip"
        with zipfile.ZipFile(path) as zf:
            assert zf.namelist() == ["1.png", "2.png"]

    def test_write_slices_zip_when_empty_then_export_error(self, tmp_path):
        with pytest.raises(ExportError, match="empty"):
            write_slices_zip([], tmp_path)
        assert list(tmp_path.iterdir()) == []
