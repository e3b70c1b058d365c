from __future__ import annotations

import asyncio
from datetime import datetime

from storage.files import FileStorageService


def test_filenames_carry_timestamp():
    moment = datetime(2024, 3, 9, 21, 5, 7)

    assert FileStorageService.journal_entry_filename(moment) == "journal_entry_2024-03-09_21-05-07.md"
    assert FileStorageService.transcript_filename(moment) == "chat_transcript_2024-03-09_21-05-07.txt"


def test_save_writes_into_export_dir(tmp_path):
    service = FileStorageService(tmp_path / "exports")

    result = asyncio.run(service.save("# Entry\n", "entry.md"))

    assert result.success
    assert result.location == str(tmp_path / "exports" / "entry.md")
    assert (tmp_path / "exports" / "entry.md").read_text(encoding="utf-8") == "# Entry\n"


def test_save_refuses_paths_outside_export_dir(tmp_path):
    service = FileStorageService(tmp_path / "exports")

    result = asyncio.run(service.save("x", "../escape.md"))

    assert not result.success
    assert result.location is None
    assert not (tmp_path / "escape.md").exists()


def test_save_reports_write_failure(tmp_path):
    blocker = tmp_path / "exports"
    blocker.write_text("not a directory", encoding="utf-8")
    service = FileStorageService(blocker)

    result = asyncio.run(service.save("x", "entry.md"))

    assert not result.success


def test_save_reports_unencodable_content(tmp_path):
    service = FileStorageService(tmp_path / "exports")

    result = asyncio.run(service.save("entry \ud800", "entry.md"))

    assert not result.success
    assert result.location is None
