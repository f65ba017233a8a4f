"""
Focus Frenzy Capture Service — Capture Store Unit Tests
=========================================================

What:  Tests for CaptureStore put / list_records / count / resolve.
Why:   The store is the whole persistence layer; its edge cases (missing
       directory, size ceiling, stray files) decide what every endpoint shows.
How:   Each test gets a fresh, not-yet-created directory under tmp_path.

Test Strategy:
    ✅ put writes the encoded filename and creates the directory lazily
    ✅ Size ceiling is inclusive; one byte over is rejected
    ✅ Missing payload leaves the directory untouched
    ✅ Listing is newest first, tolerant of stray and vanished entries
    ✅ count agrees with list_records, also for unreadable directories
    ✅ resolve refuses path traversal
"""

import os
import re
from unittest.mock import patch

import pytest

from focusfrenzy.exceptions import (
    InvalidCaptureNameError,
    MissingPayloadError,
    NotFoundError,
    PayloadTooLargeError,
    StorageError,
)
from focusfrenzy.services.capture_store import CaptureStore

TEN_MIB = 10 * 1024 * 1024


def fixed_clock(value):
    return lambda: value


class TestCaptureStorePut:
    """Tests for adding captures."""

    @pytest.mark.asyncio
    async def test_put_writes_encoded_filename(self, captures_dir, sample_image_bytes):
        store = CaptureStore(root=str(captures_dir), clock=fixed_clock(1700000000123))

        record = await store.put(sample_image_bytes, ip="203.0.113.5", score="42")

        assert record.filename == "capture_203.0.113.5_score42_1700000000123.jpg"
        assert record.size == len(sample_image_bytes)
        assert record.ip == "203.0.113.5"
        assert record.score == "42"
        assert (captures_dir / record.filename).read_bytes() == sample_image_bytes
        assert record.path == str(captures_dir / record.filename)

    @pytest.mark.asyncio
    async def test_put_creates_missing_directory(self, capture_store, captures_dir, sample_image_bytes):
        assert not captures_dir.exists()
        await capture_store.put(sample_image_bytes, ip="1.1.1.1", score="1")
        assert captures_dir.is_dir()

    @pytest.mark.asyncio
    async def test_put_uses_store_clock(self, captures_dir, sample_image_bytes):
        store = CaptureStore(root=str(captures_dir), clock=fixed_clock(1234567890123))
        record = await store.put(sample_image_bytes, ip="1.1.1.1", score="5")
        assert re.search(r"_1234567890123\.jpg$", record.filename)

    @pytest.mark.asyncio
    async def test_put_exactly_at_ceiling_succeeds(self, capture_store):
        record = await capture_store.put(b"\xff" * TEN_MIB, ip="1.1.1.1", score="1")
        assert record.size == TEN_MIB

    @pytest.mark.asyncio
    async def test_put_one_byte_over_ceiling_fails(self, capture_store, captures_dir):
        with pytest.raises(PayloadTooLargeError) as excinfo:
            await capture_store.put(b"\xff" * (TEN_MIB + 1), ip="1.1.1.1", score="1")
        assert excinfo.value.actual_size == TEN_MIB + 1
        assert not captures_dir.exists()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, b""])
    async def test_missing_payload_leaves_directory_untouched(self, capture_store, captures_dir, payload):
        with pytest.raises(MissingPayloadError, match="No image file received"):
            await capture_store.put(payload, ip="1.1.1.1", score="1")
        assert not captures_dir.exists()

    @pytest.mark.asyncio
    async def test_distinct_milliseconds_give_distinct_files(self, captures_dir, sample_image_bytes):
        ticks = iter([1000, 1001])
        store = CaptureStore(root=str(captures_dir), clock=lambda: next(ticks))

        first = await store.put(sample_image_bytes, ip="1.1.1.1", score="9")
        second = await store.put(sample_image_bytes, ip="1.1.1.1", score="9")

        assert first.filename != second.filename
        assert store.count() == 2

    @pytest.mark.asyncio
    async def test_same_millisecond_overwrites(self, captures_dir):
        """Accepted race: identical metadata in the same millisecond share a name."""
        store = CaptureStore(root=str(captures_dir), clock=fixed_clock(5000))

        await store.put(b"first", ip="1.1.1.1", score="9")
        record = await store.put(b"second", ip="1.1.1.1", score="9")

        assert store.count() == 1
        assert (captures_dir / record.filename).read_bytes() == b"second"

    @pytest.mark.asyncio
    async def test_score_cannot_escape_directory(self, capture_store, captures_dir, sample_image_bytes):
        with pytest.raises(InvalidCaptureNameError):
            await capture_store.put(sample_image_bytes, ip="1.1.1.1", score="/../../escape")
        assert not captures_dir.exists()
        assert not list(captures_dir.parent.glob("escape_*.jpg"))


class TestCaptureStoreList:
    """Tests for listing and counting captures."""

    def _write(self, directory, name, mtime, content=b"img"):
        path = directory / name
        path.write_bytes(content)
        os.utime(path, (mtime, mtime))
        return path

    def test_missing_directory_lists_nothing(self, capture_store):
        assert capture_store.list_records() == []
        assert capture_store.count() == 0
        assert not capture_store.exists()

    def test_empty_directory_lists_nothing(self, capture_store, captures_dir):
        captures_dir.mkdir()
        assert capture_store.list_records() == []
        assert capture_store.count() == 0
        assert capture_store.exists()

    def test_newest_first(self, capture_store, captures_dir):
        captures_dir.mkdir()
        self._write(captures_dir, "capture_1.1.1.1_score1_1000.jpg", 1_700_000_100)
        self._write(captures_dir, "capture_2.2.2.2_score2_2000.jpg", 1_700_000_300)
        self._write(captures_dir, "capture_3.3.3.3_score3_3000.jpg", 1_700_000_200)

        records = capture_store.list_records()

        assert [r.ip for r in records] == ["2.2.2.2", "3.3.3.3", "1.1.1.1"]
        created = [r.created for r in records]
        assert created == sorted(created, reverse=True)

    def test_only_jpg_entries_are_listed(self, capture_store, captures_dir):
        captures_dir.mkdir()
        self._write(captures_dir, "capture_1.1.1.1_score1_1000.jpg", 1_700_000_000)
        self._write(captures_dir, "notes.txt", 1_700_000_000)
        self._write(captures_dir, "capture_1.1.1.1_score1_1000.png", 1_700_000_000)

        assert [r.filename for r in capture_store.list_records()] == [
            "capture_1.1.1.1_score1_1000.jpg"
        ]
        assert capture_store.count() == 1

    def test_malformed_name_listed_with_placeholders(self, capture_store, captures_dir):
        captures_dir.mkdir()
        self._write(captures_dir, "holiday.jpg", 1_700_000_000, content=b"12345")

        records = capture_store.list_records()

        assert len(records) == 1
        assert records[0].ip == "unknown"
        assert records[0].score == "unknown"
        assert records[0].size == 5
        assert capture_store.count() == 1

    def test_vanished_entry_is_skipped(self, capture_store, captures_dir):
        """A dangling entry (file deleted behind a link) does not break the listing."""
        captures_dir.mkdir()
        self._write(captures_dir, "capture_1.1.1.1_score1_1000.jpg", 1_700_000_000)
        os.symlink(captures_dir / "gone.bin", captures_dir / "capture_2.2.2.2_score2_2000.jpg")

        records = capture_store.list_records()

        assert [r.ip for r in records] == ["1.1.1.1"]
        assert capture_store.count() == 1

    def test_directory_named_like_capture_is_not_counted(self, capture_store, captures_dir):
        captures_dir.mkdir()
        (captures_dir / "dir.jpg").mkdir()
        self._write(captures_dir, "capture_1.1.1.1_score1_1000.jpg", 1_700_000_000)

        assert [r.filename for r in capture_store.list_records()] == [
            "capture_1.1.1.1_score1_1000.jpg"
        ]
        assert capture_store.count() == 1

    def test_root_is_a_file(self, captures_dir):
        captures_dir.write_bytes(b"not a directory")
        store = CaptureStore(root=str(captures_dir))

        assert store.list_records() == []
        assert store.count() == 0
        assert not store.exists()

    def test_unreadable_directory_raises_storage_error(self, capture_store, captures_dir):
        captures_dir.mkdir()
        with patch(
            "focusfrenzy.services.capture_store.os.scandir",
            side_effect=PermissionError("Permission denied"),
        ):
            with pytest.raises(StorageError) as exc_info:
                capture_store.list_records()

        assert exc_info.value.message == "Failed to read captures"
        assert "Permission denied" in exc_info.value.context["os_error"]

    def test_unreadable_directory_counts_zero(self, capture_store, captures_dir):
        captures_dir.mkdir()
        with patch(
            "focusfrenzy.services.capture_store.os.scandir",
            side_effect=PermissionError("Permission denied"),
        ):
            assert capture_store.count() == 0


class TestCaptureStoreResolve:
    """Tests for looking up a stored file by name."""

    @pytest.mark.asyncio
    async def test_resolve_existing(self, capture_store, sample_image_bytes):
        record = await capture_store.put(sample_image_bytes, ip="1.1.1.1", score="1")
        assert capture_store.resolve(record.filename).read_bytes() == sample_image_bytes

    def test_resolve_missing(self, capture_store):
        with pytest.raises(NotFoundError):
            capture_store.resolve("capture_1.1.1.1_score1_1.jpg")

    @pytest.mark.parametrize("name", ["../secret.jpg", "../../etc/passwd", "", "."])
    def test_resolve_rejects_traversal(self, capture_store, captures_dir, name):
        captures_dir.mkdir()
        with pytest.raises(InvalidCaptureNameError):
            capture_store.resolve(name)
