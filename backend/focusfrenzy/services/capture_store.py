"""
Focus Frenzy Capture Service — Capture Store
==============================================

What:  Directory-backed collection of capture images.
Why:   Centralizes every file system operation behind three calls:
       put (add one record), list_records (all records) and count.
How:   Filenames come from the record codec; metadata for listings comes
       from the filename plus os.stat. There is no index.
Who:   Called by the upload, listing, health and asset routes.

Directory Structure:
    captures/
    ├── capture_203.0.113.5_score42_1700000000123.jpg
    ├── capture_unknown_score7_1700000004567.jpg
    └── ...

Consistency Model:
    - The directory is created on the first successful-looking write,
      never at startup, so "no directory" means "no captures yet".
    - No locking. Two writes with identical metadata in the same
      millisecond land on the same name and the second one wins.
    - Listings read the directory at call time. Entries that vanish or
      fail to stat mid-scan are skipped rather than failing the call.
    - A directory that exists but cannot be read makes list_records()
      raise StorageError. count() reports zero for it instead.
    - Only regular files ending in .jpg are captures, for both
      list_records() and count().
"""

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

import aiofiles
from focusfrenzy.exceptions import (
    InvalidCaptureNameError,
    MissingPayloadError,
    NotFoundError,
    PayloadTooLargeError,
    StorageError,
)
from focusfrenzy.models.capture import CaptureRecord
from focusfrenzy.services.record_codec import (
    CAPTURE_EXTENSION,
    decode_filename,
    encode_filename,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10 * 1024 * 1024


def epoch_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def created_at(stat_result: os.stat_result) -> datetime:
    """
    Creation time of a file as an aware UTC datetime.

    Uses st_birthtime where the platform records it (macOS, BSD, Windows)
    and falls back to st_mtime. Captures are never modified after the
    write, so the two agree in practice.
    """
    timestamp = getattr(stat_result, "st_birthtime", None)
    if timestamp is None:
        timestamp = stat_result.st_mtime
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def _is_capture_entry(entry: os.DirEntry) -> bool:
    """A regular file whose name carries the capture extension."""
    if not entry.name.endswith(CAPTURE_EXTENSION):
        return False
    try:
        return entry.is_file()
    except OSError:
        return False


class CaptureStore:
    """
    Stores capture images as individual files in one directory.

    Args:
        root: Captures directory. Created on first write if missing.
        max_size: Largest accepted image in bytes (inclusive).
        clock: Returns epoch milliseconds; injected by tests.
    """

    def __init__(
        self,
        root: str,
        max_size: int = DEFAULT_MAX_SIZE,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.root = Path(root)
        self.max_size = max_size
        self._clock = clock or epoch_millis

    def exists(self) -> bool:
        return self.root.is_dir()

    def _ensure_directory(self) -> None:
        if self.root.is_dir():
            return
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Failed to create captures directory %s: %s", self.root, str(e))
            raise StorageError(context={"path": str(self.root), "os_error": str(e)})
        logger.info("Created captures directory: %s", self.root.resolve())

    def _path_for(self, filename: str) -> Path:
        """Join filename to the root, refusing anything that escapes it."""
        path = self.root / filename
        try:
            inside = path.resolve().parent == self.root.resolve()
        except ValueError:
            # Embedded NUL bytes
            inside = False
        if not inside:
            raise InvalidCaptureNameError(filename)
        return path

    async def put(
        self,
        image_bytes: Optional[bytes],
        ip: Optional[str] = None,
        score: Optional[str] = None,
    ) -> CaptureRecord:
        """
        Persist one capture and return its record.

        Validation runs before any file system effect, so a rejected
        upload never creates the directory or a zero-byte file.

        Raises:
            MissingPayloadError: image_bytes is None or empty.
            PayloadTooLargeError: image_bytes is larger than max_size.
            InvalidCaptureNameError: the score would move the file out of root.
            StorageError: directory creation or the write failed.
        """
        if not image_bytes:
            raise MissingPayloadError()
        if len(image_bytes) > self.max_size:
            raise PayloadTooLargeError(max_size=self.max_size, actual_size=len(image_bytes))

        filename = encode_filename(ip, score, self._clock())
        path = self._path_for(filename)
        self._ensure_directory()

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(image_bytes)
            stat_result = path.stat()
        except OSError as e:
            logger.error("Failed to store capture at %s: %s", path, str(e))
            raise StorageError(context={"path": str(path), "os_error": str(e)})

        decoded = decode_filename(filename)
        logger.debug("Capture stored: %s (%d bytes)", filename, stat_result.st_size)
        return CaptureRecord(
            filename=filename,
            path=str(path),
            size=stat_result.st_size,
            created=created_at(stat_result),
            ip=decoded.ip,
            score=decoded.score,
        )

    def list_records(self) -> List[CaptureRecord]:
        """
        All captures, newest first.

        Returns an empty list when the directory does not exist. The whole
        listing is re-read and re-sorted on every call.
        """
        if not self.root.is_dir():
            return []

        records = []
        try:
            with os.scandir(self.root) as scan:
                entries = list(scan)
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Failed to read captures directory %s: %s", self.root, str(e))
            raise StorageError(
                message="Failed to read captures",
                context={"path": str(self.root), "os_error": str(e)},
            )

        for entry in entries:
            if not _is_capture_entry(entry):
                continue
            try:
                stat_result = entry.stat()
            except OSError as e:
                logger.debug("Skipping capture %s: %s", entry.name, str(e))
                continue

            decoded = decode_filename(entry.name)
            records.append(
                CaptureRecord(
                    filename=entry.name,
                    path=str(self.root / entry.name),
                    size=stat_result.st_size,
                    created=created_at(stat_result),
                    ip=decoded.ip,
                    score=decoded.score,
                )
            )

        records.sort(key=lambda record: record.created, reverse=True)
        return records

    def count(self) -> int:
        """
        Number of captures, counted with the same rule as list_records().

        Health checks call this, so an unreadable directory reports zero
        instead of raising.
        """
        try:
            with os.scandir(self.root) as entries:
                return sum(1 for entry in entries if _is_capture_entry(entry))
        except FileNotFoundError:
            return 0
        except OSError as e:
            logger.warning("Cannot count captures in %s: %s", self.root, str(e))
            return 0

    def resolve(self, filename: str) -> Path:
        """
        Path of an existing capture file.

        Raises:
            InvalidCaptureNameError: filename points outside the directory.
            NotFoundError: no such file.
        """
        path = self._path_for(filename)
        if not path.is_file():
            raise NotFoundError(resource="capture", resource_id=filename)
        return path

