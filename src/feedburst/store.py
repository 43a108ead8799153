"""Durable storage for per-feed records.

Each feed's record is a small UTF-8 text file::

    feedburst-record 1
    read 2
    last-read 2026-10-11T08:30:00+00:00
    https://example.com/comic/1
    https://example.com/comic/2
    https://example.com/comic/3

The first two links have been read. Records are always rewritten whole.
"""

import contextlib
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO

from feedburst.errors import LoadError, StoreError
from feedburst.models import FeedRecord

logger = logging.getLogger(__name__)

HEADER = "feedburst-record"
FORMAT_VERSION = 1
NEVER = "never"
RECORD_SUFFIX = ".feed"


def load_record(stream: BinaryIO) -> FeedRecord:
    """Read a FeedRecord from a binary stream.

    An empty stream is a feed that has never been stored, and loads as an
    empty record.

    Raises:
        LoadError: If the stream holds a malformed or inconsistent record.
    """
    data = stream.read()
    if not data:
        return FeedRecord()

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LoadError(f"record is not valid UTF-8: {e}") from e

    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    if len(lines) < 3:
        raise LoadError("record is truncated: missing header lines")

    header, read_line, last_read_line, *links = lines

    if header != f"{HEADER} {FORMAT_VERSION}":
        raise LoadError(f"line 1: unrecognized record header {header!r}")

    read_count = _parse_read_count(read_line)
    last_read_at = _parse_last_read(last_read_line)

    record = FeedRecord()
    for lineno, link in enumerate(links, start=4):
        if not link.strip():
            raise LoadError(f"line {lineno}: blank link")
        if not record.append(link):
            raise LoadError(f"line {lineno}: duplicate link {link!r}")

    if read_count > len(record.known_links):
        raise LoadError(
            f"read count {read_count} exceeds the {len(record.known_links)} known links"
        )

    record.read_count = read_count
    record.last_read_at = last_read_at
    return record


def save_record(record: FeedRecord, stream: BinaryIO) -> None:
    """Write ``record`` to ``stream``, replacing whatever it held before.

    Raises:
        ValueError: If a link cannot be stored on a single line.
    """
    for link in record.known_links:
        if "\n" in link or "\r" in link:
            raise ValueError(f"link contains a line break: {link!r}")

    if record.last_read_at is None:
        last_read = NEVER
    else:
        last_read = record.last_read_at.astimezone(timezone.utc).isoformat()

    lines = [
        f"{HEADER} {FORMAT_VERSION}",
        f"read {record.read_count}",
        f"last-read {last_read}",
        *record.known_links,
    ]
    stream.seek(0)
    stream.write(("\n".join(lines) + "\n").encode("utf-8"))
    stream.truncate()


def _parse_read_count(line: str) -> int:
    key, _, value = line.partition(" ")
    if key != "read" or not (value.isascii() and value.isdigit()):
        raise LoadError(f"line 2: expected 'read <count>', found {line!r}")
    return int(value)


def _parse_last_read(line: str) -> datetime | None:
    key, _, value = line.partition(" ")
    if key != "last-read":
        raise LoadError(f"line 3: expected 'last-read <timestamp>', found {line!r}")
    if value == NEVER:
        return None
    try:
        timestamp = datetime.fromisoformat(value)
    except ValueError as e:
        raise LoadError(f"line 3: bad timestamp {value!r}") from e
    if timestamp.tzinfo is None:
        raise LoadError(f"line 3: timestamp {value!r} has no timezone")
    return timestamp


class FeedStore:
    """File-backed record storage, one ``<name>.feed`` file per feed."""

    def __init__(self, data_dir: str | Path):
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        """Return the record path for a feed name.

        Raises:
            StoreError: If the name cannot be used as a file name.
        """
        if (
            not name
            or name in (".", "..")
            or any(sep in name for sep in ("/", "\\", "\0"))
        ):
            raise StoreError(f"feed name {name!r} cannot be used as a file name")
        return self.data_dir / f"{name}{RECORD_SUFFIX}"

    def load(self, name: str) -> FeedRecord:
        """Load the record for ``name``, or an empty one if none is stored yet."""
        path = self.path_for(name)
        try:
            with open(path, "rb") as f:
                record = load_record(f)
        except FileNotFoundError:
            logger.debug("No record for '%s' yet at %s", name, path)
            return FeedRecord()
        except LoadError as e:
            raise LoadError(f"{path}: {e}") from e
        logger.debug(
            "Loaded '%s': %d links, %d read",
            name,
            len(record.known_links),
            record.read_count,
        )
        return record

    def save(self, name: str, record: FeedRecord) -> None:
        """Atomically replace the stored record for ``name``.

        Raises:
            StoreError: If the record cannot be written.
        """
        path = self.path_for(name)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{name}.", suffix=".tmp", dir=self.data_dir
            )
            try:
                with os.fdopen(fd, "wb") as f:
                    save_record(record, f)
                os.replace(tmp_path, path)
            except BaseException:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(tmp_path)
                raise
        except (OSError, ValueError) as e:
            raise StoreError(f"could not save {path}: {e}") from e
