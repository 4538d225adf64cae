"""Duplicate-safe ingestion and the in-memory entry store."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from earnings.data import entry_from_record, parse_csv
from earnings.models import Entry, WeekBucket
from earnings.rollups import aggregate_by_week

logger = logging.getLogger(__name__)

NO_INITIAL_DATA_MESSAGE = "No initial data found. Upload a CSV to get started."


@dataclass(frozen=True)
class IngestResult:
    merged: List[Entry]
    added_count: int
    duplicate_count: int


@dataclass(frozen=True)
class UploadStatus:
    ok: bool
    message: str
    source: Optional[str] = None
    added_count: int = 0
    duplicate_count: int = 0
    skipped_rows: int = 0


def ingest(
    existing_entries: Sequence[Entry],
    new_records: Iterable[Union[Entry, Mapping[str, Optional[str]]]],
) -> IngestResult:
    """Append records whose identity key is not already present.

    Records with neither an item id nor a work date are dropped along with
    duplicates. Keys admitted earlier in the same batch count as present.
    Existing entries are kept as-is and in order.
    """
    seen = {e.identity_key for e in existing_entries}
    added: List[Entry] = []
    dropped = 0
    for record in new_records:
        entry = entry_from_record(record)
        key = entry.identity_key
        if key in seen or not (entry.item_id or entry.work_date):
            dropped += 1
            continue
        seen.add(key)
        added.append(entry)
    return IngestResult(merged=[*existing_entries, *added], added_count=len(added), duplicate_count=dropped)


class EntryStore:
    """Owns the entry collection and the weekly buckets derived from it.

    Every upload runs parse, merge and weekly recompute under one lock, so
    two concurrent uploads can never both admit the same record.
    """

    def __init__(self, entries: Optional[Iterable[Entry]] = None):
        self._lock = threading.Lock()
        self._entries: Tuple[Entry, ...] = ()
        self._weeks: Tuple[WeekBucket, ...] = ()
        if entries:
            self.ingest_records(list(entries))

    @property
    def entries(self) -> Tuple[Entry, ...]:
        return self._entries

    def snapshot(self) -> Tuple[Tuple[Entry, ...], Tuple[WeekBucket, ...]]:
        with self._lock:
            return self._entries, self._weeks

    def clear(self) -> None:
        with self._lock:
            self._entries = ()
            self._weeks = ()

    def ingest_records(self, records: Sequence[Union[Entry, Mapping[str, Optional[str]]]]) -> IngestResult:
        with self._lock:
            result = ingest(self._entries, records)
            if result.added_count:
                self._entries = tuple(result.merged)
                self._weeks = tuple(aggregate_by_week(self._entries))
            return result

    def upload_text(self, text: str, source: Optional[str] = None) -> UploadStatus:
        parsed = parse_csv(text)
        result = self.ingest_records(parsed.records)
        logger.info(
            "Ingested %s: %d added, %d duplicate(s), %d row(s) skipped",
            source or "upload",
            result.added_count,
            result.duplicate_count,
            parsed.skipped_rows,
        )
        return UploadStatus(
            ok=True,
            message=f"Added {result.added_count} new entries ({result.duplicate_count} duplicates skipped)",
            source=source,
            added_count=result.added_count,
            duplicate_count=result.duplicate_count,
            skipped_rows=parsed.skipped_rows,
        )

    def upload_bytes(self, payload: bytes, source: Optional[str] = None) -> UploadStatus:
        try:
            text = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            logger.warning("Could not decode %s: %s", source or "upload", exc)
            return UploadStatus(ok=False, message=f"Error parsing CSV: {exc}", source=source)
        return self.upload_text(text, source=source)

    def load_file(self, path: Union[str, Path]) -> UploadStatus:
        path = Path(path)
        try:
            payload = path.read_bytes()
        except FileNotFoundError:
            logger.info("Initial data file %s not found", path)
            return UploadStatus(ok=False, message=NO_INITIAL_DATA_MESSAGE, source=path.name)
        except OSError as exc:
            logger.warning("Could not read %s: %s", path, exc)
            return UploadStatus(ok=False, message=f"Error reading file: {exc}", source=path.name)
        return self.upload_bytes(payload, source=path.name)
