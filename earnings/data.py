from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Iterable, List, Mapping, Optional, Tuple, Union
from zoneinfo import ZoneInfo

import pandas as pd

from earnings import settings
from earnings.models import Entry, RawRecord

logger = logging.getLogger(__name__)


# Header aliases -> canonical entry field names. Unlisted headers pass through.
ENTRY_COLUMNS = {
    "workDate": "work_date",
    "Work Date": "work_date",
    "Date": "work_date",
    "itemID": "item_id",
    "itemId": "item_id",
    "Item ID": "item_id",
    "duration": "duration",
    "Duration": "duration",
    "payout": "payout",
    "Payout": "payout",
    "Amount": "payout",
    "projectName": "project_name",
    "Project Name": "project_name",
    "Project": "project_name",
    "payType": "pay_type",
    "Pay Type": "pay_type",
}

ENTRY_FIELDS = ("item_id", "work_date", "duration", "payout", "project_name", "pay_type")

# A row must carry at least one of these to count as a work-log entry.
IDENTIFYING_FIELDS = ("work_date", "item_id", "duration", "payout")

ENTRY_FRAME_COLUMNS = [
    "item_id",
    "work_date",
    "work_ts",
    "hours",
    "earnings",
    "payout",
    "project_name",
    "pay_type",
]

_HOURS_RE = re.compile(r"(\d+)h")
_MINUTES_RE = re.compile(r"(\d+)m")
_SECONDS_RE = re.compile(r"(\d+)s")
# Leading decimal number; any trailing text is ignored.
_AMOUNT_RE = re.compile(r"\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


# ---------------- Field parsers ----------------
def _component(pattern: re.Pattern, text: str) -> int:
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


def parse_duration(text: object) -> float:
    """Parse "1h 30m", "59m 56s", "2h 10m 0s" style durations into hours."""
    if text is None or (isinstance(text, float) and math.isnan(text)):
        return 0.0
    s = str(text)
    if not s:
        return 0.0
    hours = _component(_HOURS_RE, s)
    minutes = _component(_MINUTES_RE, s)
    seconds = _component(_SECONDS_RE, s)
    return hours + minutes / 60 + seconds / 3600


def parse_currency(text: object) -> float:
    if text is None:
        return 0.0
    cleaned = re.sub(r"[$,]", "", str(text)).strip()
    if not cleaned:
        return 0.0
    match = _AMOUNT_RE.match(cleaned)
    if not match:
        return 0.0
    value = float(match.group(0))
    return 0.0 if math.isinf(value) else value


def _local_zone() -> tzinfo:
    if settings.TIMEZONE:
        return ZoneInfo(settings.TIMEZONE)
    return datetime.now().astimezone().tzinfo


def parse_calendar_date(text: object) -> Optional[datetime]:
    """Parse a work date; None when empty or unparseable.

    Timezone-aware values are moved into the local (or configured) zone and
    returned naive, so every downstream calendar computation is wall-clock.
    """
    if text is None:
        return None
    s = str(text).strip()
    if not s:
        return None
    ts = pd.to_datetime(s, errors="coerce")
    if pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(_local_zone()).tz_localize(None)
    return ts.to_pydatetime()


# ---------------- CSV records ----------------
@dataclass(frozen=True)
class ParsedCsv:
    records: List[RawRecord]
    skipped_rows: int


def split_csv_line(line: str) -> List[str]:
    """Split one CSV line on commas outside double quotes.

    A quote only toggles the in-quotes state; escaped quotes ("") are not
    supported, matching the format the weekly report is exported in.
    """
    values: List[str] = []
    current: List[str] = []
    in_quotes = False
    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    values.append("".join(current).strip())
    return values


def read_csv_rows(text: Optional[str]) -> Tuple[List[str], List[List[str]]]:
    lines = (text or "").strip().splitlines()
    if not lines:
        return [], []
    # Headers are assumed simple: no quoted commas.
    headers = [h.replace('"', "").strip() for h in lines[0].split(",")]
    return headers, [split_csv_line(line) for line in lines[1:]]


def parse_csv(text: Optional[str]) -> ParsedCsv:
    headers, rows = read_csv_rows(text)
    columns = [ENTRY_COLUMNS.get(h, h) for h in headers]

    records: List[RawRecord] = []
    skipped = 0
    for values in rows:
        if len(values) < len(headers) or not any(values):
            skipped += 1
            continue
        record: RawRecord = {}
        for column, value in zip(columns, values):
            record.setdefault(column, value or None)
        if not any(record.get(f) for f in IDENTIFYING_FIELDS):
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug("Skipped %d structurally invalid CSV row(s)", skipped)
    return ParsedCsv(records=records, skipped_rows=skipped)


def parse_csv_records(text: Optional[str]) -> List[RawRecord]:
    return parse_csv(text).records


def entry_from_record(record: Union[Entry, Mapping[str, Optional[str]]]) -> Entry:
    if isinstance(record, Entry):
        return record
    canonical = {f: record.get(f) for f in ENTRY_FIELDS}
    extra = {k: v for k, v in record.items() if k not in ENTRY_FIELDS}
    return Entry(**canonical, extra=extra)


# ---------------- Frames ----------------
def entries_frame(entries: Iterable[Entry]) -> pd.DataFrame:
    """One row per entry with parsed hours, earnings and work timestamp."""
    rows = [
        {
            "item_id": e.item_id,
            "work_date": e.work_date,
            "work_ts": parse_calendar_date(e.work_date),
            "hours": parse_duration(e.duration),
            "earnings": parse_currency(e.payout),
            "payout": e.payout,
            "project_name": e.project_name or None,
            "pay_type": e.pay_type or None,
        }
        for e in entries
    ]
    frame = pd.DataFrame(rows, columns=ENTRY_FRAME_COLUMNS)
    frame["work_ts"] = pd.to_datetime(frame["work_ts"])
    frame["hours"] = frame["hours"].astype(float)
    frame["earnings"] = frame["earnings"].astype(float)
    return frame
