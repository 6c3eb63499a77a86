import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from .types import EntryStatus, LogEntry


logger = logging.getLogger(__name__)


class TraceFormatError(ValueError):
    """A line matched the trace grammar but could not be converted."""

    def __init__(self, line_number: int, message: str):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


# -----------------------------
# TRACE LINE GRAMMAR
# -----------------------------

TRACE_LINE_RE = re.compile(
    r"""
    ^
    (?P<timestamp>[\d\- :]+)>[ ]     # 2024-01-01 10:00:00>
    (?P<source>.+?)[ ]:[ ]
    (?P<command>.+?)[ ]-[ ]
    (?P<status>\w+);[ ]?
    (?P<details>.*)
    $
    """,
    re.VERBOSE,
)

# strptime alone would accept single-digit fields
TIMESTAMP_SHAPE_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

STATUS_BY_NAME = {status.name.lower(): status for status in EntryStatus}


def parse_timestamp(text: str) -> datetime:
    """
    Strict yyyy-MM-dd HH:mm:ss parse. Raises ValueError on anything else.
    """
    if not TIMESTAMP_SHAPE_RE.fullmatch(text):
        raise ValueError(f"timestamp {text!r} does not match 'yyyy-MM-dd HH:mm:ss'")
    return datetime.strptime(text, TIMESTAMP_FORMAT)


def parse_status(token: str) -> EntryStatus:
    return STATUS_BY_NAME.get(token.lower(), EntryStatus.UNKNOWN)


def parse_line(line: str, line_number: int) -> Optional[LogEntry]:
    """
    Parse one trace line like:
      2024-01-01 10:00:02> Tool : Aspirate - Complete; channel 1: Plate, A1, 50 uL

    Returns None when the line does not follow the grammar at all.
    Raises TraceFormatError when it does but the timestamp is invalid.
    """
    m = TRACE_LINE_RE.match(line)
    if not m:
        return None

    try:
        timestamp = parse_timestamp(m.group("timestamp"))
    except ValueError as e:
        raise TraceFormatError(line_number, str(e)) from e

    return LogEntry(
        line_number=line_number,
        timestamp=timestamp,
        source=m.group("source").strip(),
        command=m.group("command").strip(),
        status=parse_status(m.group("status")),
        details=m.group("details").strip(),
        raw=line,
    )


def tokenize(lines: Iterable[str]) -> List[LogEntry]:
    entries: List[LogEntry] = []

    for line_number, line in enumerate(lines, 1):
        entry = parse_line(line, line_number)
        if entry is None:
            logger.debug("Skipping unrecognized line %d: %r", line_number, line)
            continue
        entries.append(entry)

    return entries
