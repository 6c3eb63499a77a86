import logging
import re
from typing import List, Optional, Sequence

from .detect import VOLUME_ACTIONS, classify_command, is_pipetting_command
from .types import ActionType, ChannelDetail, EntryStatus, LogEntry, PipettingOperation


logger = logging.getLogger(__name__)


# -----------------------------
# CHANNEL DETAIL GRAMMARS
# -----------------------------

# Aspirate / Dispense: "channel 1: Plate_01, A1, 50.0 uL"
VOLUME_DETAIL_RE = re.compile(
    r"channel (?P<channel>\d+): (?P<labware>[^,]+), (?P<position>[^,]+), (?P<volume>[\d.]+) uL"
)

# Tip Pick Up / Tip Eject: "channel 1: TipRack_01, 5"
TIP_DETAIL_RE = re.compile(
    r"channel (?P<channel>\d+): (?P<labware>[^,]+), (?P<position>[^,>]+)"
)


def parse_channel_details(details: str, kind: ActionType) -> List[ChannelDetail]:
    """
    Extract every channel mentioned in a Complete entry's detail text.

    Volume is only read for aspirate/dispense; a malformed volume
    raises ValueError.
    """
    with_volume = kind in VOLUME_ACTIONS
    pattern = VOLUME_DETAIL_RE if with_volume else TIP_DETAIL_RE

    return [
        ChannelDetail(
            channel=int(m.group("channel")),
            labware=m.group("labware").strip(),
            position=m.group("position").strip(),
            volume=float(m.group("volume")) if with_volume else 0.0,
        )
        for m in pattern.finditer(details)
    ]


def find_completion(entries: Sequence[LogEntry], start: int) -> Optional[LogEntry]:
    """
    First Complete entry after index `start` with the same command text.
    """
    command = entries[start].command
    for entry in entries[start + 1:]:
        if entry.command == command and entry.status == EntryStatus.COMPLETE:
            return entry
    return None


def aggregate_operations(entries: Sequence[LogEntry]) -> List[PipettingOperation]:
    """
    Pair Start/Complete entries of pipetting commands into operations.

    Single forward scan. After a pair is emitted the scan jumps to the
    completion's line number, so consumed lines are not scanned again.
    Starts without a later Complete are dropped silently.
    """
    operations: List[PipettingOperation] = []

    i = 0
    # the last entry cannot start a pair
    while i < len(entries) - 1:
        entry = entries[i]

        if entry.status == EntryStatus.START and is_pipetting_command(entry.command):
            completion = find_completion(entries, i)

            if completion is None:
                logger.debug(
                    "Dropping unterminated %r started at line %d",
                    entry.command,
                    entry.line_number,
                )
            else:
                kind = classify_command(entry.command)
                operations.append(
                    PipettingOperation(
                        kind=kind,
                        start_time=entry.timestamp,
                        end_time=completion.timestamp,
                        channels=tuple(parse_channel_details(completion.details, kind)),
                        start_line=entry.line_number,
                    )
                )
                # line numbers index the entry list only when no line was skipped
                i = completion.line_number - 1

        i += 1

    return operations
