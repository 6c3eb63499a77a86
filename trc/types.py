from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum, auto
from typing import List, Optional, Tuple


class EntryStatus(Enum):
    UNKNOWN = auto()
    START = auto()
    PROGRESS = auto()
    COMPLETE = auto()
    WRITTEN = auto()


class ActionType(Enum):
    UNKNOWN = auto()
    INITIALIZE = auto()
    ASPIRATE = auto()
    DISPENSE = auto()
    PICKUP_TIP = auto()
    EJECT_TIP = auto()


@dataclass(frozen=True)
class LogEntry:
    """
    One tokenized trace line.

    Produced only for lines matching the trace grammar; list order is
    line order, which the device guarantees is chronological.
    """
    line_number: int
    timestamp: datetime
    source: str
    command: str
    status: EntryStatus
    details: str
    raw: str


@dataclass(frozen=True)
class ChannelDetail:
    channel: int
    labware: str
    position: str
    volume: float = 0.0  # only set for aspirate / dispense

    def __str__(self) -> str:
        return (
            f"Ch: {self.channel}, Labware: {self.labware}, "
            f"Pos: {self.position}, Vol: {self.volume}uL"
        )


@dataclass(frozen=True)
class PipettingOperation:
    """
    A Start entry paired with its first matching Complete entry.
    """
    kind: ActionType
    start_time: datetime
    end_time: datetime
    channels: Tuple[ChannelDetail, ...]
    start_line: int

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time


@dataclass(frozen=True)
class TransferEvent:
    """
    One completed aspirate-then-dispense cycle on a single channel.

    This is the ONLY transfer structure consumers see; the live
    per-channel state used while replaying is private to trc.replay.
    """
    timestamp: Optional[datetime]
    channel: int
    source_labware: Optional[str] = None
    source_position: Optional[str] = None
    target_labware: Optional[str] = None
    target_position: Optional[str] = None
    volume: float = 0.0
    tip_labware: Optional[str] = None
    tip_position: int = 0


@dataclass
class AnalysisResult:
    file_name: str
    entries: List[LogEntry] = field(default_factory=list)
    operations: List[PipettingOperation] = field(default_factory=list)
    transfers: List[TransferEvent] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    total_lines: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def skipped_lines(self) -> int:
        return self.total_lines - len(self.entries)
