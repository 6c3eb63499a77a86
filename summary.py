from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from trc.types import ActionType, AnalysisResult, TransferEvent


@dataclass
class ChannelStats:
    transfer_count: int
    total_volume: float
    first_seen: Optional[datetime]
    last_seen: Optional[datetime]


@dataclass(frozen=True)
class TraceSummary:
    operation_counts: Dict[ActionType, int]
    channels: Dict[int, ChannelStats]
    total_duration: timedelta
    mean_duration: timedelta
    time_span: Optional[Tuple[datetime, datetime]]

    @property
    def total_volume(self) -> float:
        return sum(s.total_volume for s in self.channels.values())


# ---------- Internal helpers ----------

def _update_channel(stats: Dict[int, ChannelStats], t: TransferEvent) -> None:
    if t.channel not in stats:
        stats[t.channel] = ChannelStats(
            transfer_count=1,
            total_volume=t.volume,
            first_seen=t.timestamp,
            last_seen=t.timestamp,
        )
    else:
        s = stats[t.channel]
        s.transfer_count += 1
        s.total_volume += t.volume
        s.last_seen = t.timestamp


# ---------- Public API ----------

def summarize(result: AnalysisResult) -> TraceSummary:
    """
    Aggregate counts over one parse result.
    Used by the CLI report.
    """
    counts: Dict[ActionType, int] = {}
    total = timedelta()
    for op in result.operations:
        counts[op.kind] = counts.get(op.kind, 0) + 1
        total += op.duration

    mean = total / len(result.operations) if result.operations else timedelta()

    channels: Dict[int, ChannelStats] = {}
    for t in result.transfers:
        _update_channel(channels, t)

    span = None
    if result.entries:
        span = (result.entries[0].timestamp, result.entries[-1].timestamp)

    return TraceSummary(
        operation_counts=counts,
        channels=dict(sorted(channels.items())),
        total_duration=total,
        mean_duration=mean,
        time_span=span,
    )
