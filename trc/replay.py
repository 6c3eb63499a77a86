import re
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .types import ActionType, ChannelDetail, PipettingOperation, TransferEvent


INTEGER_RE = re.compile(r"[+-]?\d+")
INT32_MIN, INT32_MAX = -(2 ** 31), 2 ** 31 - 1


@dataclass
class _ChannelState:
    """Live per-channel accumulator; never leaves reconstruct_transfers."""
    channel: int
    timestamp: Optional[datetime] = None
    source_labware: Optional[str] = None
    source_position: Optional[str] = None
    target_labware: Optional[str] = None
    target_position: Optional[str] = None
    volume: float = 0.0
    tip_labware: Optional[str] = None
    tip_position: int = 0

    def snapshot(self) -> TransferEvent:
        return TransferEvent(
            timestamp=self.timestamp,
            channel=self.channel,
            source_labware=self.source_labware,
            source_position=self.source_position,
            target_labware=self.target_labware,
            target_position=self.target_position,
            volume=self.volume,
            tip_labware=self.tip_labware,
            tip_position=self.tip_position,
        )


def parse_tip_position(position: str) -> int:
    text = position.strip()
    if not INTEGER_RE.fullmatch(text):
        return 0
    value = int(text)
    # positions outside a 32-bit int are treated as unparsable
    if not INT32_MIN <= value <= INT32_MAX:
        return 0
    return value


def reconstruct_transfers(operations: Iterable[PipettingOperation]) -> List[TransferEvent]:
    """
    Replay operations per channel and emit one TransferEvent per dispense.

    Source fields and volume reset after each dispense; tip fields
    survive until an eject.
    """
    transfers: List[TransferEvent] = []
    states: Dict[int, _ChannelState] = {}

    for op in sorted(operations, key=lambda o: o.start_time):
        for detail in op.channels:
            state = states.get(detail.channel)
            if state is None:
                state = states[detail.channel] = _ChannelState(channel=detail.channel)

            event = _apply(state, op, detail)
            if event is not None:
                transfers.append(event)

    return transfers


def _apply(
    state: _ChannelState,
    op: PipettingOperation,
    detail: ChannelDetail,
) -> Optional[TransferEvent]:
    if op.kind == ActionType.PICKUP_TIP:
        state.tip_labware = detail.labware
        state.tip_position = parse_tip_position(detail.position)

    elif op.kind == ActionType.ASPIRATE:
        state.source_labware = detail.labware
        state.source_position = detail.position
        state.volume = detail.volume

    elif op.kind == ActionType.DISPENSE:
        state.timestamp = op.start_time
        state.target_labware = detail.labware
        state.target_position = detail.position

        event = state.snapshot()

        state.source_labware = None
        state.source_position = None
        state.volume = 0.0
        return event

    elif op.kind == ActionType.EJECT_TIP:
        state.tip_labware = None
        state.tip_position = 0

    return None
