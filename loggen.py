import argparse
import datetime
import random
from typing import List, Optional

ROWS = "ABCDEFGH"
VOLUMES = [10.0, 25.0, 50.0, 100.0, 150.5]
SOURCE = "Venus"


def _line(ts: datetime.datetime, command: str, status: str, details: str = "") -> str:
    return f"{ts:%Y-%m-%d %H:%M:%S}> {SOURCE} : {command} - {status}; {details}"


def _well(channel: int, cycle: int) -> str:
    return f"{ROWS[(channel - 1) % len(ROWS)]}{cycle + 1}"


def generate_trace_lines(
    cycles: int = 3,
    channels: int = 8,
    start: Optional[datetime.datetime] = None,
    seed: Optional[int] = None,
    noise: bool = False,
) -> List[str]:
    """
    Build a plausible trace: one initialize, then per cycle a tip pick up,
    aspirate, dispense and tip eject over all channels.

    Every cycle yields exactly `channels` transfers. Progress lines are
    interleaved; with `noise` a footer of non-trace lines is appended.
    """
    rng = random.Random(seed)
    now = start or datetime.datetime(2024, 1, 1, 9, 0, 0)
    lines: List[str] = []

    def step(command: str, details: str) -> None:
        nonlocal now
        lines.append(_line(now, command, "Start"))
        now += datetime.timedelta(seconds=rng.randint(1, 3))
        if rng.random() < 0.5:
            lines.append(_line(now, command, "Progress", "moving to position"))
            now += datetime.timedelta(seconds=1)
        lines.append(_line(now, command, "Complete", details))
        now += datetime.timedelta(seconds=rng.randint(1, 5))

    step("Initialize", "")

    for cycle in range(cycles):
        chans = range(1, channels + 1)
        volume = rng.choice(VOLUMES)

        step(
            "Tip Pick Up",
            ", ".join(f"channel {ch}: TipRack_01, {cycle * channels + ch}" for ch in chans),
        )
        step(
            "Aspirate",
            ", ".join(
                f"channel {ch}: SourcePlate, {_well(ch, cycle)}, {volume} uL" for ch in chans
            ),
        )
        step(
            "Dispense",
            ", ".join(
                f"channel {ch}: TargetPlate, {_well(ch, cycle)}, {volume} uL" for ch in chans
            ),
        )
        step("Tip Eject", ", ".join(f"channel {ch}: Waste, 1" for ch in chans))

    if noise:
        lines += ["", "*** end of trace ***"]

    return lines


def write_trace_file(path, **kwargs) -> int:
    lines = generate_trace_lines(**kwargs)
    with open(path, "w", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
    return len(lines)


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Write a synthetic liquid-handler trace file.")
    ap.add_argument("path")
    ap.add_argument("--cycles", type=int, default=3)
    ap.add_argument("--channels", type=int, default=8)
    ap.add_argument("--seed", type=int, default=None)
    args = ap.parse_args()

    n = write_trace_file(args.path, cycles=args.cycles, channels=args.channels, seed=args.seed)
    print(f"Generated {n} lines in {args.path}")
