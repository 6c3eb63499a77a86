from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Sequence

from trc.types import TransferEvent


@dataclass(frozen=True)
class ExportColumn:
    header: str
    field: str


# ---------- Column registry ----------

COLUMN_ACCESSORS: Dict[str, Callable[[TransferEvent], Any]] = {
    "timestamp": lambda t: t.timestamp,
    "channel": lambda t: t.channel,
    "source_labware": lambda t: t.source_labware,
    "source_position": lambda t: t.source_position,
    "target_labware": lambda t: t.target_labware,
    "target_position": lambda t: t.target_position,
    "volume": lambda t: t.volume,
    "tip_labware": lambda t: t.tip_labware,
    "tip_position": lambda t: t.tip_position,
}

DEFAULT_HEADERS: Dict[str, str] = {
    "timestamp": "Timestamp",
    "channel": "Channel",
    "source_labware": "Source Labware",
    "source_position": "Source Position",
    "target_labware": "Target Labware",
    "target_position": "Target Position",
    "volume": "Volume (uL)",
    "tip_labware": "Tip Labware",
    "tip_position": "Tip Position",
}

DEFAULT_COLUMNS: List[ExportColumn] = [
    ExportColumn(header=DEFAULT_HEADERS[name], field=name)
    for name in COLUMN_ACCESSORS
]


# ---------- Helpers ----------

def columns_from_names(names: Iterable[str]) -> List[ExportColumn]:
    columns = []
    for name in names:
        name = name.strip()
        if name not in COLUMN_ACCESSORS:
            raise KeyError(
                f"Unknown column {name!r}; expected one of: {', '.join(COLUMN_ACCESSORS)}"
            )
        columns.append(ExportColumn(header=DEFAULT_HEADERS[name], field=name))
    return columns


def default_export_name(file_name: str) -> str:
    return f"{Path(file_name).stem}_Export.csv"


def cell(transfer: TransferEvent, field: str) -> str:
    accessor = COLUMN_ACCESSORS.get(field)
    if accessor is None:
        return ""
    value = accessor(transfer)
    return "" if value is None else str(value)


# ---------- Export ----------

def render_rows(
    transfers: Iterable[TransferEvent],
    columns: Sequence[ExportColumn],
    separator: str = ",",
) -> List[str]:
    """
    Header row plus one row per transfer.

    Values are joined as-is: no quoting, no escaping. A value that
    contains the separator will shift the remaining cells of its row.
    """
    rows = [separator.join(c.header for c in columns)]
    for transfer in transfers:
        rows.append(separator.join(cell(transfer, c.field) for c in columns))
    return rows


def export_transfers(
    transfers: Iterable[TransferEvent],
    columns: Sequence[ExportColumn],
    path,
    separator: str = ",",
) -> Path:
    out = Path(path)
    rows = render_rows(transfers, columns, separator)
    out.write_text("\n".join(rows) + "\n", encoding="utf-8")
    return out
