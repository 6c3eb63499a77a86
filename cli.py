import argparse
import logging
import sys
from pathlib import Path

from exporter import (
    DEFAULT_COLUMNS,
    columns_from_names,
    default_export_name,
    export_transfers,
)
from settings import Settings
from summary import summarize
from trc.ingest import parse_trace_file


logger = logging.getLogger("trc-analyzer")

TRACE_SUFFIX = ".trc"

# --export given without a path
DEFAULT_EXPORT = ""


# ---------------- CLI ----------------

def non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return value


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Reconstruct liquid transfers from a liquid-handler trace file"
    )
    parser.add_argument("--trace-file", required=True)
    parser.add_argument(
        "--export",
        nargs="?",
        const=DEFAULT_EXPORT,
        default=None,
        metavar="PATH",
        help="Write transfers to a delimited file (default name: <trace>_Export.csv)",
    )
    parser.add_argument(
        "--columns",
        help="Comma-separated export fields, e.g. timestamp,channel,volume",
    )
    parser.add_argument("--separator", help="Export field separator")
    parser.add_argument("--max-rows", type=non_negative_int, default=50)
    parser.add_argument(
        "--show-steps",
        action="store_true",
        help="Also list the paired pipetting operations",
    )
    parser.add_argument("--verbose", action="store_true")

    return parser.parse_args(argv)


# ---------------- Report ----------------

def _fmt(value) -> str:
    return "-" if value is None else str(value)


def print_summary(result) -> None:
    print("\nIngestion summary")
    print(f"  Lines read     : {result.total_lines}")
    print(f"  Trace entries  : {len(result.entries)}")
    print(f"  Skipped lines  : {result.skipped_lines}")
    print(f"  Operations     : {len(result.operations)}")
    print(f"  Transfers      : {len(result.transfers)}")

    summary = summarize(result)

    if summary.time_span:
        start, end = summary.time_span
        print(f"  Time span      : {start} -> {end}")

    if summary.operation_counts:
        print("\nOperations by kind")
        for kind, count in summary.operation_counts.items():
            print(f"  {kind.name:<12} {count}")
        print(f"  Mean duration  : {summary.mean_duration}")

    if summary.channels:
        print("\nChannels")
        for channel, stats in summary.channels.items():
            print(
                f"  ch {channel:<3} transfers={stats.transfer_count} "
                f"volume={stats.total_volume:.1f} uL"
            )
        print(f"  Total volume   : {summary.total_volume:.1f} uL")


def print_steps(result) -> None:
    print("\n=== PIPETTING OPERATIONS ===")
    for op in result.operations:
        print(
            f"line {op.start_line:<6} {op.kind.name:<11} "
            f"{op.start_time} ({op.duration.total_seconds():.0f}s)"
        )
        for detail in op.channels:
            print(f"    {detail}")


def print_transfers(result, max_rows: int) -> None:
    print("\n=== LIQUID TRANSFERS ===")
    for t in result.transfers[:max_rows]:
        print(
            f"{t.timestamp}  ch {t.channel:<3} "
            f"{_fmt(t.source_labware)}/{_fmt(t.source_position)} -> "
            f"{_fmt(t.target_labware)}/{_fmt(t.target_position)}  "
            f"{t.volume} uL  tip {_fmt(t.tip_labware)}/{t.tip_position}"
        )

    hidden = len(result.transfers) - max_rows
    if hidden > 0:
        print(f"... {hidden} more (use --max-rows or --export)")


# ---------------- Main ----------------

def main(argv=None) -> int:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(str(e))

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    trace_path = Path(args.trace_file)
    if trace_path.suffix.lower() != TRACE_SUFFIX:
        logger.warning("%s does not look like a %s trace file", trace_path.name, TRACE_SUFFIX)

    # Resolve export options before parsing so a typo fails fast
    columns = DEFAULT_COLUMNS
    if args.columns:
        try:
            columns = columns_from_names(args.columns.split(","))
        except KeyError as e:
            raise SystemExit(e.args[0])

    result = parse_trace_file(trace_path, encoding=settings.encoding)

    if result.errors:
        print("\nError processing file.")
        for err in result.errors:
            print(f"  {err}")
        return 1

    print(
        f"Successfully parsed {len(result.transfers)} liquid transfer events "
        f"from {result.file_name}."
    )

    print_summary(result)
    if args.show_steps:
        print_steps(result)
    print_transfers(result, args.max_rows)

    if args.export is not None:
        if not result.transfers:
            print("\nThere is no data to export.")
            return 0

        out = args.export or default_export_name(result.file_name)
        separator = args.separator or settings.export_separator
        try:
            path = export_transfers(result.transfers, columns, out, separator=separator)
        except OSError as e:
            print(f"\nAn error occurred during export: {e}")
            return 1
        print(f"\nData successfully exported to: {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
