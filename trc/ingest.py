import logging
import os
from typing import Iterable, List, Union

from .aggregate import aggregate_operations
from .parsers import tokenize
from .replay import reconstruct_transfers
from .types import AnalysisResult


logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8-sig"

PathLike = Union[str, "os.PathLike[str]"]


def read_trace_lines(path: PathLike, encoding: str = DEFAULT_ENCODING) -> List[str]:
    """
    Read the whole trace file into memory.

    The device may still hold the file open for writing; a plain
    read-only open does not block it. The handle is closed before
    returning.
    """
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return [raw.rstrip("\r\n") for raw in f]


def parse_trace_lines(lines: Iterable[str], file_name: str = "") -> AnalysisResult:
    """
    Run the full pipeline on an in-memory line sequence.

    Pipeline:
      raw lines
        → log entries
          → pipetting operations
            → transfer events

    This function must:
      - never throw
      - keep whatever earlier stages produced when a later one fails
      - record at most one error per call
    """
    result = AnalysisResult(file_name=file_name)
    try:
        _run(result, lambda: list(lines))
    except Exception as e:
        _record_failure(result, e)
    return result


def parse_trace_file(path: PathLike, encoding: str = DEFAULT_ENCODING) -> AnalysisResult:
    """Same as parse_trace_lines, reading the lines from `path`."""
    result = AnalysisResult(file_name=os.path.basename(os.fspath(path)))
    try:
        _run(result, lambda: read_trace_lines(path, encoding))
    except Exception as e:
        _record_failure(result, e)
    return result


def _run(result: AnalysisResult, load) -> None:
    lines = load()
    result.total_lines = len(lines)

    result.entries = tokenize(lines)
    logger.info(
        "%s: %d of %d lines tokenized",
        result.file_name or "<lines>",
        len(result.entries),
        result.total_lines,
    )

    result.operations = aggregate_operations(result.entries)
    logger.info("%d pipetting operations paired", len(result.operations))

    result.transfers = reconstruct_transfers(result.operations)
    logger.info("%d liquid transfers reconstructed", len(result.transfers))


def _record_failure(result: AnalysisResult, error: Exception) -> None:
    logger.warning("Parsing %s aborted: %s", result.file_name or "<lines>", error)
    logger.debug("Parse failure details", exc_info=error)
    result.errors.append(f"An unexpected error occurred during parsing: {error}")
