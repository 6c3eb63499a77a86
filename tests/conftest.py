import pytest


EXAMPLE_LINES = [
    "2024-01-01 10:00:00> Tool : Aspirate - Start; ",
    "2024-01-01 10:00:02> Tool : Aspirate - Complete; channel 1: LabwareA, A1, 50.0 uL",
    "2024-01-01 10:00:03> Tool : Dispense - Start; ",
    "2024-01-01 10:00:05> Tool : Dispense - Complete; channel 1: LabwareB, B1, 50.0 uL",
]


@pytest.fixture
def example_lines():
    return list(EXAMPLE_LINES)


@pytest.fixture
def write_trace(tmp_path):
    """Write lines to a .trc file under tmp_path and return its path."""

    def _write(lines, name="run.trc"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
