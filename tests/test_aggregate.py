from datetime import datetime

import pytest

from trc.aggregate import aggregate_operations, parse_channel_details
from trc.detect import classify_command, is_pipetting_command
from trc.parsers import tokenize
from trc.types import ActionType, ChannelDetail


def test_start_complete_pairs_become_operations(example_lines):
    ops = aggregate_operations(tokenize(example_lines))

    assert [op.kind for op in ops] == [ActionType.ASPIRATE, ActionType.DISPENSE]
    assert ops[0].start_time == datetime(2024, 1, 1, 10, 0, 0)
    assert ops[0].end_time == datetime(2024, 1, 1, 10, 0, 2)
    assert ops[0].duration.total_seconds() == 2
    assert ops[0].start_line == 1
    assert ops[1].start_time == datetime(2024, 1, 1, 10, 0, 3)
    assert ops[1].end_time == datetime(2024, 1, 1, 10, 0, 5)
    assert ops[1].start_line == 3
    assert ops[1].channels == (ChannelDetail(1, "LabwareB", "B1", 50.0),)


def test_unterminated_start_is_dropped():
    lines = [
        "2024-01-01 10:00:00> Tool : Aspirate - Start; ",
        "2024-01-01 10:00:01> Tool : Aspirate - Progress; ",
        "2024-01-01 10:00:02> Tool : Dispense - Complete; channel 1: P, A1, 5 uL",
    ]
    assert aggregate_operations(tokenize(lines)) == []


def test_first_matching_completion_wins():
    lines = [
        "2024-01-01 10:00:00> Tool : Aspirate - Start; ",
        "2024-01-01 10:00:01> Tool : Aspirate - Progress; ",
        "2024-01-01 10:00:02> Tool : Aspirate - Complete; channel 1: First, A1, 10 uL",
        "2024-01-01 10:00:04> Tool : Aspirate - Complete; channel 1: Second, A1, 20 uL",
    ]
    ops = aggregate_operations(tokenize(lines))

    assert len(ops) == 1
    assert ops[0].end_time == datetime(2024, 1, 1, 10, 0, 2)
    assert ops[0].channels[0].labware == "First"


def test_completion_must_match_command_text_exactly():
    lines = [
        "2024-01-01 10:00:00> Tool : Aspirate - Start; ",
        "2024-01-01 10:00:01> Tool : Aspirate (Single Step) - Complete; channel 1: P, A1, 5 uL",
    ]
    assert aggregate_operations(tokenize(lines)) == []


def test_initialize_is_never_paired():
    lines = [
        "2024-01-01 10:00:00> System : Initialize - Start; ",
        "2024-01-01 10:00:05> System : Initialize - Complete; ",
    ]
    assert aggregate_operations(tokenize(lines)) == []


def test_scan_jumps_by_line_number_after_a_pair():
    # The header shifts line numbers one past list indices, so the jump
    # after the aspirate pair lands beyond the dispense Start.
    lines = ["Trace header"] + [
        "2024-01-01 10:00:00> Tool : Aspirate - Start; ",
        "2024-01-01 10:00:02> Tool : Aspirate - Complete; channel 1: A, A1, 5 uL",
        "2024-01-01 10:00:03> Tool : Dispense - Start; ",
        "2024-01-01 10:00:05> Tool : Dispense - Complete; channel 1: B, B1, 5 uL",
    ]
    ops = aggregate_operations(tokenize(lines))

    assert [op.kind for op in ops] == [ActionType.ASPIRATE]


def test_parse_channel_details_multiple_channels_with_volume():
    details = "channel 1: Plate_01, A1, 50.0 uL, channel 2: Plate_01, B1, 25.5 uL"
    parsed = parse_channel_details(details, ActionType.ASPIRATE)

    assert parsed == [
        ChannelDetail(1, "Plate_01", "A1", 50.0),
        ChannelDetail(2, "Plate_01", "B1", 25.5),
    ]
    assert str(parsed[0]) == "Ch: 1, Labware: Plate_01, Pos: A1, Vol: 50.0uL"


def test_parse_channel_details_tip_actions_have_no_volume():
    details = "channel 1: TipRack_01, 1, channel 2: TipRack_01, 2"
    parsed = parse_channel_details(details, ActionType.PICKUP_TIP)

    assert parsed == [
        ChannelDetail(1, "TipRack_01", "1", 0.0),
        ChannelDetail(2, "TipRack_01", "2", 0.0),
    ]


def test_volume_actions_require_volume():
    assert parse_channel_details("channel 1: Plate_01, A1", ActionType.DISPENSE) == []


def test_malformed_volume_raises():
    with pytest.raises(ValueError):
        parse_channel_details("channel 1: Plate, A1, 1.2.3 uL", ActionType.ASPIRATE)


@pytest.mark.parametrize(
    "command, expected",
    [
        ("Aspirate", ActionType.ASPIRATE),
        ("1000ul Channel Dispense", ActionType.DISPENSE),
        ("Tip Pick Up", ActionType.PICKUP_TIP),
        ("Tip Eject", ActionType.EJECT_TIP),
        ("Initialize", ActionType.INITIALIZE),
        ("Aspirate then Dispense", ActionType.ASPIRATE),
        ("aspirate", ActionType.UNKNOWN),
        ("Move Arm", ActionType.UNKNOWN),
    ],
)
def test_classify_command(command, expected):
    assert classify_command(command) == expected


def test_is_pipetting_command():
    assert is_pipetting_command("1000ul Channel Tip Pick Up")
    assert not is_pipetting_command("Initialize")
    assert not is_pipetting_command("Move Arm")
