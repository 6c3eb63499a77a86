from typing import List, Tuple

from .types import ActionType


# Ordered classification rules.
# Order matters: the first substring found in the command wins.
COMMAND_RULES: List[Tuple[str, ActionType]] = [
    ("Aspirate", ActionType.ASPIRATE),
    ("Dispense", ActionType.DISPENSE),
    ("Tip Pick Up", ActionType.PICKUP_TIP),
    ("Tip Eject", ActionType.EJECT_TIP),
    ("Initialize", ActionType.INITIALIZE),
]

# Commands whose Start/Complete pairs become operations.
# Initialize is classified but never paired.
PIPETTING_COMMANDS: Tuple[str, ...] = (
    "Aspirate",
    "Dispense",
    "Tip Pick Up",
    "Tip Eject",
)

VOLUME_ACTIONS = frozenset({ActionType.ASPIRATE, ActionType.DISPENSE})


def is_pipetting_command(command: str) -> bool:
    return any(name in command for name in PIPETTING_COMMANDS)


def classify_command(command: str) -> ActionType:
    """
    Map a command text to an ActionType.

    This function must be:
    - case-sensitive (device writes fixed command names)
    - order-dependent
    - total (UNKNOWN is fine)
    """
    for name, action in COMMAND_RULES:
        if name in command:
            return action
    return ActionType.UNKNOWN
