"""Things that exist on the island, plus the ape's move set."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Move:
    name: str
    dx: int
    dy: int


# Fixed action ordering; ties in action selection go to the earlier entry.
ACTIONS = (
    Move("stay", 0, 0),
    Move("up", 0, -1),
    Move("down", 0, 1),
    Move("left", -1, 0),
    Move("right", 1, 0),
)
ACTION_NAMES = [a.name for a in ACTIONS]
N_ACTIONS = len(ACTIONS)
STAY = 0


def action_index(name: str) -> int:
    return ACTION_NAMES.index(name)


@dataclass
class FoodItem:
    """A piece of fruit lying on a land cell."""
    x: int
    y: int


@dataclass
class Predator:
    """A wandering hunter. Keeps heading in `direction` unless it turns."""
    x: int
    y: int
    direction: Move = ACTIONS[STAY]

    @property
    def position(self) -> tuple:
        return (self.x, self.y)
