"""Advice vocabulary: what a rule can ask for, and when."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ActionKind(Enum):
    AVOID_PREDATOR = "avoidPredator"
    SEEK_FOOD = "seekFood"
    SEEK_TREES = "seekTrees"
    AVOID_ROCKS = "avoidRocks"
    STAY = "stay"
    DIRECTION = "direction"


class ConditionKind(Enum):
    ALWAYS = "always"
    HUNGER = "hunger"
    PREDATOR_NEAR = "predatorNear"
    FOOD_NEAR = "foodNear"


class CommandKind(Enum):
    CLEAR = "clear"
    LIST = "list"
    REMOVE_LAST = "removeLast"


_DIRECTION_WORDS = {"up": "north", "down": "south", "left": "west", "right": "east"}

_ACTION_TEXT = {
    ActionKind.AVOID_PREDATOR: "avoid predators",
    ActionKind.AVOID_ROCKS: "avoid rocks",
    ActionKind.SEEK_FOOD: "seek food",
    ActionKind.SEEK_TREES: "stay near trees",
    ActionKind.STAY: "stay put",
}


@dataclass(frozen=True)
class AdviceAction:
    """What to do. `direction` is set only for ActionKind.DIRECTION."""
    kind: ActionKind
    direction: Optional[str] = None

    def __post_init__(self):
        if (self.kind is ActionKind.DIRECTION) != (self.direction in _DIRECTION_WORDS):
            raise ValueError(f"Bad direction {self.direction!r} for {self.kind}")

    @classmethod
    def go(cls, direction: str) -> "AdviceAction":
        return cls(ActionKind.DIRECTION, direction)

    def describe(self) -> str:
        if self.kind is ActionKind.DIRECTION:
            return f"go {_DIRECTION_WORDS[self.direction]}"
        return _ACTION_TEXT[self.kind]


@dataclass(frozen=True)
class Condition:
    """When a rule applies. `op`/`threshold` are set only for hunger."""
    kind: ConditionKind = ConditionKind.ALWAYS
    op: Optional[str] = None
    threshold: Optional[float] = None

    @classmethod
    def hunger(cls, op: str, threshold: float) -> "Condition":
        op = ">" if op == ">" else "<"
        return cls(ConditionKind.HUNGER, op, min(max(threshold, 0), 100))

    def describe(self) -> str:
        if self.kind is ConditionKind.HUNGER:
            return f"hunger {self.op} {self.threshold:g}%"
        if self.kind is ConditionKind.PREDATOR_NEAR:
            return "predators nearby"
        if self.kind is ConditionKind.FOOD_NEAR:
            return "food nearby"
        return ""


ALWAYS = Condition()


def format_rule_text(action: AdviceAction, condition: Condition) -> str:
    condition_text = condition.describe()
    if not condition_text:
        return action.describe()
    return f"{action.describe()} when {condition_text}"


@dataclass(frozen=True)
class AdviceRule:
    """A (condition, action) pair from the operator. Immutable once made."""
    id: int
    action: AdviceAction
    condition: Condition
    text: str


@dataclass(frozen=True)
class ControlCommand:
    kind: CommandKind


@dataclass(frozen=True)
class Unrecognized:
    utterance: str
