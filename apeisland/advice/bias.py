"""Blend active advice rules into a per-action score bias.

The total influence (0.6 by default) is split evenly across the rules
whose condition holds right now. Each active rule then adds its share:

  avoid predators / rocks:  (dist after move - dist now) * share * 0.5 / 0.4
  seek food / trees:        (dist now - dist after move) * share * 0.5 / 0.35
  direction:                +1.2 * share on that move, -0.4 * share on other moves
  stay:                     +1.2 * share on stay

A rule whose target set is empty adds nothing this tick but still counts
toward the split.
"""

from typing import Iterable, Optional

import numpy as np

from ..agent.features import FOOD_NEAR, PREDATOR_NEAR
from ..world.objects import ACTIONS, N_ACTIONS, STAY
from ..world.snapshot import Nearest, WorldSnapshot, manhattan
from .types import ActionKind, AdviceAction, AdviceRule, Condition, ConditionKind


AVOID_PREDATOR_GAIN = 0.5
AVOID_ROCKS_GAIN = 0.4
SEEK_FOOD_GAIN = 0.5
SEEK_TREES_GAIN = 0.35
PREFERRED_GAIN = 1.2
OTHER_MOVE_PENALTY = 0.4


def condition_holds(condition: Condition, snapshot: WorldSnapshot) -> bool:
    if condition.kind is ConditionKind.ALWAYS:
        return True
    if condition.kind is ConditionKind.HUNGER:
        if condition.op == ">":
            return snapshot.hunger > condition.threshold
        return snapshot.hunger < condition.threshold
    if condition.kind is ConditionKind.PREDATOR_NEAR:
        nearest = snapshot.nearest_predator()
        return nearest is not None and nearest.distance <= PREDATOR_NEAR
    if condition.kind is ConditionKind.FOOD_NEAR:
        nearest = snapshot.nearest_food()
        return nearest is not None and nearest.distance <= FOOD_NEAR
    return True


def active_rules(rules: Iterable[AdviceRule], snapshot: WorldSnapshot) -> list[AdviceRule]:
    return [r for r in rules if condition_holds(r.condition, snapshot)]


def _distance_delta(snapshot: WorldSnapshot, nearest: Nearest) -> np.ndarray:
    """Per move: distance to `nearest.target` after the move minus now."""
    x, y = snapshot.agent
    after = np.array([
        manhattan((x + m.dx, y + m.dy), nearest.target) for m in ACTIONS
    ], dtype=float)
    return after - nearest.distance


def action_bias(action: AdviceAction, weight: float,
                snapshot: WorldSnapshot) -> Optional[np.ndarray]:
    """Bias one rule's action contributes, or None if it has no target."""
    kind = action.kind

    if kind is ActionKind.DIRECTION:
        bias = np.zeros(N_ACTIONS)
        for idx, move in enumerate(ACTIONS):
            if move.name == action.direction:
                bias[idx] = weight * PREFERRED_GAIN
            elif idx != STAY:
                bias[idx] = -weight * OTHER_MOVE_PENALTY
        return bias

    if kind is ActionKind.STAY:
        bias = np.zeros(N_ACTIONS)
        bias[STAY] = weight * PREFERRED_GAIN
        return bias

    targets = {
        ActionKind.AVOID_PREDATOR: (snapshot.nearest_predator, AVOID_PREDATOR_GAIN),
        ActionKind.AVOID_ROCKS: (snapshot.nearest_rock, AVOID_ROCKS_GAIN),
        ActionKind.SEEK_FOOD: (snapshot.nearest_food, -SEEK_FOOD_GAIN),
        ActionKind.SEEK_TREES: (snapshot.nearest_tree, -SEEK_TREES_GAIN),
    }
    find_nearest, gain = targets[kind]
    nearest = find_nearest()
    if nearest is None:
        return None
    # Positive gain rewards moving away, negative gain rewards closing in
    return _distance_delta(snapshot, nearest) * weight * gain


class BiasComposer:
    """Evaluates the rule store against a snapshot."""

    def __init__(self, total_weight: float = 0.6):
        self.total_weight = total_weight

    def compose(self, rules: Iterable[AdviceRule],
                snapshot: WorldSnapshot) -> Optional[np.ndarray]:
        """Summed bias over active rules; None when no rule applies."""
        active = active_rules(rules, snapshot)
        if not active:
            return None
        weight = self.total_weight / len(active)
        bias = np.zeros(N_ACTIONS)
        for rule in active:
            partial = action_bias(rule.action, weight, snapshot)
            if partial is not None:
                bias += partial
        return bias
