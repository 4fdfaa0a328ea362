"""Feature encoding: WorldSnapshot -> policy input.

Network variant: 5 normalized scalars in [0, 1]
  [0] hunger fraction
  [1] predator distance / 10 (saturates at 1)
  [2] food distance / 10 (saturates at 1)
  [3] predator within 3 tiles
  [4] food within 4 tiles

Tabular variant: one of 8 states from three flags
  bit0 predator near, bit1 hungry, bit2 food near
"""

import numpy as np

from ..world.snapshot import WorldSnapshot


PREDATOR_NEAR = 3
FOOD_NEAR = 4
HUNGRY_AT = 40          # hunger at or below this counts as hungry
DISTANCE_SENTINEL = 10  # distance used when nothing is on the island

N_FEATURES = 5
N_STATES = 8


def _distances(snapshot: WorldSnapshot) -> tuple:
    """Nearest predator/food distances, or None when the list is empty."""
    predator = snapshot.nearest_predator()
    food = snapshot.nearest_food()
    return (
        predator.distance if predator else None,
        food.distance if food else None,
    )


def encode_features(snapshot: WorldSnapshot) -> np.ndarray:
    """Encode a snapshot into the fixed-size network input."""
    predator_dist, food_dist = _distances(snapshot)
    predator_near = predator_dist is not None and predator_dist <= PREDATOR_NEAR
    food_near = food_dist is not None and food_dist <= FOOD_NEAR
    if predator_dist is None:
        predator_dist = DISTANCE_SENTINEL
    if food_dist is None:
        food_dist = DISTANCE_SENTINEL

    features = np.zeros(N_FEATURES)
    features[0] = np.clip(snapshot.hunger / 100.0, 0.0, 1.0)
    features[1] = np.clip(predator_dist / DISTANCE_SENTINEL, 0.0, 1.0)
    features[2] = np.clip(food_dist / DISTANCE_SENTINEL, 0.0, 1.0)
    features[3] = float(predator_near)
    features[4] = float(food_near)
    return features


def encode_state_index(snapshot: WorldSnapshot) -> int:
    """Encode a snapshot into a Q-table row index in [0, 8)."""
    predator_dist, food_dist = _distances(snapshot)
    idx = 0
    if predator_dist is not None and predator_dist <= PREDATOR_NEAR:
        idx += 1
    if snapshot.hunger <= HUNGRY_AT:
        idx += 2
    if food_dist is not None and food_dist <= FOOD_NEAR:
        idx += 4
    return idx


def state_label(snapshot: WorldSnapshot) -> str:
    """Short human-readable summary of what the ape is facing."""
    idx = encode_state_index(snapshot)
    tags = []
    if idx & 1:
        tags.append("predator near")
    if idx & 2:
        tags.append("hungry")
    if idx & 4:
        tags.append("food near")
    return ", ".join(tags) if tags else "calm"


class FeatureEncoder:
    """Picks the encoding that matches the policy variant."""

    def __init__(self, tabular: bool = False):
        self.tabular = tabular

    def encode(self, snapshot: WorldSnapshot):
        if self.tabular:
            return encode_state_index(snapshot)
        return encode_features(snapshot)
