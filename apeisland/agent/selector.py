"""Epsilon-greedy action selection over learned values plus advice bias."""

from typing import Optional, Sequence

import numpy as np

from ..world.objects import ACTIONS, STAY
from ..world.snapshot import WorldSnapshot


def validity_mask(snapshot: WorldSnapshot) -> np.ndarray:
    """Which moves land on a free cell. Staying put is always allowed."""
    x, y = snapshot.agent
    mask = np.array([not snapshot.is_blocked(x + m.dx, y + m.dy) for m in ACTIONS])
    mask[STAY] = True
    return mask


def choose_action(values: Sequence[float], bias: Optional[Sequence[float]],
                  valid: Sequence[bool], epsilon: float,
                  rng: np.random.RandomState) -> int:
    """
    Pick one action index.

    With probability epsilon: uniform over valid actions.
    Otherwise: highest value + bias among valid actions, first one on ties.
    """
    scores = np.asarray(values, dtype=float)
    if bias is not None:
        scores = scores + np.asarray(bias, dtype=float)

    options = np.flatnonzero(np.asarray(valid, dtype=bool))
    if len(options) == 0:
        return STAY

    if rng.random() < epsilon:
        return int(options[rng.randint(len(options))])

    # argmax returns the first maximum, which is the tie-break we want
    return int(options[np.argmax(scores[options])])
