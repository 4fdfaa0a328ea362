"""WorldSnapshot: read-only view of the island handed to the decision engine."""

from dataclasses import dataclass, field
from typing import Iterable, NamedTuple, Optional

import numpy as np


class Position(NamedTuple):
    x: int
    y: int


class Nearest(NamedTuple):
    target: Position
    distance: int


def manhattan(a: tuple, b: tuple) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def nearest_of(origin: tuple, targets: Iterable[tuple]) -> Optional[Nearest]:
    """Nearest target by Manhattan distance; first one wins on ties."""
    best = None
    for t in targets:
        d = manhattan(origin, t)
        if best is None or d < best.distance:
            best = Nearest(Position(*t), d)
    return best


@dataclass(frozen=True, eq=False)
class WorldSnapshot:
    """
    What the ape can see at one logic step.

    `land` is a (height, width) boolean mask; None means every in-bounds
    cell is land. Trees and rocks are obstacles. Food and predators are
    ordered tuples so nearest-of ties resolve the same way every time.
    """
    agent: Position
    hunger: float
    width: int
    height: int
    predators: tuple = ()
    food: tuple = ()
    trees: frozenset = field(default_factory=frozenset)
    rocks: frozenset = field(default_factory=frozenset)
    land: Optional[np.ndarray] = None

    # ------------------------------------------------------------------ #
    #  Terrain queries                                                     #
    # ------------------------------------------------------------------ #
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_land(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        if self.land is None:
            return True
        return bool(self.land[y, x])

    def is_blocked(self, x: int, y: int) -> bool:
        if not self.is_land(x, y):
            return True
        return (x, y) in self.trees or (x, y) in self.rocks

    # ------------------------------------------------------------------ #
    #  Nearest-of queries                                                  #
    # ------------------------------------------------------------------ #
    def nearest_predator(self) -> Optional[Nearest]:
        return nearest_of(self.agent, self.predators)

    def nearest_food(self) -> Optional[Nearest]:
        return nearest_of(self.agent, self.food)

    def nearest_tree(self) -> Optional[Nearest]:
        # Sets have no stable order; scan sorted so ties are reproducible
        return nearest_of(self.agent, sorted(self.trees))

    def nearest_rock(self) -> Optional[Nearest]:
        return nearest_of(self.agent, sorted(self.rocks))
