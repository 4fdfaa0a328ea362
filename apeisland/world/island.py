"""IslandWorld: elliptical island with trees, rocks, fruit and predators.

This is the environment the decision engine is plugged into. The engine
only sees it through `snapshot()` and the `Outcome` returned by
`resolve()`.
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import numpy as np

from ..config import ApeConfig
from .objects import ACTIONS, STAY, FoodItem, Predator
from .snapshot import Position, WorldSnapshot, manhattan

if TYPE_CHECKING:
    from ..agent.core import ApeAgent

logger = logging.getLogger(__name__)


@dataclass
class Outcome:
    """What happened after the ape acted for one step."""
    reward: float
    ate: bool = False
    died: bool = False
    cause: str = ""
    death_pos: Optional[tuple] = None


class IslandWorld:
    """
    A bounded grid with an elliptical island in open water.

    Trees and rocks are solid. Fruit spawns on free land and is eaten by
    walking onto it. Predators chase the ape when close, otherwise drift.
    """

    def __init__(self, config: ApeConfig | None = None, seed: int | None = None):
        self.config = config or ApeConfig()
        self.width = self.config.GRID_W
        self.height = self.config.GRID_H
        self.rng = np.random.RandomState(seed)
        self.tick_count = 0
        self.reset()

    # ------------------------------------------------------------------ #
    #  Generation                                                          #
    # ------------------------------------------------------------------ #
    def reset(self):
        """Generate a fresh island: terrain, obstacles, fruit, predators."""
        self.land = self._create_land_mask()
        self.trees: set[tuple] = set()
        self.rocks: set[tuple] = set()
        self._place_features(self.config.TREE_COUNT, self.trees)
        self._place_features(self.config.ROCK_COUNT, self.rocks)
        self.food: list[FoodItem] = []
        self.seed_food()
        self.spawn_predators()
        self.tick_count = 0
        logger.info(
            f"New island {self.width}x{self.height}: "
            f"{len(self.trees)} trees, {len(self.rocks)} rocks, "
            f"{len(self.food)} food, {len(self.predators)} predators"
        )

    def _create_land_mask(self) -> np.ndarray:
        cx = self.width / 2 - 0.5
        cy = self.height / 2 - 0.5
        rx = self.width / 2 - 2
        ry = self.height / 2 - 2
        ys, xs = np.mgrid[0:self.height, 0:self.width]
        nx = (xs - cx) / rx
        ny = (ys - cy) / ry
        return (nx * nx + ny * ny) <= 1.0

    def is_land(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and bool(self.land[y, x])

    def is_blocked(self, x: int, y: int) -> bool:
        if not self.is_land(x, y):
            return True
        return (x, y) in self.trees or (x, y) in self.rocks

    def random_land_cell(self) -> Position:
        """Pick a random land cell that is not a tree or rock."""
        while True:
            x = self.rng.randint(self.width)
            y = self.rng.randint(self.height)
            if not self.is_blocked(x, y):
                return Position(x, y)

    def _place_features(self, count: int, target: set):
        placed = 0
        while placed < count:
            cell = tuple(self.random_land_cell())
            if cell not in target:
                target.add(cell)
                placed += 1

    def spawn_food(self):
        if len(self.food) >= self.config.MAX_FOOD:
            return
        x, y = self.random_land_cell()
        self.food.append(FoodItem(x, y))

    def seed_food(self):
        self.food = []
        for _ in range(self.config.MAX_FOOD):
            self.spawn_food()

    def spawn_predators(self):
        self.predators: list[Predator] = []
        for _ in range(self.config.PREDATOR_COUNT):
            x, y = self.random_land_cell()
            direction = ACTIONS[self.rng.randint(len(ACTIONS))]
            self.predators.append(Predator(x, y, direction))

    # ------------------------------------------------------------------ #
    #  Snapshot                                                            #
    # ------------------------------------------------------------------ #
    def snapshot(self, agent: "ApeAgent") -> WorldSnapshot:
        return WorldSnapshot(
            agent=Position(*agent.pos),
            hunger=agent.hunger,
            width=self.width,
            height=self.height,
            predators=tuple(p.position for p in self.predators),
            food=tuple((f.x, f.y) for f in self.food),
            trees=frozenset(self.trees),
            rocks=frozenset(self.rocks),
            land=self.land,
        )

    # ------------------------------------------------------------------ #
    #  Step                                                                #
    # ------------------------------------------------------------------ #
    def tick(self, agent: "ApeAgent"):
        """Advance the clock and drain hunger before the ape decides."""
        self.tick_count += 1
        agent.hunger = float(np.clip(agent.hunger - self.config.HUNGER_DECAY, 0, 100))
        agent.age += 1

    def resolve(self, agent: "ApeAgent", action_idx: int) -> Outcome:
        """Apply the ape's move, then let the island react."""
        cfg = self.config
        self._apply_action(agent, action_idx)
        ate = self._eat_food(agent)
        self._update_predators(agent)

        reward = cfg.REWARD_STEP
        if ate:
            reward += cfg.REWARD_FOOD

        outcome = Outcome(reward=reward, ate=ate)
        caught = any(p.position == tuple(agent.pos) for p in self.predators)
        if caught:
            outcome.reward += cfg.REWARD_PREDATOR_DEATH
            self._kill(agent, outcome, "a predator")
        elif agent.hunger <= 0:
            outcome.reward += cfg.REWARD_STARVATION
            self._kill(agent, outcome, "starvation")

        return outcome

    def maybe_spawn_food(self, outcome: Outcome) -> bool:
        """Periodic fruit drop; runs after the learner has seen the next state."""
        cfg = self.config
        if outcome.died or self.tick_count % cfg.FOOD_SPAWN_INTERVAL != 0:
            return False
        if len(self.food) >= cfg.MAX_FOOD or self.rng.random() >= cfg.FOOD_SPAWN_CHANCE:
            return False
        self.spawn_food()
        return True

    def _apply_action(self, agent: "ApeAgent", action_idx: int):
        move = ACTIONS[action_idx]
        nx, ny = agent.pos[0] + move.dx, agent.pos[1] + move.dy
        if not self.is_blocked(nx, ny):
            agent.pos = (nx, ny)

    def _eat_food(self, agent: "ApeAgent") -> bool:
        before = len(self.food)
        self.food = [f for f in self.food if (f.x, f.y) != tuple(agent.pos)]
        ate = len(self.food) < before
        if ate:
            agent.foods_eaten += 1
            agent.hunger = float(np.clip(agent.hunger + self.config.FOOD_VALUE, 0, 100))
        return ate

    def _update_predators(self, agent: "ApeAgent"):
        cfg = self.config
        moves = [m for i, m in enumerate(ACTIONS) if i != STAY]
        for predator in self.predators:
            direction = predator.direction
            target_distance = manhattan(predator.position, agent.pos)

            if (target_distance <= cfg.PREDATOR_CHASE_RADIUS
                    and self.rng.random() < cfg.PREDATOR_CHASE_PROB):
                # Greedy chase: step that closes the most distance
                direction = min(
                    moves,
                    key=lambda m: manhattan(
                        (predator.x + m.dx, predator.y + m.dy), agent.pos),
                )
            elif self.rng.random() < cfg.PREDATOR_WANDER_PROB:
                direction = ACTIONS[self.rng.randint(len(ACTIONS))]

            nx, ny = predator.x + direction.dx, predator.y + direction.dy
            if not self.is_blocked(nx, ny):
                predator.x, predator.y = nx, ny
                predator.direction = direction

    def _kill(self, agent: "ApeAgent", outcome: Outcome, cause: str):
        outcome.died = True
        outcome.cause = cause
        outcome.death_pos = tuple(agent.pos)
        self.respawn(agent)

    def respawn(self, agent: "ApeAgent"):
        """Drop the ape on a fresh land cell; stats and policy carry over."""
        agent.pos = tuple(self.random_land_cell())
        agent.hunger = 100.0
        agent.deaths += 1
