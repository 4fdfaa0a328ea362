"""ApeAgent: the learner living on the island."""

import logging

import numpy as np

from ..config import ApeConfig
from ..world.objects import ACTION_NAMES
from .policy import create_policy, decay_epsilon

logger = logging.getLogger(__name__)


class ApeAgent:
    """
    An agent with:
    - position and hunger (reset on death)
    - lifetime counters: foods eaten, deaths, age
    - exploration rate epsilon, decaying toward a floor
    - an owned Q-learning policy (network or table)

    Counters, epsilon and the policy survive deaths and are what gets
    saved between sessions.
    """

    def __init__(self, config: ApeConfig, pos: tuple = (0, 0),
                 rng: np.random.RandomState | None = None,
                 saved: dict | None = None):
        self.config = config
        saved = saved or {}

        # Position and hunger
        self.pos = tuple(pos)
        self.hunger = 100.0

        # Lifetime stats
        self.foods_eaten = int(saved.get("foods_eaten", 0))
        self.deaths = int(saved.get("deaths", 0))
        self.age = int(saved.get("age", 0))

        # Exploration
        self.epsilon = self._restored_epsilon(saved.get("epsilon"))

        # Policy
        self.policy = create_policy(config, rng=rng, saved=saved.get("policy"))

        # Learning diagnostics (status lines and metrics)
        self.reward_ema = 0.0
        self.last_action: int | None = None
        self.last_td_error = 0.0

    def _restored_epsilon(self, value) -> float:
        """Saved epsilon clamped to [EPSILON_MIN, EPSILON_INITIAL]."""
        cfg = self.config
        try:
            epsilon = float(value) if value is not None else cfg.EPSILON_INITIAL
        except (TypeError, ValueError):
            epsilon = cfg.EPSILON_INITIAL
        if not np.isfinite(epsilon):
            logger.warning(f"Ignoring saved epsilon {value!r}, using {cfg.EPSILON_INITIAL}")
            epsilon = cfg.EPSILON_INITIAL
        return float(np.clip(epsilon, cfg.EPSILON_MIN, cfg.EPSILON_INITIAL))

    def decay_epsilon(self):
        self.epsilon = decay_epsilon(
            self.epsilon, self.config.EPSILON_DECAY, self.config.EPSILON_MIN)

    def record_reward(self, reward: float, ema_alpha: float = 0.02):
        self.reward_ema = (1 - ema_alpha) * self.reward_ema + ema_alpha * reward

    def to_dict(self) -> dict:
        """Fields that persist across sessions."""
        return {
            "policy": self.policy.to_dict(),
            "foods_eaten": self.foods_eaten,
            "deaths": self.deaths,
            "age": self.age,
            "epsilon": self.epsilon,
        }

    def status(self) -> dict:
        return {
            "pos": list(self.pos),
            "hunger": self.hunger,
            "foods_eaten": self.foods_eaten,
            "deaths": self.deaths,
            "age": self.age,
            "epsilon": self.epsilon,
            "policy": self.policy.kind,
            "reward_ema": self.reward_ema,
            "last_action": None if self.last_action is None else ACTION_NAMES[self.last_action],
            "td_error": self.last_td_error,
        }
