"""Learned movement policy for the ape.

Two interchangeable Q-learners behind the same contract:

  predict(features) -> action values (one per move)
  update(features, action_idx, reward, next_features) -> TD error
      next_features=None marks a terminal transition (bootstrap = 0)

NetworkPolicy:  5 features -> 16 hidden (relu) -> 5 action values,
                semi-gradient TD on the taken action's row.
TabularPolicy:  8 x 5 Q-table, one-step Q-learning.
"""

import logging

import numpy as np

from ..config import ApeConfig
from ..world.objects import N_ACTIONS
from .features import N_FEATURES, N_STATES
from .network import DenseReluDense

logger = logging.getLogger(__name__)


def decay_epsilon(epsilon: float, decay: float = 0.999, floor: float = 0.05) -> float:
    """Multiplicative exploration decay with a hard floor."""
    return max(floor, epsilon * decay)


class NetworkPolicy:
    """Q-network policy (numpy-only)."""

    kind = "network"

    def __init__(self, input_dim=N_FEATURES, hidden_dim=16, n_actions=N_ACTIONS,
                 lr=0.05, gamma=0.9, rng=None, init_scale=0.4, net=None):
        self.lr = lr
        self.gamma = gamma
        self.net = net or DenseReluDense(
            input_dim, hidden_dim, n_actions, rng=rng, init_scale=init_scale)
        self.total_updates = 0

    @property
    def shape(self) -> tuple:
        return self.net.shape

    def predict(self, features) -> np.ndarray:
        return self.net.predict(features)

    def update(self, features, action_idx: int, reward: float, next_features=None) -> float:
        future = 0.0 if next_features is None else float(np.max(self.predict(next_features)))
        target = reward + self.gamma * future
        self.total_updates += 1
        return self.net.td_update(features, action_idx, target, self.lr)

    def to_dict(self) -> dict:
        return {"kind": self.kind, **self.net.to_dict()}

    @classmethod
    def from_dict(cls, data: dict | None, input_dim=N_FEATURES, hidden_dim=16,
                  n_actions=N_ACTIONS, lr=0.05, gamma=0.9, rng=None,
                  init_scale=0.4) -> "NetworkPolicy":
        if isinstance(data, dict) and data.get("kind", cls.kind) != cls.kind:
            logger.warning(f"Saved policy is {data.get('kind')!r}, starting a fresh network")
            data = None
        net = DenseReluDense.from_dict(
            data, input_dim, hidden_dim, n_actions, rng=rng, init_scale=init_scale)
        return cls(lr=lr, gamma=gamma, net=net)


class TabularPolicy:
    """Q-table over the 8 flag-combination states."""

    kind = "tabular"

    def __init__(self, n_states=N_STATES, n_actions=N_ACTIONS, alpha=0.1, gamma=0.9):
        self.n_states = n_states
        self.n_actions = n_actions
        self.alpha = alpha
        self.gamma = gamma
        self.Q = np.zeros((n_states, n_actions))
        self.total_updates = 0

    @property
    def shape(self) -> tuple:
        return self.Q.shape

    def predict(self, state: int) -> np.ndarray:
        return self.Q[state].copy()

    def update(self, state: int, action_idx: int, reward: float, next_state=None) -> float:
        future = 0.0 if next_state is None else float(np.max(self.Q[next_state]))
        error = reward + self.gamma * future - self.Q[state, action_idx]
        self.Q[state, action_idx] += self.alpha * error
        self.total_updates += 1
        return float(error)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "Q": self.Q.tolist()}

    @classmethod
    def from_dict(cls, data: dict | None, n_states=N_STATES, n_actions=N_ACTIONS,
                  alpha=0.1, gamma=0.9) -> "TabularPolicy":
        policy = cls(n_states, n_actions, alpha=alpha, gamma=gamma)
        if not isinstance(data, dict) or "Q" not in data:
            return policy
        if data.get("kind", cls.kind) != cls.kind:
            logger.warning(f"Saved policy is {data.get('kind')!r}, starting a fresh table")
            return policy
        try:
            Q = np.array(data["Q"], dtype=float)
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable Q-table: {e}")
            return policy
        if Q.shape != (n_states, n_actions):
            logger.warning(f"Discarding Q-table with shape {Q.shape}, "
                           f"expected {(n_states, n_actions)}")
            return policy
        policy.Q = Q
        return policy


def create_policy(config: ApeConfig, rng=None, saved: dict | None = None):
    """Build the configured policy, restoring `saved` weights when they fit."""
    if config.POLICY_KIND == "tabular":
        return TabularPolicy.from_dict(
            saved, alpha=config.TABLE_ALPHA, gamma=config.GAMMA)
    if config.POLICY_KIND != "network":
        logger.warning(f"Unknown policy kind {config.POLICY_KIND!r}, using network")
    return NetworkPolicy.from_dict(
        saved, hidden_dim=config.NET_HIDDEN, lr=config.NET_LR,
        gamma=config.GAMMA, rng=rng, init_scale=config.NET_INIT_SCALE)
