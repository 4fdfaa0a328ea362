"""Dense -> ReLU -> dense network (numpy-only).

One component, two training call sites:
  - td_update: single-sample semi-gradient TD step on one output row
    (the ape's movement policy)
  - cross_entropy_update: softmax cross-entropy step on all outputs
    (the advice intent classifier)
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def softmax(logits: np.ndarray) -> np.ndarray:
    exp_l = np.exp(logits - np.max(logits))
    total = exp_l.sum()
    return exp_l / (total if total > 0 else 1.0)


class DenseReluDense:
    """
    Two-layer network with a single hidden ReLU layer.

    Shapes: W1 (hidden, input), b1 (hidden,), W2 (output, hidden),
    b2 (output,). Forward pass: h = relu(W1 x + b1), q = W2 h + b2.
    """

    def __init__(self, input_dim: int, hidden_dim: int, output_dim: int,
                 rng: np.random.RandomState | None = None,
                 init_scale: float = 0.4):
        self.input_dim = input_dim
        self.hidden_dim = hidden_dim
        self.output_dim = output_dim
        rng = rng if rng is not None else np.random.RandomState()

        # Small uniform init, zero biases
        s = init_scale
        self.W1 = rng.uniform(-s, s, size=(hidden_dim, input_dim))
        self.b1 = np.zeros(hidden_dim)
        self.W2 = rng.uniform(-s, s, size=(output_dim, hidden_dim))
        self.b2 = np.zeros(output_dim)

    @property
    def shape(self) -> tuple:
        return (self.input_dim, self.hidden_dim, self.output_dim)

    # ------------------------------------------------------------------ #
    #  Forward pass                                                       #
    # ------------------------------------------------------------------ #
    def forward(self, x):
        """Return (outputs, hidden activations, hidden pre-activations)."""
        x = np.asarray(x, dtype=float)
        z1 = self.W1 @ x + self.b1
        h = np.maximum(z1, 0.0)
        q = self.W2 @ h + self.b2
        return q, h, z1

    def predict(self, x) -> np.ndarray:
        return self.forward(x)[0]

    # ------------------------------------------------------------------ #
    #  Training                                                           #
    # ------------------------------------------------------------------ #
    def td_update(self, x, action_idx: int, target: float, lr: float) -> float:
        """Move q[action_idx] toward `target`. Returns the TD error."""
        x = np.asarray(x, dtype=float)
        q, h, z1 = self.forward(x)
        error = target - q[action_idx]

        self.W2[action_idx] += lr * error * h
        self.b2[action_idx] += lr * error

        # Only hidden units that fired carry gradient; uses the updated row
        delta = error * self.W2[action_idx] * (z1 > 0)
        self.W1 += lr * np.outer(delta, x)
        self.b1 += lr * delta
        return float(error)

    def cross_entropy_update(self, x, label: int, lr: float) -> float:
        """One softmax cross-entropy step toward `label`. Returns the loss."""
        x = np.asarray(x, dtype=float)
        q, h, z1 = self.forward(x)
        probs = softmax(q)
        one_hot = np.zeros(self.output_dim)
        one_hot[label] = 1.0
        deltas = probs - one_hot

        self.W2 -= lr * np.outer(deltas, h)
        self.b2 -= lr * deltas

        delta_hidden = (self.W2.T @ deltas) * (z1 > 0)
        self.W1 -= lr * np.outer(delta_hidden, x)
        self.b1 -= lr * delta_hidden
        return float(-np.log(probs[label] + 1e-12))

    # ------------------------------------------------------------------ #
    #  Persistence                                                        #
    # ------------------------------------------------------------------ #
    def to_dict(self) -> dict:
        return {
            "W1": self.W1.tolist(),
            "b1": self.b1.tolist(),
            "W2": self.W2.tolist(),
            "b2": self.b2.tolist(),
        }

    @classmethod
    def from_dict(cls, data: dict | None, input_dim: int, hidden_dim: int,
                  output_dim: int, rng: np.random.RandomState | None = None,
                  init_scale: float = 0.4) -> "DenseReluDense":
        """Restore saved weights, or start fresh if they don't fit.

        Never partially loads: any missing or mis-shaped weight matrix
        discards the whole record.
        """
        net = cls(input_dim, hidden_dim, output_dim, rng=rng, init_scale=init_scale)
        if not isinstance(data, dict) or "W1" not in data or "W2" not in data:
            return net
        try:
            W1 = np.array(data["W1"], dtype=float)
            W2 = np.array(data["W2"], dtype=float)
            b1 = (np.array(data["b1"], dtype=float) if data.get("b1") is not None
                  else np.zeros(hidden_dim))
            b2 = (np.array(data["b2"], dtype=float) if data.get("b2") is not None
                  else np.zeros(output_dim))
        except (TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable network weights: {e}")
            return net

        expected = {
            "W1": (hidden_dim, input_dim), "b1": (hidden_dim,),
            "W2": (output_dim, hidden_dim), "b2": (output_dim,),
        }
        got = {"W1": W1.shape, "b1": b1.shape, "W2": W2.shape, "b2": b2.shape}
        if got != expected:
            logger.warning(f"Discarding network with shape {got}, expected {expected}")
            return net

        net.W1, net.b1, net.W2, net.b2 = W1, b1, W2, b2
        return net
