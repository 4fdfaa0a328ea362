"""Bag-of-words intent classifier for advice the keyword rules miss.

Trained once at start-up on a small hand-written corpus, then read-only.
"""

import logging
import re
from typing import NamedTuple, Optional

import numpy as np

from ..agent.network import DenseReluDense, softmax
from .types import ActionKind, AdviceAction

logger = logging.getLogger(__name__)


# (intent id, example sentences)
INTENT_CORPUS = [
    ("avoidPredator", [
        "avoid predators",
        "stay away from predators",
        "run from predators",
        "flee danger",
        "keep distance from predators",
        "hide from predators",
        "keep safe from predators",
        "stay safe",
        "avoid danger",
        "run away",
        "escape predators",
        "stop predators",
        "stop the predators",
    ]),
    ("seekFood", [
        "find food",
        "get food",
        "eat now",
        "look for food",
        "search for fruit",
        "forage for food",
        "find something to eat",
        "eat something",
        "grab food",
        "get some fruit",
        "look for berries",
        "feed yourself",
    ]),
    ("seekTrees", [
        "stay near trees",
        "go to trees",
        "hide in trees",
        "stick with trees",
        "go to the forest",
        "stay in the forest",
        "stick to the trees",
    ]),
    ("avoidRocks", [
        "avoid rocks",
        "stay away from rocks",
        "do not hit rocks",
        "rocks are dangerous",
        "avoid stones",
        "keep away from boulders",
        "do not touch rocks",
    ]),
    ("stay", [
        "stay",
        "wait",
        "hold position",
        "do not move",
        "pause here",
        "stay still",
        "hold still",
        "freeze",
    ]),
    ("direction_up", ["go north", "head north", "move up", "north", "northward", "go up"]),
    ("direction_down", ["go south", "head south", "move down", "south", "southward", "go down"]),
    ("direction_left", ["go west", "head west", "move left", "west", "go left"]),
    ("direction_right", ["go east", "head east", "move right", "east", "go right"]),
]

_NON_TOKEN = re.compile(r"[^a-z0-9\s%]")


def tokenize(text: str) -> list[str]:
    return _NON_TOKEN.sub(" ", text.lower()).split()


def intent_to_action(intent_id: str | None) -> Optional[AdviceAction]:
    if not intent_id:
        return None
    if intent_id.startswith("direction_"):
        return AdviceAction.go(intent_id.split("_", 1)[1])
    return AdviceAction(ActionKind(intent_id))


class Classification(NamedTuple):
    action: Optional[AdviceAction]
    confidence: float
    intent: Optional[str] = None


class IntentClassifier:
    """
    Binary bag-of-words -> DenseReluDense -> softmax over intents.

    Vocabulary and weights are fixed once `train()` has run.
    """

    def __init__(self, corpus=INTENT_CORPUS, hidden_dim: int = 12,
                 rng: np.random.RandomState | None = None):
        self.intents = [intent for intent, _ in corpus]
        self.dataset: list[tuple[str, int]] = []
        vocab: dict[str, int] = {}
        for label, (_, samples) in enumerate(corpus):
            for sample in samples:
                self.dataset.append((sample, label))
                for token in tokenize(sample):
                    vocab.setdefault(token, len(vocab))
        self.vocab_index = vocab
        self.net = DenseReluDense(len(vocab), hidden_dim, len(self.intents), rng=rng)
        self.trained = False

    @property
    def vocab_size(self) -> int:
        return len(self.vocab_index)

    def vectorize(self, text: str) -> np.ndarray:
        vector = np.zeros(self.vocab_size)
        for token in tokenize(text):
            idx = self.vocab_index.get(token)
            if idx is not None:
                vector[idx] = 1.0
        return vector

    def train(self, epochs: int = 220, lr: float = 0.15) -> float:
        """Per-sample softmax cross-entropy over the corpus. Returns final mean loss."""
        inputs = [(self.vectorize(text), label) for text, label in self.dataset]
        mean_loss = 0.0
        for _ in range(epochs):
            total = 0.0
            for x, label in inputs:
                total += self.net.cross_entropy_update(x, label, lr)
            mean_loss = total / max(len(inputs), 1)
        self.trained = True
        logger.debug(f"Intent classifier trained: vocab={self.vocab_size} "
                     f"intents={len(self.intents)} loss={mean_loss:.4f}")
        return mean_loss

    def classify(self, text: str) -> Classification:
        x = self.vectorize(text)
        if not x.any():
            # No known words: nothing to go on
            return Classification(None, 0.0)
        probs = softmax(self.net.predict(x))
        best = int(np.argmax(probs))
        intent = self.intents[best]
        return Classification(intent_to_action(intent), float(probs[best]), intent)

    def accuracy(self) -> float:
        """Fraction of training sentences classified as their own intent."""
        hits = sum(
            1 for text, label in self.dataset
            if self.classify(text).intent == self.intents[label]
        )
        return hits / max(len(self.dataset), 1)


def build_intent_classifier(hidden_dim: int = 12, epochs: int = 220, lr: float = 0.15,
                            rng: np.random.RandomState | None = None) -> IntentClassifier:
    classifier = IntentClassifier(hidden_dim=hidden_dim, rng=rng)
    classifier.train(epochs=epochs, lr=lr)
    logger.info(f"Advice classifier ready: {len(classifier.intents)} intents, "
                f"train accuracy {classifier.accuracy():.0%}")
    return classifier
