import numpy as np
import pytest

from apeisland.advice.intents import build_intent_classifier
from apeisland.config import ApeConfig
from apeisland.world.snapshot import Position, WorldSnapshot


def make_snapshot(agent=(5, 5), hunger=100.0, predators=(), food=(),
                  trees=(), rocks=(), width=20, height=20, land=None):
    return WorldSnapshot(
        agent=Position(*agent),
        hunger=hunger,
        width=width,
        height=height,
        predators=tuple(predators),
        food=tuple(food),
        trees=frozenset(trees),
        rocks=frozenset(rocks),
        land=land,
    )


@pytest.fixture
def snapshot():
    return make_snapshot


@pytest.fixture(scope="session")
def classifier():
    return build_intent_classifier(rng=np.random.RandomState(0))


@pytest.fixture
def quiet_config():
    """Small island, no metrics file, frequent saves."""
    return ApeConfig(
        GRID_W=24, GRID_H=20, TREE_COUNT=10, ROCK_COUNT=8,
        MAX_FOOD=6, PREDATOR_COUNT=1, SAVE_INTERVAL=10, METRICS_INTERVAL=0,
    )
