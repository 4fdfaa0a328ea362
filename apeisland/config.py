from dataclasses import dataclass, fields
import os

import yaml


@dataclass
class ApeConfig:
    # Island layout
    GRID_W: int = 50
    GRID_H: int = 40
    TREE_COUNT: int = 80
    ROCK_COUNT: int = 55
    MAX_FOOD: int = 12
    PREDATOR_COUNT: int = 3

    # Survival dynamics
    HUNGER_DECAY: float = 0.8        # Per-step hunger drain
    FOOD_VALUE: float = 45.0         # Hunger restored per food item
    FOOD_SPAWN_INTERVAL: int = 6     # Steps between food spawn attempts
    FOOD_SPAWN_CHANCE: float = 0.45
    PREDATOR_CHASE_RADIUS: int = 8
    PREDATOR_CHASE_PROB: float = 0.8
    PREDATOR_WANDER_PROB: float = 0.3

    # Reward shaping
    REWARD_STEP: float = -0.02
    REWARD_FOOD: float = 1.2
    REWARD_PREDATOR_DEATH: float = -2.0
    REWARD_STARVATION: float = -1.5

    # Policy (Q-learning)
    POLICY_KIND: str = "network"     # "network" or "tabular"
    NET_HIDDEN: int = 16
    NET_LR: float = 0.05
    NET_INIT_SCALE: float = 0.4
    TABLE_ALPHA: float = 0.1
    GAMMA: float = 0.9
    TERMINAL_BOOTSTRAP: str = "zero"  # "zero" or "respawn"

    # Exploration
    EPSILON_INITIAL: float = 0.3
    EPSILON_DECAY: float = 0.999
    EPSILON_MIN: float = 0.05

    # Advice
    ADVICE_WEIGHT: float = 0.6
    INTENT_HIDDEN: int = 12
    INTENT_EPOCHS: int = 220
    INTENT_LR: float = 0.15
    INTENT_CONFIDENCE: float = 0.6

    # Run loop
    LOGIC_RATE: int = 10             # Logic steps per second
    SAVE_INTERVAL: int = 30          # Steps between autosaves
    METRICS_INTERVAL: int = 100      # Steps between status lines
    SAVE_PATH: str = "ape_save.json"
    SEED: int | None = None


# Safe load of config.yaml, ignoring unknown keys
def load_config(path: str = "apeisland.yaml") -> ApeConfig:
    """Load configuration from YAML, filter to ApeConfig fields."""
    cfg = ApeConfig()
    if path and os.path.exists(path):
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        valid = {f.name for f in fields(ApeConfig)}
        filtered = {k: v for k, v in raw.items() if k in valid}
        cfg = ApeConfig(**filtered)
    return cfg
