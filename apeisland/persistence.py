"""Save/load persistence for the ape's learned policy and lifetime stats."""

import json
import logging
import math
from pathlib import Path

from .agent.core import ApeAgent

logger = logging.getLogger(__name__)

SAVE_VERSION = 2

_COUNTERS = ("foods_eaten", "deaths", "age")


def save_state(agent: ApeAgent, filepath: str | Path) -> bool:
    """Write the agent's persistent fields as JSON. Returns False on failure."""
    state = {"version": SAVE_VERSION, **agent.to_dict()}
    try:
        Path(filepath).write_text(json.dumps(state, indent=2))
    except (OSError, TypeError, ValueError) as e:
        logger.warning(f"Failed to save state to {filepath}: {e}")
        return False
    logger.debug(f"Saved state to {filepath}")
    return True


def load_state(filepath: str | Path) -> dict | None:
    """
    Read a save record, or None if there is nothing usable.

    A missing file, bad JSON, a version mismatch or malformed stats all
    mean "start fresh". The policy weights are validated later, when the
    policy is rebuilt from them.
    """
    path = Path(filepath)
    if not path.exists():
        logger.info(f"No save at {path}, starting fresh")
        return None

    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load state from {path}: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Ignoring save at {path}: not a JSON object")
        return None
    if data.get("version") != SAVE_VERSION:
        logger.warning(f"Ignoring save at {path}: version {data.get('version')!r}, "
                       f"expected {SAVE_VERSION}")
        return None

    try:
        restored = {key: int(data.get(key, 0)) for key in _COUNTERS}
        epsilon = float(data["epsilon"]) if "epsilon" in data else None
    except (TypeError, ValueError, KeyError, OverflowError) as e:
        logger.warning(f"Ignoring save at {path}: bad stats ({e})")
        return None
    if any(restored[key] < 0 for key in _COUNTERS):
        logger.warning(f"Ignoring save at {path}: negative counters")
        return None
    if epsilon is not None:
        if math.isfinite(epsilon):
            restored["epsilon"] = epsilon
        else:
            logger.warning(f"Dropping non-finite epsilon {epsilon!r} from {path}")

    restored["policy"] = data.get("policy") if isinstance(data.get("policy"), dict) else None
    logger.info(
        f"Loaded save from {path}: foods={restored['foods_eaten']} "
        f"deaths={restored['deaths']} age={restored['age']}"
    )
    return restored
