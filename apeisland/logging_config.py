"""Logging configuration for ape island runs.

Creates two output files per run:
- <run_dir>/latest.log: Human-readable narrative + advice transcript
- <run_dir>/latest_metrics.jsonl: Structured metrics every N ticks
"""

import logging
import json
from datetime import datetime
from pathlib import Path


RUNS_DIR = Path("runs")
LOG_NAME = "latest.log"
METRICS_NAME = "latest_metrics.jsonl"

_metrics_file: Path = RUNS_DIR / METRICS_NAME


def setup_logging(run_dir: str | Path = RUNS_DIR) -> logging.Logger:
    """Configure logging for a new run. Clears previous log files."""
    global _metrics_file

    run_dir = Path(run_dir)
    run_dir.mkdir(parents=True, exist_ok=True)
    log_file = run_dir / LOG_NAME
    _metrics_file = run_dir / METRICS_NAME

    # Clear previous log files
    if log_file.exists():
        log_file.unlink()
    if _metrics_file.exists():
        _metrics_file.unlink()

    # Create main logger
    logger = logging.getLogger("apeisland")
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    # File handler for narrative log (overwrites each run)
    file_handler = logging.FileHandler(log_file, mode='w')
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    # Console handler (INFO and above)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_format = logging.Formatter('[%(name)s] %(message)s')
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # Advice transcript logger (child of apeisland)
    logging.getLogger("apeisland.advice").setLevel(logging.DEBUG)

    logger.info(f"=== Ape Island Run Started: {datetime.now().isoformat()} ===")

    return logger


def get_logger(name: str = "apeisland") -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def log_metrics(tick: int, agent_state: dict):
    """
    Write metrics to JSONL file.

    Called every N ticks to capture learning state for analysis.
    """
    metrics = {
        "tick": tick,
        "timestamp": datetime.now().isoformat(),
        # Survival
        "hunger": agent_state.get("hunger", 0),
        "deaths": agent_state.get("deaths", 0),
        "foods_eaten": agent_state.get("foods_eaten", 0),
        "age": agent_state.get("age", 0),
        "pos": agent_state.get("pos", (0, 0)),
        # Learning
        "epsilon": agent_state.get("epsilon", 0.0),
        "policy": agent_state.get("policy", ""),
        "reward_ema": agent_state.get("reward_ema", 0.0),
        "last_action": agent_state.get("last_action"),
        "td_error": agent_state.get("td_error", 0.0),
        "state_label": agent_state.get("state_label", ""),
        # Advice
        "rules": agent_state.get("rules", 0),
        "active_rules": agent_state.get("active_rules", 0),
    }

    _metrics_file.parent.mkdir(parents=True, exist_ok=True)
    with open(_metrics_file, 'a') as f:
        f.write(json.dumps(metrics) + '\n')


def log_death(tick: int, pos: tuple, cause: str, hunger: float, deaths: int):
    """Log death events for post-mortem analysis."""
    logger = logging.getLogger("apeisland")
    logger.warning(
        f"DEATH t={tick} | pos={pos} cause={cause} "
        f"hunger={hunger:.1f} total_deaths={deaths}"
    )
