"""SimulationController: one decision + learning cycle per step.

Per step:
  tick world -> snapshot -> encode -> predict -> advice bias -> mask
  -> choose -> resolve -> reward -> learn -> spawn food -> decay epsilon

Advice typed while the loop runs is queued and applied at the next step
boundary, so rules never change halfway through a decision.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .advice.bias import BiasComposer, active_rules
from .advice.chat import AdviceReply, apply_advice
from .advice.intents import IntentClassifier, build_intent_classifier
from .advice.parser import AdviceParser
from .advice.store import AdviceRuleStore
from .agent.core import ApeAgent
from .agent.features import FeatureEncoder, state_label
from .agent.selector import choose_action, validity_mask
from .config import ApeConfig
from .logging_config import log_death, log_metrics
from .persistence import load_state, save_state
from .world.island import IslandWorld
from .world.objects import ACTION_NAMES

logger = logging.getLogger(__name__)
advice_log = logging.getLogger("apeisland.advice")


@dataclass
class SimulationState:
    world: IslandWorld
    agent: ApeAgent
    store: AdviceRuleStore
    tick: int = 0


class SimulationController:
    """Owns the island, the ape, the advice rules and the save file."""

    def __init__(self, config: ApeConfig | None = None, seed: int | None = None,
                 save_path: str | Path | None = None, autosave: bool = True,
                 classifier: IntentClassifier | None = None):
        self.config = config or ApeConfig()
        cfg = self.config
        if seed is None:
            seed = cfg.SEED
        self.seed = seed
        self.rng = np.random.RandomState(seed)
        self.save_path = Path(save_path) if save_path else None
        self.autosave = autosave and self.save_path is not None

        saved = load_state(self.save_path) if self.save_path else None
        world = IslandWorld(cfg, seed=seed)
        agent = ApeAgent(cfg, pos=world.random_land_cell(), rng=self.rng, saved=saved)
        self.state = SimulationState(world=world, agent=agent, store=AdviceRuleStore())

        self.encoder = FeatureEncoder(tabular=agent.policy.kind == "tabular")
        self.composer = BiasComposer(cfg.ADVICE_WEIGHT)
        if classifier is None:
            classifier = build_intent_classifier(
                hidden_dim=cfg.INTENT_HIDDEN, epochs=cfg.INTENT_EPOCHS,
                lr=cfg.INTENT_LR, rng=np.random.RandomState(0))
        self.parser = AdviceParser(classifier, confidence_threshold=cfg.INTENT_CONFIDENCE)

        self._lock = threading.Lock()
        self._inbox: queue.Queue = queue.Queue()

        if cfg.TERMINAL_BOOTSTRAP not in ("zero", "respawn"):
            logger.warning(f"Unknown TERMINAL_BOOTSTRAP {cfg.TERMINAL_BOOTSTRAP!r}, using 'zero'")
        logger.info(
            f"Ape ready: policy={agent.policy.kind} epsilon={agent.epsilon:.3f} "
            f"terminal_bootstrap={self.terminal_bootstrap} "
            f"save={self.save_path if self.autosave else 'off'}"
        )

    # ------------------------------------------------------------------ #
    #  Accessors                                                           #
    # ------------------------------------------------------------------ #
    @property
    def world(self) -> IslandWorld:
        return self.state.world

    @property
    def agent(self) -> ApeAgent:
        return self.state.agent

    @property
    def store(self) -> AdviceRuleStore:
        return self.state.store

    @property
    def terminal_bootstrap(self) -> str:
        return "respawn" if self.config.TERMINAL_BOOTSTRAP == "respawn" else "zero"

    # ------------------------------------------------------------------ #
    #  Advice                                                              #
    # ------------------------------------------------------------------ #
    def handle_advice(self, text: str) -> AdviceReply:
        """Apply one utterance now and return the reply."""
        with self._lock:
            reply = apply_advice(self.parser, self.store, text)
        advice_log.info(f"You: {text}")
        advice_log.info(reply.render())
        return reply

    def submit_advice(self, text: str):
        """Queue an utterance from another thread; applied at the next step."""
        self._inbox.put(text)

    def drain_advice(self) -> list[AdviceReply]:
        replies = []
        while True:
            try:
                text = self._inbox.get_nowait()
            except queue.Empty:
                break
            replies.append(self.handle_advice(text))
        return replies

    # ------------------------------------------------------------------ #
    #  Step                                                                #
    # ------------------------------------------------------------------ #
    def step(self) -> dict:
        """One decision + learning cycle. Returns a summary dict."""
        replies = self.drain_advice()
        cfg = self.config
        world, agent = self.world, self.agent

        with self._lock:
            self.state.tick += 1
            tick = self.state.tick
            world.tick(agent)

            snapshot = world.snapshot(agent)
            features = self.encoder.encode(snapshot)
            values = agent.policy.predict(features)
            bias = self.composer.compose(self.store, snapshot)
            valid = validity_mask(snapshot)
            action = choose_action(values, bias, valid, agent.epsilon, self.rng)

            outcome = world.resolve(agent, action)

            if outcome.died and self.terminal_bootstrap == "zero":
                next_features = None
            else:
                next_features = self.encoder.encode(world.snapshot(agent))
            td_error = agent.policy.update(features, action, outcome.reward, next_features)
            world.maybe_spawn_food(outcome)

            agent.last_action = action
            agent.last_td_error = td_error
            agent.record_reward(outcome.reward)
            agent.decay_epsilon()

        if outcome.died:
            log_death(tick, outcome.death_pos, outcome.cause, agent.hunger, agent.deaths)

        if self.autosave and cfg.SAVE_INTERVAL > 0 and tick % cfg.SAVE_INTERVAL == 0:
            self.save()

        if cfg.METRICS_INTERVAL > 0 and tick % cfg.METRICS_INTERVAL == 0:
            status = self.status()
            log_metrics(tick, status)
            logger.info(
                f"[t={tick}] foods={agent.foods_eaten} deaths={agent.deaths} "
                f"hunger={agent.hunger:.0f} eps={agent.epsilon:.3f} "
                f"r_ema={agent.reward_ema:.3f} state={status['state_label']} "
                f"rules={status['rules']}"
            )

        return {
            "tick": tick,
            "action": ACTION_NAMES[action],
            "reward": outcome.reward,
            "ate": outcome.ate,
            "died": outcome.died,
            "cause": outcome.cause,
            "td_error": td_error,
            "had_bias": bias is not None,
            "replies": replies,
        }

    def run(self, steps: int) -> list[dict]:
        return [self.step() for _ in range(steps)]

    # ------------------------------------------------------------------ #
    #  Lifecycle                                                           #
    # ------------------------------------------------------------------ #
    def reset_world(self):
        """New island; the ape keeps its policy and stats, the advice is cleared."""
        with self._lock:
            self.world.reset()
            self.agent.pos = tuple(self.world.random_land_cell())
            self.agent.hunger = 100.0
            dropped = self.store.clear()
        logger.info(f"World reset, {dropped} advice rules cleared")

    def save(self) -> bool:
        if self.save_path is None:
            return False
        with self._lock:
            return save_state(self.agent, self.save_path)

    def status(self, snapshot=None) -> dict:
        if snapshot is None:
            snapshot = self.world.snapshot(self.agent)
        status = self.agent.status()
        status["state_label"] = state_label(snapshot)
        status["rules"] = len(self.store)
        status["active_rules"] = len(active_rules(self.store, snapshot))
        return status
