"""
Ape Island: a Q-learning ape that survives an island and takes advice.

Plain-language advice is parsed into conditional rules whose bias is
blended into the learned action values at decision time.
"""

from .agent import ApeAgent, FeatureEncoder, NetworkPolicy, TabularPolicy
from .advice import AdviceParser, AdviceRuleStore, BiasComposer, IntentClassifier
from .config import ApeConfig, load_config
from .simulation import SimulationController, SimulationState
from .world import IslandWorld, WorldSnapshot

__version__ = "0.1.0"

__all__ = [
    "ApeAgent", "FeatureEncoder", "NetworkPolicy", "TabularPolicy",
    "AdviceParser", "AdviceRuleStore", "BiasComposer", "IntentClassifier",
    "ApeConfig", "load_config",
    "SimulationController", "SimulationState",
    "IslandWorld", "WorldSnapshot",
]
