from .bias import BiasComposer, active_rules, condition_holds
from .chat import AdviceReply, ReplyKind, apply_advice
from .intents import IntentClassifier, build_intent_classifier
from .parser import AdviceParser
from .store import AdviceRuleStore
from .types import (
    ActionKind, AdviceAction, AdviceRule, CommandKind, Condition,
    ConditionKind, ControlCommand, Unrecognized,
)

__all__ = [
    "BiasComposer", "active_rules", "condition_holds",
    "AdviceReply", "ReplyKind", "apply_advice",
    "IntentClassifier", "build_intent_classifier",
    "AdviceParser", "AdviceRuleStore",
    "ActionKind", "AdviceAction", "AdviceRule", "CommandKind", "Condition",
    "ConditionKind", "ControlCommand", "Unrecognized",
]
