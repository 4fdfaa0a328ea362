"""Turn operator chat into advice rules or store commands.

Pipeline:
  1. control words (clear / list / remove last) short-circuit everything
  2. split at the first "when" / "if" into action and condition clauses
  3. action clause -> ordered keyword tests, then the intent classifier
  4. condition clause (or the whole text) -> hunger / predator / food tests
  5. render rule text and stamp a fresh id

Keyword precedence is fixed: predator avoidance beats rock avoidance
beats food beats trees beats stay beats compass directions. So
"avoid rocks and predators" becomes a predator rule.
"""

import itertools
import logging
import re
from typing import Optional, Union

from .intents import IntentClassifier
from .types import (
    ALWAYS, ActionKind, AdviceAction, AdviceRule, CommandKind, Condition,
    ConditionKind, ControlCommand, Unrecognized, format_rule_text,
)

logger = logging.getLogger(__name__)

ParseResult = Union[ControlCommand, AdviceRule, Unrecognized]


def _cue(*words: str) -> re.Pattern:
    """Match any of `words` starting at a word boundary."""
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + ")")


# Control phrases, checked in order
_CLEAR = _cue("clear", "forget", "cancel", "never mind", "nevermind",
              "stop advice", "stop listening")
_CLEAR_EXACT = {"stop", "stop it", "stop now"}
_LIST = re.compile(r"\blist\b|\bshow rules\b")
_REMOVE_LAST = _cue("remove last", "delete last", "undo")

# Action cues
_PREDATOR = _cue("predator")
_AVOID = _cue("avoid", "stay away", "keep away", "dont", "don't", "do not")
_FLEE = _cue("flee", "run", "escape", "hide")
_ROCK = _cue("rock", "stone", "boulder")
_FOOD = _cue("food", "eat", "forage", "berries", "berry", "fruit")
_TREES = _cue("tree", "forest")
_STAY = _cue("stay", "wait", "hold", "freeze", "still", "dont move", "don't move")
_COMPASS = [
    (_cue("north", "up"), "up"),
    (_cue("south", "down"), "down"),
    (_cue("west", "left"), "left"),
    (_cue("east", "right"), "right"),
]

# Condition cues
_SPLIT = re.compile(r"\b(when|if)\b")
_HUNGER = re.compile(
    r"hunger[^0-9]*?"
    r"(<=|>=|<|>|below|under|less than|over|above|greater than)?"
    r"\s*(\d{1,3})\s*%?"
)
_GREATER = {">", ">=", "over", "above", "greater than"}
_NEAR = _cue("near", "close")


def split_advice_text(text: str) -> tuple[str, str]:
    """Return (action clause, condition clause) split at the first when/if."""
    match = _SPLIT.search(text)
    if not match:
        return text.strip(), ""
    return text[:match.start()].strip(), text[match.end():].strip()


def parse_action(text: str) -> Optional[AdviceAction]:
    """Keyword tests only; None if nothing fires."""
    if not text:
        return None
    if _PREDATOR.search(text) and (_AVOID.search(text) or _FLEE.search(text)):
        return AdviceAction(ActionKind.AVOID_PREDATOR)
    if _ROCK.search(text) and _AVOID.search(text):
        return AdviceAction(ActionKind.AVOID_ROCKS)
    if _FOOD.search(text):
        return AdviceAction(ActionKind.SEEK_FOOD)
    if _TREES.search(text):
        return AdviceAction(ActionKind.SEEK_TREES)
    if _STAY.search(text):
        return AdviceAction(ActionKind.STAY)
    for pattern, direction in _COMPASS:
        if pattern.search(text):
            return AdviceAction.go(direction)
    return None


def parse_condition(text: str) -> Condition:
    source = text.strip()
    if not source or "always" in source:
        return ALWAYS
    match = _HUNGER.search(source)
    if match:
        raw_op = match.group(1) or "below"
        op = ">" if raw_op in _GREATER else "<"
        return Condition.hunger(op, int(match.group(2)))
    if "hungry" in source:
        return Condition.hunger("<", 40)
    if "predator" in source and _NEAR.search(source):
        return Condition(ConditionKind.PREDATOR_NEAR)
    if "food" in source and _NEAR.search(source):
        return Condition(ConditionKind.FOOD_NEAR)
    return ALWAYS


def parse_command(lower: str) -> Optional[ControlCommand]:
    stripped = lower.strip()
    if _CLEAR.search(lower) or stripped in _CLEAR_EXACT:
        return ControlCommand(CommandKind.CLEAR)
    if _LIST.search(lower):
        return ControlCommand(CommandKind.LIST)
    if _REMOVE_LAST.search(lower):
        return ControlCommand(CommandKind.REMOVE_LAST)
    return None


class AdviceParser:
    """Parses utterances; owns the rule id counter so ids are never reused."""

    def __init__(self, classifier: IntentClassifier | None = None,
                 confidence_threshold: float = 0.6):
        self.classifier = classifier
        self.confidence_threshold = confidence_threshold
        self._ids = itertools.count(1)

    def interpret_action(self, text: str) -> Optional[AdviceAction]:
        action = parse_action(text)
        if action is not None:
            return action
        if self.classifier is None:
            return None
        result = self.classifier.classify(text)
        if result.action is not None and result.confidence >= self.confidence_threshold:
            logger.debug(f"Classifier read {text!r} as {result.intent} "
                         f"({result.confidence:.2f})")
            return result.action
        logger.debug(f"Classifier unsure about {text!r} ({result.confidence:.2f})")
        return None

    def parse(self, utterance: str) -> ParseResult:
        lower = utterance.lower()
        command = parse_command(lower)
        if command is not None:
            return command

        action_text, condition_text = split_advice_text(lower)
        action = self.interpret_action(action_text or lower)
        if action is None:
            return Unrecognized(utterance)

        condition = parse_condition(condition_text)
        if condition.kind is ConditionKind.ALWAYS and not condition_text:
            condition = parse_condition(lower)

        return AdviceRule(
            id=next(self._ids),
            action=action,
            condition=condition,
            text=format_rule_text(action, condition),
        )
