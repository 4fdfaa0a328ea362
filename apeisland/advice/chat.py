"""Operator chat: apply one utterance to the rule store and answer it."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .parser import AdviceParser
from .store import AdviceRuleStore
from .types import AdviceRule, CommandKind, ControlCommand

logger = logging.getLogger(__name__)

USAGE_EXAMPLE = "get food when hunger is below 50%"


class ReplyKind(Enum):
    RULE_ADDED = "rule_added"
    RULES_CLEARED = "rules_cleared"
    RULE_REMOVED = "rule_removed"
    RULES_LISTED = "rules_listed"
    UNRECOGNIZED = "unrecognized"


@dataclass
class AdviceReply:
    kind: ReplyKind
    text: Optional[str] = None
    texts: list[str] = field(default_factory=list)
    rule: Optional[AdviceRule] = None

    def render(self, speaker: str = "Ape") -> str:
        """One transcript line."""
        if self.kind is ReplyKind.RULE_ADDED:
            msg = f"Rule saved: {self.text}. I will keep it even if I lose a life."
        elif self.kind is ReplyKind.RULES_CLEARED:
            msg = "Advice cleared. I will keep learning."
        elif self.kind is ReplyKind.RULE_REMOVED:
            msg = (f"Dropped my last rule: {self.text}." if self.text
                   else "I have no rules to drop.")
        elif self.kind is ReplyKind.RULES_LISTED:
            if self.texts:
                msg = "My rules: " + " | ".join(
                    f"{i}. {t}" for i, t in enumerate(self.texts, 1))
            else:
                msg = "I have no rules yet."
        else:
            msg = f"I did not understand. Try: \"{USAGE_EXAMPLE}\"."
        return f"{speaker}: {msg}"


def apply_advice(parser: AdviceParser, store: AdviceRuleStore, utterance: str) -> AdviceReply:
    """Parse `utterance` and mutate `store` accordingly."""
    result = parser.parse(utterance)

    if isinstance(result, ControlCommand):
        if result.kind is CommandKind.CLEAR:
            count = store.clear()
            logger.info(f"Advice cleared ({count} rules)")
            return AdviceReply(ReplyKind.RULES_CLEARED)
        if result.kind is CommandKind.REMOVE_LAST:
            removed = store.remove_last()
            logger.info(f"Advice removed: {removed.text if removed else 'none'}")
            return AdviceReply(ReplyKind.RULE_REMOVED,
                               text=removed.text if removed else None, rule=removed)
        return AdviceReply(ReplyKind.RULES_LISTED, texts=store.texts())

    if isinstance(result, AdviceRule):
        store.add(result)
        logger.info(f"Advice rule #{result.id}: {result.text}")
        return AdviceReply(ReplyKind.RULE_ADDED, text=result.text, rule=result)

    logger.info(f"Advice not understood: {utterance!r}")
    return AdviceReply(ReplyKind.UNRECOGNIZED)
