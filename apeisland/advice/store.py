"""Rule store: the operator's standing advice, in the order it was given."""

from typing import Iterator, Optional

from .types import AdviceRule


class AdviceRuleStore:
    """
    Ordered list of active rules.

    No dedup and no cap: every accepted utterance adds a rule until the
    operator clears or undoes it. Long sessions grow the list (and the
    per-step bias cost) linearly.
    """

    def __init__(self):
        self._rules: list[AdviceRule] = []

    def add(self, rule: AdviceRule):
        self._rules.append(rule)

    def clear(self) -> int:
        """Drop every rule. Returns how many were removed."""
        count = len(self._rules)
        self._rules.clear()
        return count

    def remove_last(self) -> Optional[AdviceRule]:
        """Drop the most recently added rule, if any."""
        if not self._rules:
            return None
        return self._rules.pop()

    def rules(self) -> list[AdviceRule]:
        return list(self._rules)

    def texts(self) -> list[str]:
        return [r.text for r in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[AdviceRule]:
        return iter(list(self._rules))
