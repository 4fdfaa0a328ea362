import pytest

from apeisland.advice.parser import AdviceParser, parse_action, parse_condition, split_advice_text
from apeisland.advice.types import (
    ActionKind, AdviceRule, CommandKind, ConditionKind, ControlCommand, Unrecognized,
)


@pytest.fixture
def parser():
    return AdviceParser()


def test_avoid_predators(parser):
    rule = parser.parse("avoid predators")
    assert isinstance(rule, AdviceRule)
    assert rule.action.kind is ActionKind.AVOID_PREDATOR
    assert rule.condition.kind is ConditionKind.ALWAYS
    assert rule.text == "avoid predators"


def test_food_when_hunger_below(parser):
    rule = parser.parse("get food when hunger is below 50%")
    assert rule.action.kind is ActionKind.SEEK_FOOD
    assert rule.condition.kind is ConditionKind.HUNGER
    assert rule.condition.op == "<"
    assert rule.condition.threshold == 50
    assert rule.text == "seek food when hunger < 50%"


def test_go_north(parser):
    rule = parser.parse("Go north")
    assert rule.action.kind is ActionKind.DIRECTION
    assert rule.action.direction == "up"
    assert rule.condition.kind is ConditionKind.ALWAYS
    assert rule.text == "go north"


@pytest.mark.parametrize("text,kind", [
    ("clear", CommandKind.CLEAR),
    ("forget everything", CommandKind.CLEAR),
    ("stop", CommandKind.CLEAR),
    ("list", CommandKind.LIST),
    ("show rules", CommandKind.LIST),
    ("undo", CommandKind.REMOVE_LAST),
    ("remove last rule", CommandKind.REMOVE_LAST),
])
def test_control_commands(parser, text, kind):
    result = parser.parse(text)
    assert isinstance(result, ControlCommand)
    assert result.kind is kind


def test_gibberish_is_unrecognized(parser):
    result = parser.parse("xyzzy quux")
    assert isinstance(result, Unrecognized)
    assert result.utterance == "xyzzy quux"


def test_stay_away_from_rocks(parser):
    assert parser.parse("stay away from rocks").action.kind is ActionKind.AVOID_ROCKS


def test_predator_beats_rocks(parser):
    assert parser.parse("avoid rocks and predators").action.kind is ActionKind.AVOID_PREDATOR


def test_hungry_word(parser):
    rule = parser.parse("eat when hungry")
    assert rule.action.kind is ActionKind.SEEK_FOOD
    assert (rule.condition.op, rule.condition.threshold) == ("<", 40)


def test_hunger_over(parser):
    rule = parser.parse("go east if hunger over 70")
    assert rule.action.direction == "right"
    assert (rule.condition.op, rule.condition.threshold) == (">", 70)
    assert rule.text == "go east when hunger > 70%"


def test_threshold_is_clamped():
    assert parse_condition("hunger < 250").threshold == 100


def test_predators_near_condition(parser):
    rule = parser.parse("stay still when predators are near")
    assert rule.action.kind is ActionKind.STAY
    assert rule.condition.kind is ConditionKind.PREDATOR_NEAR
    assert rule.text == "stay put when predators nearby"


def test_food_near_condition():
    assert parse_condition("food is close").kind is ConditionKind.FOOD_NEAR


def test_cues_match_word_starts_only():
    assert parse_action("that was great") is None
    assert parse_action("head to the forest").kind is ActionKind.SEEK_TREES


def test_split_at_first_when():
    assert split_advice_text("eat if hungry when safe") == ("eat", "hungry when safe")
    assert split_advice_text("go west") == ("go west", "")


def test_ids_are_never_reused(parser):
    first = parser.parse("go west")
    parser.parse("clear")
    second = parser.parse("go west")
    assert second.id > first.id
