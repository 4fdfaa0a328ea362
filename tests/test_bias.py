import numpy as np
import pytest

from apeisland.advice.bias import BiasComposer, action_bias, condition_holds
from apeisland.advice.types import ActionKind, AdviceAction, AdviceRule, Condition, ConditionKind


def rule(action, condition=Condition(), rule_id=1):
    return AdviceRule(rule_id, action, condition, "")


def test_direction_up(snapshot):
    bias = BiasComposer().compose([rule(AdviceAction.go("up"))], snapshot())
    assert bias.tolist() == pytest.approx([0.0, 0.72, -0.24, -0.24, -0.24])


def test_stay(snapshot):
    bias = BiasComposer().compose([rule(AdviceAction(ActionKind.STAY))], snapshot())
    assert bias.tolist() == pytest.approx([0.72, 0.0, 0.0, 0.0, 0.0])


def test_weight_split_across_active_rules(snapshot):
    rules = [rule(AdviceAction.go("up"), rule_id=1), rule(AdviceAction(ActionKind.STAY), rule_id=2)]
    bias = BiasComposer().compose(rules, snapshot())
    assert bias.tolist() == pytest.approx([0.36, 0.36, -0.12, -0.12, -0.12])


def test_seek_food_rewards_closing_in(snapshot):
    snap = snapshot(agent=(5, 5), food=[(8, 5)])
    bias = action_bias(AdviceAction(ActionKind.SEEK_FOOD), 0.6, snap)
    right, left = bias[4], bias[3]
    assert right == pytest.approx(0.3)
    assert left == pytest.approx(-0.3)
    assert bias[0] == 0.0


def test_avoid_predator_rewards_moving_away(snapshot):
    snap = snapshot(agent=(5, 5), predators=[(5, 3)])
    bias = action_bias(AdviceAction(ActionKind.AVOID_PREDATOR), 0.6, snap)
    assert bias[2] == pytest.approx(0.3)
    assert bias[1] == pytest.approx(-0.3)


def test_avoid_rocks_and_trees_gains(snapshot):
    snap = snapshot(agent=(5, 5), rocks=[(7, 5)], trees=[(3, 5)])
    rocks = action_bias(AdviceAction(ActionKind.AVOID_ROCKS), 1.0, snap)
    trees = action_bias(AdviceAction(ActionKind.SEEK_TREES), 1.0, snap)
    assert rocks[3] == pytest.approx(0.4)
    assert trees[3] == pytest.approx(0.35)


def test_empty_target_contributes_nothing_but_keeps_share(snapshot):
    rules = [rule(AdviceAction(ActionKind.SEEK_FOOD), rule_id=1),
             rule(AdviceAction.go("up"), rule_id=2)]
    bias = BiasComposer().compose(rules, snapshot())
    assert bias.tolist() == pytest.approx([0.0, 0.36, -0.12, -0.12, -0.12])


def test_no_active_rule_gives_none(snapshot):
    hungry_only = rule(AdviceAction(ActionKind.SEEK_FOOD), Condition.hunger("<", 50))
    assert BiasComposer().compose([hungry_only], snapshot(hunger=80, food=[(6, 5)])) is None
    assert BiasComposer().compose([], snapshot()) is None


def test_hunger_condition_is_strict(snapshot):
    below = Condition.hunger("<", 50)
    above = Condition.hunger(">", 50)
    assert condition_holds(below, snapshot(hunger=49.9))
    assert not condition_holds(below, snapshot(hunger=50))
    assert not condition_holds(above, snapshot(hunger=50))
    assert condition_holds(above, snapshot(hunger=50.1))


def test_proximity_conditions(snapshot):
    near = Condition(ConditionKind.PREDATOR_NEAR)
    assert condition_holds(near, snapshot(predators=[(5, 8)]))
    assert not condition_holds(near, snapshot(predators=[(5, 9)]))
    assert not condition_holds(near, snapshot())
    food = Condition(ConditionKind.FOOD_NEAR)
    assert condition_holds(food, snapshot(food=[(9, 5)]))
    assert not condition_holds(food, snapshot(food=[(10, 5)]))


def test_bias_is_float_vector(snapshot):
    bias = BiasComposer(total_weight=1.0).compose([rule(AdviceAction.go("left"))], snapshot())
    assert isinstance(bias, np.ndarray) and bias.shape == (5,)
