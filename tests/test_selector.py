import numpy as np

from apeisland.agent.selector import choose_action, validity_mask
from apeisland.world.objects import ACTION_NAMES, STAY, action_index


def test_boxed_in_only_stay_is_valid(snapshot):
    snap = snapshot(agent=(5, 5), trees=[(5, 4), (5, 6)], rocks=[(4, 5), (6, 5)])
    mask = validity_mask(snap)
    assert mask.tolist() == [True, False, False, False, False]
    rng = np.random.RandomState(0)
    for eps in (0.0, 1.0):
        for _ in range(20):
            assert choose_action(np.arange(5.0), None, mask, eps, rng) == STAY


def test_edge_of_grid_is_blocked(snapshot):
    mask = validity_mask(snapshot(agent=(0, 0)))
    assert not mask[action_index("up")]
    assert not mask[action_index("left")]
    assert mask[action_index("down")] and mask[action_index("right")]


def test_water_is_blocked(snapshot):
    land = np.ones((20, 20), dtype=bool)
    land[5, 6] = False
    mask = validity_mask(snapshot(agent=(5, 5), land=land))
    assert not mask[action_index("right")]


def test_never_picks_blocked_action():
    rng = np.random.RandomState(1)
    valid = np.array([True, False, True, False, True])
    values = np.array([0.0, 10.0, 0.0, 10.0, 0.0])
    for eps in (0.0, 0.5, 1.0):
        for _ in range(200):
            assert valid[choose_action(values, None, valid, eps, rng)]


def test_greedy_ties_pick_first():
    rng = np.random.RandomState(0)
    valid = np.ones(5, dtype=bool)
    assert choose_action([1.0, 2.0, 2.0, 0.0, 2.0], None, valid, 0.0, rng) == 1


def test_bias_shifts_greedy_choice():
    rng = np.random.RandomState(0)
    valid = np.ones(5, dtype=bool)
    values = [0.5, 0.0, 0.0, 0.0, 0.0]
    bias = [0.0, 0.72, -0.24, -0.24, -0.24]
    assert ACTION_NAMES[choose_action(values, bias, valid, 0.0, rng)] == "up"


def test_empty_mask_falls_back_to_stay():
    rng = np.random.RandomState(0)
    assert choose_action(np.zeros(5), None, np.zeros(5, dtype=bool), 0.3, rng) == STAY
