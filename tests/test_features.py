import numpy as np

from apeisland.agent.features import (
    DISTANCE_SENTINEL, FeatureEncoder, encode_features, encode_state_index, state_label,
)


def test_features_stay_in_unit_range(snapshot):
    for hunger in (0.0, 12.5, 40.0, 99.9, 100.0):
        for pd in (0, 1, 3, 4, 9, 10, 25):
            for fd in (0, 4, 5, 30):
                snap = snapshot(agent=(0, 0), hunger=hunger,
                                predators=[(pd, 0)], food=[(0, fd)], width=40, height=40)
                f = encode_features(snap)
                assert f.shape == (5,)
                assert np.all(f >= 0.0) and np.all(f <= 1.0)
                assert f[3] == (1.0 if pd <= 3 else 0.0)
                assert f[4] == (1.0 if fd <= 4 else 0.0)


def test_empty_lists_use_sentinel_distance(snapshot):
    f = encode_features(snapshot(hunger=50.0))
    assert f[0] == 0.5
    assert f[1] == DISTANCE_SENTINEL / 10
    assert f[2] == 1.0
    assert f[3] == 0.0 and f[4] == 0.0


def test_state_index_bits(snapshot):
    assert encode_state_index(snapshot()) == 0
    assert encode_state_index(snapshot(predators=[(5, 8)])) == 1
    assert encode_state_index(snapshot(hunger=40.0)) == 2
    assert encode_state_index(snapshot(food=[(6, 6)])) == 4
    assert encode_state_index(snapshot(hunger=10, predators=[(5, 6)], food=[(5, 4)])) == 7


def test_state_label(snapshot):
    assert state_label(snapshot()) == "calm"
    assert state_label(snapshot(hunger=20, food=[(5, 6)])) == "hungry, food near"


def test_encoder_variant(snapshot):
    snap = snapshot(hunger=30)
    assert FeatureEncoder(tabular=True).encode(snap) == 2
    assert FeatureEncoder().encode(snap).shape == (5,)
