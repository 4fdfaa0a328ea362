from .core import ApeAgent
from .features import FeatureEncoder, encode_features, encode_state_index, state_label
from .network import DenseReluDense
from .policy import NetworkPolicy, TabularPolicy, create_policy, decay_epsilon
from .selector import choose_action, validity_mask

__all__ = [
    "ApeAgent", "FeatureEncoder", "encode_features", "encode_state_index",
    "state_label", "DenseReluDense", "NetworkPolicy", "TabularPolicy",
    "create_policy", "decay_epsilon", "choose_action", "validity_mask",
]
