"""BackpropNets public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.backprop import update_weights
from .core.patterns import FixedPattern, RandomPattern, TruthTable, build_generator
from .core.propagation import (
    NumericInstabilityError,
    activate_network,
    check_activations,
    predict,
)
from .core.topology import build_network, connect_nodes, initialize
from .core.types import NetworkState, NodeRole, RunResult, Snapshot
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "NetworkState",
    "NodeRole",
    "NumericInstabilityError",
    "RunResult",
    "Snapshot",
    "Trainer",
    "FixedPattern",
    "RandomPattern",
    "TruthTable",
    "activate_network",
    "activations",
    "build_generator",
    "build_network",
    "check_activations",
    "connect_nodes",
    "initialize",
    "load_preset",
    "predict",
    "presets",
    "run_pipeline",
    "types",
    "update_weights",
]
