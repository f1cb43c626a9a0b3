"""Forward pass and activation sanity checks."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .activations import sigmoid
from .types import Array, NetworkState


class NumericInstabilityError(FloatingPointError):
    """Raised when activations leave [0, 1] or stop being finite."""


def activate_network(state: NetworkState) -> None:
    """Propagate the current inputs through the hidden and output layers.

    All hidden activations are written before any output is computed.
    """

    inputs, hidden, outputs = state.inputs, state.hidden, state.outputs
    values = state.values

    hidden_in = values[inputs] @ state.weights[inputs, hidden] - state.thresholds[hidden]
    values[hidden] = sigmoid(hidden_in)

    output_in = values[hidden] @ state.weights[hidden, outputs] - state.thresholds[outputs]
    values[outputs] = sigmoid(output_in)


def predict(state: NetworkState, pattern: Sequence[float] | Array) -> Array:
    """Run ``pattern`` through the network and return the outputs."""

    pattern = np.asarray(pattern, dtype=np.float64).reshape(-1)
    if pattern.size != state.input_count:
        raise ValueError(
            f"pattern has {pattern.size} entries, network has {state.input_count} inputs"
        )
    state.values[state.inputs] = pattern
    activate_network(state)
    return state.values[state.outputs].copy()


def check_activations(state: NetworkState) -> None:
    """Fail if any activation is non-finite or outside [0, 1]."""

    values = state.values
    if not np.all(np.isfinite(values)):
        bad = np.flatnonzero(~np.isfinite(values))
        raise NumericInstabilityError(f"non-finite activations at nodes {bad.tolist()}")
    if np.any(values < 0.0) or np.any(values > 1.0):
        bad = np.flatnonzero((values < 0.0) | (values > 1.0))
        raise NumericInstabilityError(f"activations outside [0, 1] at nodes {bad.tolist()}")


__all__ = [
    "NumericInstabilityError",
    "activate_network",
    "predict",
    "check_activations",
]
