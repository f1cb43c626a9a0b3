"""Network allocation and random wiring."""

from __future__ import annotations

import numpy as np

from .types import NetworkState


def initialize(
    input_count: int,
    hidden_count: int,
    output_count: int,
    *,
    reserve_sentinel: bool = False,
) -> NetworkState:
    """Allocate an all-zero network with the given layer sizes."""

    return NetworkState.allocate(
        input_count,
        hidden_count,
        output_count,
        reserve_sentinel=reserve_sentinel,
    )


def connect_nodes(
    state: NetworkState,
    rng: np.random.Generator,
    *,
    weight_scale: float = 1.0,
) -> NetworkState:
    """Draw random weights for the connected blocks and random thresholds.

    Weights are uniform in ``[0, weight_scale)`` and thresholds uniform in
    ``[0, 1)``. Draw order is input→hidden, hidden→output, then thresholds
    of hidden and output nodes, so a seeded ``rng`` reproduces the network.
    """

    if not weight_scale > 0:
        raise ValueError(f"weight_scale must be positive, got {weight_scale}")

    shape_ih = (state.input_count, state.hidden_count)
    shape_ho = (state.hidden_count, state.output_count)
    state.weights[state.inputs, state.hidden] = rng.random(shape_ih) * weight_scale
    state.weights[state.hidden, state.outputs] = rng.random(shape_ho) * weight_scale

    start, stop = state.hidden.start, state.outputs.stop
    state.thresholds[start:stop] = rng.random(stop - start)
    return state


def build_network(
    input_count: int,
    hidden_count: int,
    output_count: int,
    rng: np.random.Generator,
    *,
    weight_scale: float = 1.0,
    reserve_sentinel: bool = False,
) -> NetworkState:
    state = initialize(
        input_count, hidden_count, output_count, reserve_sentinel=reserve_sentinel
    )
    return connect_nodes(state, rng, weight_scale=weight_scale)


__all__ = ["initialize", "connect_nodes", "build_network"]
