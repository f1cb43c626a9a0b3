import numpy as np
import pytest

from backpropnets.core.topology import connect_nodes, initialize
from backpropnets.core.types import NetworkState, NodeRole


def test_initialize_allocates_zeroed_storage():
    state = initialize(3, 4, 2)
    assert state.weights.shape == (9, 9)
    for vector in (state.thresholds, state.values, state.expected):
        assert vector.shape == (9,)
        assert not vector.any()
    assert not state.weights.any()


def test_partition_is_contiguous_and_ordered():
    state = initialize(3, 4, 2)
    assert (state.inputs.start, state.inputs.stop) == (0, 3)
    assert (state.hidden.start, state.hidden.stop) == (3, 7)
    assert (state.outputs.start, state.outputs.stop) == (7, 9)
    assert [state.role(i) for i in (0, 2, 3, 6, 7, 8)] == [
        NodeRole.INPUT,
        NodeRole.INPUT,
        NodeRole.HIDDEN,
        NodeRole.HIDDEN,
        NodeRole.OUTPUT,
        NodeRole.OUTPUT,
    ]


def test_sentinel_shifts_every_range_by_one():
    state = initialize(2, 2, 1, reserve_sentinel=True)
    assert state.size == 6
    assert state.role(0) is NodeRole.SENTINEL
    assert (state.inputs.start, state.hidden.start, state.outputs.start) == (1, 3, 5)


@pytest.mark.parametrize(
    "counts",
    [(0, 2, 1), (2, 0, 1), (2, 2, 0), (-1, 2, 1), (2, 2.5, 1), (True, 2, 1)],
)
def test_invalid_counts_fail_at_construction(counts):
    with pytest.raises(ValueError):
        NetworkState.allocate(*counts)


def test_checked_accessors_reject_out_of_range_and_unconnected_pairs():
    state = initialize(2, 2, 1)
    with pytest.raises(IndexError):
        state.weight(5, 0)
    with pytest.raises(IndexError):
        state.weight(-1, 2)
    with pytest.raises(IndexError):
        state.set_weight(0, 4, 1.0)  # input -> output
    state.set_weight(0, 2, 0.25)
    assert state.weight(0, 2) == 0.25


@pytest.mark.parametrize("sentinel", [False, True])
def test_connect_nodes_leaves_unconnected_blocks_zero(sentinel):
    state = initialize(4, 3, 2, reserve_sentinel=sentinel)
    connect_nodes(state, np.random.default_rng(7), weight_scale=2.0)

    mask = state.weight_mask()
    assert np.all(state.weights[~mask] == 0.0)
    assert np.all(state.weights[state.inputs, state.outputs] == 0.0)
    assert np.all(state.weights[:, state.inputs] == 0.0)
    assert np.all(state.weights[state.outputs, :] == 0.0)

    connected = state.weights[mask]
    assert np.all((connected >= 0.0) & (connected < 2.0))
    assert connected.max() > 1.0

    assert np.all(state.thresholds[state.inputs] == 0.0)
    active = state.thresholds[state.hidden.start : state.outputs.stop]
    assert np.all((active >= 0.0) & (active < 1.0))
    if sentinel:
        assert state.thresholds[0] == 0.0


def test_connect_nodes_rejects_non_positive_scale():
    with pytest.raises(ValueError):
        connect_nodes(initialize(2, 2, 1), np.random.default_rng(0), weight_scale=0.0)


def test_copy_is_independent():
    state = initialize(2, 2, 1)
    connect_nodes(state, np.random.default_rng(1))
    clone = state.copy()
    clone.weights[0, 2] += 1.0
    assert clone.weights[0, 2] != state.weights[0, 2]
    assert np.array_equal(clone.thresholds, state.thresholds)
