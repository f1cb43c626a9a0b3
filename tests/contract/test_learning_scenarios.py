import numpy as np

from backpropnets.core.patterns import FixedPattern, RandomPattern, TruthTable
from backpropnets.core.propagation import predict
from backpropnets.core.topology import build_network
from backpropnets.reporting.summary import window_means
from backpropnets.training.trainer import Trainer


def _train_xor(seed: int, iterations: int, hidden_gradient: str = "post_update"):
    rng = np.random.default_rng(seed)
    state = build_network(2, 2, 1, rng, weight_scale=2.0, reserve_sentinel=True)
    trainer = Trainer(
        state, TruthTable.xor(), learning_rate=0.2, hidden_gradient=hidden_gradient
    )
    trainer.run(iterations)
    return state


def _learned_xor(state) -> bool:
    probe = state.copy()
    low = [predict(probe, p)[0] for p in ([1.0, 1.0], [0.0, 0.0])]
    high = [predict(probe, p)[0] for p in ([0.0, 1.0], [1.0, 0.0])]
    return all(v < 0.2 for v in low) and all(v > 0.8 for v in high)


def test_xor_is_learned_within_tolerance():
    # a 2-2-1 net can settle in a local minimum, so look for a seed that escapes
    for seed in range(8):
        state = _train_xor(seed, 100_000)
        if _learned_xor(state):
            break
    else:
        raise AssertionError("no seed in range(8) learned XOR")

    again = _train_xor(seed, 100_000)
    assert _learned_xor(again)
    assert np.array_equal(state.weights, again.weights)


def test_autoassociator_fixed_pattern_converges():
    rng = np.random.default_rng(4)
    state = build_network(100, 20, 100, rng, weight_scale=1.0)
    generator = FixedPattern.random(rng, 100)
    result = Trainer(state, generator, learning_rate=0.6).run(20_000)

    first, last = window_means(result.sse, 500)
    assert last < 0.25 * first
    outputs = predict(state.copy(), generator.pattern)
    correct = np.abs(outputs - generator.pattern) < 0.5
    assert correct.mean() >= 0.9


def test_autoassociator_random_patterns_reduce_error():
    rng = np.random.default_rng(9)
    state = build_network(16, 8, 16, rng, weight_scale=1.0)
    result = Trainer(state, RandomPattern(rng), learning_rate=0.6).run(3_000)

    # outputs start saturated near 1, so early examples carry most of the error
    first = float(np.mean(result.sse[:10]))
    last = float(np.mean(result.sse[-500:]))
    assert last < 0.85 * first
    assert np.all(np.isfinite(result.sse))
