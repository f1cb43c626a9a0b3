"""Online error backpropagation for the three-layer network."""

from __future__ import annotations

import numpy as np

from .activations import sigmoid_deriv
from .types import NetworkState

HIDDEN_GRADIENT_MODES = ("post_update", "pre_update")


def update_weights(
    state: NetworkState,
    learning_rate: float,
    *,
    hidden_gradient: str = "post_update",
) -> float:
    """Apply one delta-rule step for the current example and return its SSE.

    The error is measured against the activations left by the last forward
    pass. With ``hidden_gradient="post_update"`` each hidden gradient is
    computed from the hidden→output weight after that weight has already
    received its own update; ``"pre_update"`` uses the weight as it was
    before this call.

    Hidden gradients are accumulated per output node, so hidden thresholds
    and input→hidden weights move once for every output.
    """

    if not learning_rate > 0:
        raise ValueError(f"learning_rate must be positive, got {learning_rate}")
    if hidden_gradient not in HIDDEN_GRADIENT_MODES:
        raise ValueError(
            f"hidden_gradient must be one of {HIDDEN_GRADIENT_MODES}, got {hidden_gradient!r}"
        )

    inputs, hidden, outputs = state.inputs, state.hidden, state.outputs
    a_in = state.values[inputs]
    a_hidden = state.values[hidden]
    a_out = state.values[outputs]

    error = state.expected[outputs] - a_out
    sse = float(np.sum(error * error))
    output_grad = sigmoid_deriv(a_out) * error

    w_ho = state.weights[hidden, outputs]
    if hidden_gradient == "pre_update":
        w_used = w_ho.copy()
        w_ho += learning_rate * np.outer(a_hidden, output_grad)
    else:
        w_ho += learning_rate * np.outer(a_hidden, output_grad)
        w_used = w_ho

    # (hidden, output) gradient pairs, one per path through the output loop
    hidden_grad = sigmoid_deriv(a_hidden)[:, None] * output_grad[None, :] * w_used
    hidden_total = hidden_grad.sum(axis=1)

    state.weights[inputs, hidden] += learning_rate * np.outer(a_in, hidden_total)
    state.thresholds[hidden] -= learning_rate * hidden_total
    state.thresholds[outputs] -= learning_rate * output_grad
    return sse


__all__ = ["HIDDEN_GRADIENT_MODES", "update_weights"]
