"""Activation utilities for BackpropNets."""

from __future__ import annotations

import numpy as np

from .types import Array

# exp(30) is far from overflow and 1 / (1 + exp(-30)) is still distinct from 1.0
SATURATION = 30.0


def sigmoid(z: Array) -> Array:
    """Return the logistic function of ``z`` with saturated pre-activations."""

    clipped = np.clip(z, -SATURATION, SATURATION)
    return 1.0 / (1.0 + np.exp(-clipped))


def sigmoid_deriv(activation: Array) -> Array:
    """Derivative of the logistic expressed through its output."""

    return activation * (1.0 - activation)
