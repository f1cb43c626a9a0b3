"""Core numerical primitives for BackpropNets."""

from . import activations, backprop, patterns, propagation, topology, types

__all__ = ["activations", "backprop", "patterns", "propagation", "topology", "types"]
