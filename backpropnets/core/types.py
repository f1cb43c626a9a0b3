"""Core typing contracts for BackpropNets."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

import numpy as np

Array = np.ndarray


class NodeRole(enum.Enum):
    """Role of a node within the layered network."""

    SENTINEL = "sentinel"
    INPUT = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"


@dataclass
class NetworkState:
    """Dense storage for a three-layer network.

    Nodes share one global numbering: all inputs first, then all hidden
    nodes, then all outputs. When ``reserve_sentinel`` is set, index 0 is
    left unused and the input range starts at 1.

    ``weights[src, dst]`` is a square ``(size, size)`` matrix addressed by
    absolute node index. Only the input→hidden and hidden→output blocks are
    ever written; every other entry stays at exactly zero.
    """

    input_count: int
    hidden_count: int
    output_count: int
    reserve_sentinel: bool = False
    weights: Array = field(init=False, repr=False)
    thresholds: Array = field(init=False, repr=False)
    values: Array = field(init=False, repr=False)
    expected: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        for name in ("input_count", "hidden_count", "output_count"):
            count = getattr(self, name)
            if isinstance(count, bool) or not isinstance(count, (int, np.integer)):
                raise ValueError(f"{name} must be an integer, got {count!r}")
            if count <= 0:
                raise ValueError(f"{name} must be positive, got {count}")
        size = self.size
        self.weights = np.zeros((size, size), dtype=np.float64)
        self.thresholds = np.zeros(size, dtype=np.float64)
        self.values = np.zeros(size, dtype=np.float64)
        self.expected = np.zeros(size, dtype=np.float64)

    @classmethod
    def allocate(
        cls,
        input_count: int,
        hidden_count: int,
        output_count: int,
        *,
        reserve_sentinel: bool = False,
    ) -> "NetworkState":
        return cls(
            input_count=input_count,
            hidden_count=hidden_count,
            output_count=output_count,
            reserve_sentinel=reserve_sentinel,
        )

    # ------------------------------------------------------------------
    # Index partition

    @property
    def offset(self) -> int:
        return 1 if self.reserve_sentinel else 0

    @property
    def node_count(self) -> int:
        return self.input_count + self.hidden_count + self.output_count

    @property
    def size(self) -> int:
        return self.node_count + self.offset

    @property
    def inputs(self) -> slice:
        start = self.offset
        return slice(start, start + self.input_count)

    @property
    def hidden(self) -> slice:
        start = self.offset + self.input_count
        return slice(start, start + self.hidden_count)

    @property
    def outputs(self) -> slice:
        start = self.offset + self.input_count + self.hidden_count
        return slice(start, start + self.output_count)

    def role(self, index: int) -> NodeRole:
        self._check_index(index)
        if index < self.offset:
            return NodeRole.SENTINEL
        if index < self.hidden.start:
            return NodeRole.INPUT
        if index < self.outputs.start:
            return NodeRole.HIDDEN
        return NodeRole.OUTPUT

    # ------------------------------------------------------------------
    # Checked accessors

    def weight(self, source: int, target: int) -> float:
        self._check_index(source)
        self._check_index(target)
        return float(self.weights[source, target])

    def set_weight(self, source: int, target: int, value: float) -> None:
        self._check_index(source)
        self._check_index(target)
        if not self.weight_mask()[source, target]:
            raise IndexError(
                f"({source}, {target}) is not an input→hidden or hidden→output connection"
            )
        self.weights[source, target] = float(value)

    def weight_mask(self) -> Array:
        """Boolean mask of the two connected weight blocks."""

        mask = np.zeros(self.weights.shape, dtype=bool)
        mask[self.inputs, self.hidden] = True
        mask[self.hidden, self.outputs] = True
        return mask

    def copy(self) -> "NetworkState":
        clone = NetworkState(
            input_count=self.input_count,
            hidden_count=self.hidden_count,
            output_count=self.output_count,
            reserve_sentinel=self.reserve_sentinel,
        )
        clone.weights[...] = self.weights
        clone.thresholds[...] = self.thresholds
        clone.values[...] = self.values
        clone.expected[...] = self.expected
        return clone

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.size:
            raise IndexError(f"node index {index} out of range [0, {self.size})")


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of the network handed to reporting callbacks."""

    iteration: int
    activations: Array
    sse: float


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`backpropnets.training.trainer.Trainer.run`."""

    iterations: int
    sse: Array
    final_sse: float
    metrics_path: str = ""
    manifest_path: str = ""
    summary_path: str = ""
    evaluation: dict = field(default_factory=dict)
