"""Training example generators for BackpropNets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence, Tuple

import numpy as np

from .types import Array, NetworkState


class ExampleGenerator(Protocol):
    """Protocol implemented by training example strategies."""

    def write(self, state: NetworkState, iteration: int) -> None:
        """Write one example into the input values and expected outputs."""


def _check_autoassociative(state: NetworkState) -> None:
    if state.input_count != state.output_count:
        raise ValueError(
            "pattern generators need as many outputs as inputs, got "
            f"{state.input_count} inputs and {state.output_count} outputs"
        )


@dataclass
class RandomPattern:
    """Fresh random binary pattern per call; output i mirrors input i."""

    rng: np.random.Generator
    threshold: float = 0.5

    def write(self, state: NetworkState, iteration: int) -> None:
        _check_autoassociative(state)
        draws = self.rng.random(state.input_count)
        pattern = np.where(draws <= self.threshold, 0.0, 1.0)
        state.values[state.inputs] = pattern
        state.expected[state.outputs] = pattern


@dataclass
class FixedPattern:
    """Present the same binary pattern on every iteration."""

    pattern: Array

    def __post_init__(self) -> None:
        self.pattern = np.asarray(self.pattern, dtype=np.float64).reshape(-1)

    @classmethod
    def random(
        cls, rng: np.random.Generator, size: int, threshold: float = 0.5
    ) -> "FixedPattern":
        draws = rng.random(size)
        return cls(pattern=np.where(draws <= threshold, 0.0, 1.0))

    def write(self, state: NetworkState, iteration: int) -> None:
        _check_autoassociative(state)
        if self.pattern.size != state.input_count:
            raise ValueError(
                f"pattern has {self.pattern.size} entries, network has "
                f"{state.input_count} inputs"
            )
        state.values[state.inputs] = self.pattern
        state.expected[state.outputs] = self.pattern


Row = Tuple[Sequence[float], Sequence[float]]


@dataclass
class TruthTable:
    """Cycle deterministically through ``rows`` by iteration count."""

    rows: Sequence[Row]
    _inputs: Array = field(init=False, repr=False)
    _targets: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.rows:
            raise ValueError("truth table needs at least one row")
        self._inputs = np.array([row[0] for row in self.rows], dtype=np.float64)
        self._targets = np.array([row[1] for row in self.rows], dtype=np.float64)
        if self._inputs.ndim != 2 or self._targets.ndim != 2:
            raise ValueError("truth table rows must have uniform widths")

    @classmethod
    def xor(cls) -> "TruthTable":
        return cls(
            rows=[
                ((1.0, 1.0), (0.0,)),
                ((0.0, 1.0), (1.0,)),
                ((1.0, 0.0), (1.0,)),
                ((0.0, 0.0), (0.0,)),
            ]
        )

    @property
    def period(self) -> int:
        return len(self.rows)

    @property
    def inputs(self) -> Array:
        return self._inputs.copy()

    @property
    def targets(self) -> Array:
        return self._targets.copy()

    def write(self, state: NetworkState, iteration: int) -> None:
        if self._inputs.shape[1] != state.input_count:
            raise ValueError(
                f"truth table rows have {self._inputs.shape[1]} inputs, network has "
                f"{state.input_count}"
            )
        if self._targets.shape[1] != state.output_count:
            raise ValueError(
                f"truth table rows have {self._targets.shape[1]} outputs, network has "
                f"{state.output_count}"
            )
        row = iteration % self.period
        state.values[state.inputs] = self._inputs[row]
        state.expected[state.outputs] = self._targets[row]


def build_generator(
    name: str, rng: np.random.Generator, **options: object
) -> ExampleGenerator:
    """Resolve a generator from its configuration name."""

    key = name.lower()
    if key == "random":
        return RandomPattern(rng, threshold=float(options.get("threshold", 0.5)))
    if key == "xor":
        return TruthTable.xor()
    if key == "truth_table":
        rows = options.get("rows")
        if not rows:
            raise ValueError("truth_table generator requires 'rows'")
        return TruthTable(rows=[(tuple(r[0]), tuple(r[1])) for r in rows])  # type: ignore[index, union-attr]
    if key == "fixed":
        pattern = options.get("pattern")
        if pattern is not None:
            return FixedPattern(pattern=np.asarray(pattern, dtype=np.float64))
        size = options.get("size")
        if size is None:
            raise ValueError("fixed generator requires 'pattern' or 'size'")
        return FixedPattern.random(rng, int(size))  # type: ignore[arg-type]
    raise ValueError(f"Unknown example generator: {name}")


__all__ = [
    "ExampleGenerator",
    "RandomPattern",
    "FixedPattern",
    "TruthTable",
    "build_generator",
]
