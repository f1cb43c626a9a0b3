"""Online training loop for BackpropNets."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..core.backprop import HIDDEN_GRADIENT_MODES, update_weights
from ..core.patterns import ExampleGenerator
from ..core.propagation import activate_network, check_activations
from ..core.types import NetworkState, RunResult, Snapshot


class Trainer:
    """Run the generate → propagate → update cycle for a fixed budget."""

    def __init__(
        self,
        state: NetworkState,
        generator: ExampleGenerator,
        *,
        learning_rate: float,
        snapshot_every: int = 0,
        hidden_gradient: str = "post_update",
        check_numerics: bool = True,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if not learning_rate > 0:
            raise ValueError(f"learning_rate must be positive, got {learning_rate}")
        if snapshot_every < 0:
            raise ValueError(f"snapshot_every must be >= 0, got {snapshot_every}")
        if hidden_gradient not in HIDDEN_GRADIENT_MODES:
            raise ValueError(
                f"hidden_gradient must be one of {HIDDEN_GRADIENT_MODES}, got {hidden_gradient!r}"
            )
        self.state = state
        self.generator = generator
        self.learning_rate = float(learning_rate)
        self.snapshot_every = int(snapshot_every)
        self.hidden_gradient = hidden_gradient
        self.check_numerics = check_numerics
        self.callbacks = list(callbacks or [])

    def step(self, iteration: int) -> float:
        """Train on a single example and return its SSE."""

        self.generator.write(self.state, iteration)
        activate_network(self.state)
        if self.check_numerics:
            check_activations(self.state)
        return update_weights(
            self.state, self.learning_rate, hidden_gradient=self.hidden_gradient
        )

    def run(self, iterations: int) -> RunResult:
        if iterations < 0:
            raise ValueError(f"iterations must be >= 0, got {iterations}")

        trace = np.zeros(iterations, dtype=np.float64)
        try:
            for iteration in range(iterations):
                sse = self.step(iteration)
                trace[iteration] = sse
                if self.snapshot_every and iteration % self.snapshot_every == 0:
                    self._emit(self._snapshot(iteration, sse))
        finally:
            self._close()

        final = float(trace[-1]) if iterations else 0.0
        return RunResult(iterations=iterations, sse=trace, final_sse=final)

    # ------------------------------------------------------------------
    # Internal helpers

    def _snapshot(self, iteration: int, sse: float) -> Snapshot:
        activations = self.state.values.copy()
        activations.flags.writeable = False
        return Snapshot(iteration=iteration, activations=activations, sse=sse)

    def _emit(self, snapshot: Snapshot) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_snapshot"):
                callback.on_snapshot(snapshot)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(snapshot)

    def _close(self) -> None:
        for callback in self.callbacks:
            close = getattr(callback, "close", None)
            if callable(close):
                close()


__all__ = ["Trainer"]
