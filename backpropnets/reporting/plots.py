"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

from ..core.types import Snapshot


class PlotAdapter:
    """Collect SSE per snapshot and optionally emit a matplotlib figure."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._history: List[Tuple[int, float]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_snapshot(self, snapshot: Snapshot):
        if not self.enable_plots:
            return
        self._history.append((snapshot.iteration, float(snapshot.sse)))

    def close(self) -> None:
        if not self.enable_plots or not self._history:
            return
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        iterations, errors = zip(*self._history)
        fig, ax = plt.subplots()
        ax.plot(iterations, errors)
        ax.set_xlabel("Iteration")
        ax.set_ylabel("SSE")
        ax.set_title("Training Error")
        plot_path = self.run_dir / "sse.png"
        fig.savefig(plot_path)
        plt.close(fig)

    __call__ = on_snapshot
