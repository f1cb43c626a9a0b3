"""Grayscale frames of network activations."""

from __future__ import annotations

import math
from pathlib import Path
from typing import List

import numpy as np

from ..core.types import Array, Snapshot


def intensity(values: Array) -> Array:
    """Map activations in [0, 1] to 0..255 gray levels by truncation."""

    scaled = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0) * 255.0
    return scaled.astype(np.uint8)


def _grid_side(count: int) -> int | None:
    side = math.isqrt(count)
    return side if side * side == count and side > 1 else None


class FrameWriter:
    """Buffer snapshots and render them as numbered PNG frames.

    Square input/output layers are drawn as two grids side by side, input on
    the left. Anything else is drawn as one cell per input over a background
    strip shaded by the first output, captioned with iteration and SSE.
    Rendering happens in batches of ``buffer_size`` snapshots and on
    :meth:`close`, never inside the callback itself.
    """

    def __init__(
        self,
        frames_dir: str | Path,
        *,
        inputs: slice,
        outputs: slice,
        buffer_size: int = 64,
        dpi: int = 100,
    ) -> None:
        self.frames_dir = Path(frames_dir)
        self.frames_dir.mkdir(parents=True, exist_ok=True)
        self.inputs = inputs
        self.outputs = outputs
        self.buffer_size = max(1, int(buffer_size))
        self.dpi = dpi
        self._pending: List[Snapshot] = []
        self.written: List[Path] = []

    def on_snapshot(self, snapshot: Snapshot) -> None:
        self._pending.append(snapshot)
        if len(self._pending) >= self.buffer_size:
            self.flush()

    __call__ = on_snapshot

    def flush(self) -> None:
        if not self._pending:
            return
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        pending, self._pending = self._pending, []
        for snapshot in pending:
            fig = self._render(plt, snapshot)
            path = self.frames_dir / f"{snapshot.iteration:06d}.png"
            fig.savefig(path, dpi=self.dpi)
            plt.close(fig)
            self.written.append(path)

    def close(self) -> None:
        self.flush()

    # ------------------------------------------------------------------
    # Layouts

    def _render(self, plt, snapshot: Snapshot):
        values = snapshot.activations
        in_vals = values[self.inputs]
        out_vals = values[self.outputs]
        side = _grid_side(in_vals.size)
        if side is not None and out_vals.size == in_vals.size:
            return self._render_grids(plt, in_vals, out_vals, side)
        return self._render_cells(plt, in_vals, out_vals, snapshot)

    def _render_grids(self, plt, in_vals: Array, out_vals: Array, side: int):
        fig, (left, right) = plt.subplots(1, 2, figsize=(10, 5))
        for ax, vals in ((left, in_vals), (right, out_vals)):
            # node x * side + y sits in column x, row y
            grid = intensity(vals).reshape(side, side).T
            ax.imshow(grid, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
            ax.set_xticks([])
            ax.set_yticks([])
        fig.tight_layout()
        return fig

    def _render_cells(self, plt, in_vals: Array, out_vals: Array, snapshot: Snapshot):
        background = int(intensity(out_vals[:1])[0]) if out_vals.size else 0
        fig, ax = plt.subplots(figsize=(5, 5))
        fig.patch.set_facecolor(str(background / 255.0))
        cells = intensity(in_vals).reshape(-1, 1)
        ax.imshow(cells, cmap="gray", vmin=0, vmax=255, interpolation="nearest")
        ax.set_xticks([])
        ax.set_yticks([])
        caption = 255 - background
        ax.set_title(
            f"Iteration {snapshot.iteration:06d}, SSE {snapshot.sse:.6f}",
            color=str(caption / 255.0),
        )
        return fig


__all__ = ["FrameWriter", "intensity"]
