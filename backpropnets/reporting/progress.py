"""Console progress output."""

from __future__ import annotations

import sys
from typing import TextIO

from ..core.types import Snapshot


class ProgressPrinter:
    """Print one line per snapshot with the iteration and its SSE."""

    def __init__(
        self,
        stream: TextIO | None = None,
        *,
        show_outputs: bool = False,
        outputs: slice | None = None,
    ) -> None:
        self.stream = stream
        self.show_outputs = show_outputs
        self.outputs = outputs

    def on_snapshot(self, snapshot: Snapshot) -> None:
        line = f"iteration {snapshot.iteration:>8d}  sse {snapshot.sse:.6f}"
        if self.show_outputs and self.outputs is not None:
            values = " ".join(f"{v:.3f}" for v in snapshot.activations[self.outputs])
            line += f"  outputs [{values}]"
        print(line, file=self.stream or sys.stdout)

    __call__ = on_snapshot
