"""Metrics sinks for training snapshots."""

from __future__ import annotations

import csv
import json
import subprocess
from pathlib import Path

from ..core.types import Snapshot


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


class JsonlSink:
    """Append-only JSONL writer, one record per snapshot."""

    def __init__(
        self,
        path: str | Path,
        *,
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or _git_sha()

    def on_snapshot(self, snapshot: Snapshot) -> None:
        record = {
            "iteration": int(snapshot.iteration),
            "sse": float(snapshot.sse),
            "seed": self.seed,
            "sha": self.sha,
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_snapshot


class CsvSink:
    """Write snapshot metrics to CSV with a stable schema."""

    fieldnames = ("iteration", "sse")

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def on_snapshot(self, snapshot: Snapshot) -> None:
        row = {"iteration": int(snapshot.iteration), "sse": float(snapshot.sse)}
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.fieldnames)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)

    __call__ = on_snapshot
