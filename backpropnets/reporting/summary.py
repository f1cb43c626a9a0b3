"""Deterministic summaries of SSE traces."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np


def window_means(sse: Sequence[float], window: int) -> tuple[float, float]:
    """Mean SSE over the first and the last ``window`` iterations."""

    arr = np.asarray(sse, dtype=np.float64)
    if arr.size == 0:
        return 0.0, 0.0
    window = max(1, min(int(window), arr.size))
    return float(arr[:window].mean()), float(arr[-window:].mean())


def summarise(sse: Sequence[float], *, window: int = 1000) -> Mapping[str, object]:
    arr = np.asarray(sse, dtype=np.float64)
    if arr.size == 0:
        return {"version": 1, "iterations": 0, "window": 0, "sse": {}}
    first, last = window_means(arr, window)
    return {
        "version": 1,
        "iterations": int(arr.size),
        "window": int(min(window, arr.size)),
        "sse": {
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "last": float(arr[-1]),
            "first_window_mean": first,
            "last_window_mean": last,
        },
    }


def write_summary(
    sse: Sequence[float],
    out_summary_json: str | Path,
    *,
    window: int = 1000,
    extra: Mapping[str, object] | None = None,
) -> str:
    """Write a deterministic summary of an SSE trace."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = dict(summarise(sse, window=window))
    if extra:
        summary.update(extra)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["summarise", "window_means", "write_summary"]
