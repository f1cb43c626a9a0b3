"""Pipeline assembly for BackpropNets runs."""

from __future__ import annotations

import json
import time
import warnings
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

import numpy as np

from ..core.patterns import ExampleGenerator, TruthTable, build_generator
from ..core.propagation import predict
from ..core.topology import build_network
from ..core.types import NetworkState, RunResult
from ..reporting.artifacts import write_manifest
from ..reporting.frames import FrameWriter
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.progress import ProgressPrinter
from ..reporting.summary import window_means, write_summary
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "network": {
            "inputs": 2,
            "hidden": 2,
            "outputs": 1,
            "weight_scale": 2.0,
            "reserve_sentinel": True,
        },
        "examples": {"name": "xor"},
        "train": {
            "iterations": 100_000,
            "learning_rate": 0.2,
            "seed": 0,
            "snapshot_every": 101,
            "run_dir": "runs/xor",
        },
    },
    "autoassociator": {
        "network": {
            "inputs": 100,
            "hidden": 20,
            "outputs": 100,
            "weight_scale": 1.0,
            "reserve_sentinel": False,
        },
        "examples": {"name": "random"},
        "train": {
            "iterations": 2_000_000,
            "learning_rate": 0.6,
            "seed": 0,
            "snapshot_every": 500,
            "run_dir": "runs/autoassociator",
        },
    },
    "autoassociator-small": {
        "network": {
            "inputs": 16,
            "hidden": 8,
            "outputs": 16,
            "weight_scale": 1.0,
            "reserve_sentinel": False,
        },
        "examples": {"name": "random"},
        "train": {
            "iterations": 2_000,
            "learning_rate": 0.6,
            "seed": 0,
            "snapshot_every": 100,
            "run_dir": "runs/autoassociator-small",
            "summary_window": 200,
        },
    },
}

_SECTION_KEYS: Dict[str, set] = {
    "network": {"inputs", "hidden", "outputs", "weight_scale", "reserve_sentinel"},
    "examples": {"name", "threshold", "rows", "pattern", "size"},
    "train": {
        "iterations",
        "learning_rate",
        "seed",
        "snapshot_every",
        "hidden_gradient",
        "check_numerics",
        "run_dir",
        "enable_plots",
        "enable_frames",
        "frame_buffer",
        "progress",
        "quiet",
        "summary_window",
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def _read_preset_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load preset files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported preset file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Preset {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = _read_preset_file(file)
                missing = set(_SECTION_KEYS) - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                found[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = found
    cache = _FILE_PRESETS_CACHE or {}
    return {name: deepcopy(cfg) for name, cfg in cache.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def _warn_unknown_keys(config: Mapping[str, object]) -> None:
    for section, allowed in _SECTION_KEYS.items():
        unknown = set(config.get(section, {}) or {}) - allowed
        if unknown:
            warnings.warn(
                f"Ignoring unknown {section} keys: {', '.join(sorted(unknown))}",
                UserWarning,
                stacklevel=3,
            )


def build_run(config: Mapping[str, object]) -> tuple[NetworkState, ExampleGenerator, np.random.Generator]:
    """Create the network and example generator described by ``config``.

    One seeded generator feeds both the wiring and the examples.
    """

    net_cfg = dict(config["network"])
    ex_cfg = dict(config.get("examples", {}) or {})
    train_cfg = dict(config.get("train", {}) or {})

    rng = np.random.default_rng(int(train_cfg.get("seed", 0)))
    state = build_network(
        int(net_cfg["inputs"]),
        int(net_cfg["hidden"]),
        int(net_cfg["outputs"]),
        rng,
        weight_scale=float(net_cfg.get("weight_scale", 1.0)),
        reserve_sentinel=bool(net_cfg.get("reserve_sentinel", False)),
    )
    name = str(ex_cfg.pop("name", "random"))
    if name == "fixed" and "pattern" not in ex_cfg:
        ex_cfg.setdefault("size", state.input_count)
    generator = build_generator(name, rng, **ex_cfg)
    return state, generator, rng


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    _warn_unknown_keys(config)
    train_cfg = dict(config.get("train", {}) or {})

    state, generator, _ = build_run(config)

    iterations = int(train_cfg.get("iterations", 1000))
    learning_rate = float(train_cfg.get("learning_rate", 0.2))
    seed = int(train_cfg.get("seed", 0))
    snapshot_every = int(train_cfg.get("snapshot_every", 0))
    hidden_gradient = str(train_cfg.get("hidden_gradient", "post_update"))
    quiet = bool(train_cfg.get("quiet", False))

    run_dir = _resolve_run_dir(train_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)

    if not quiet:
        _print_startup_summary(
            state=state,
            generator=type(generator).__name__,
            learning_rate=learning_rate,
            iterations=iterations,
            hidden_gradient=hidden_gradient,
        )

    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    callbacks: List[object] = [jsonl, CsvSink(run_dir / "metrics.csv")]
    callbacks.append(PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False))))
    if train_cfg.get("enable_frames", False):
        callbacks.append(
            FrameWriter(
                run_dir / "frames",
                inputs=state.inputs,
                outputs=state.outputs,
                buffer_size=int(train_cfg.get("frame_buffer", 64)),
            )
        )
    if train_cfg.get("progress", False) and not quiet:
        callbacks.append(ProgressPrinter(show_outputs=state.output_count <= 8, outputs=state.outputs))

    trainer = Trainer(
        state,
        generator,
        learning_rate=learning_rate,
        snapshot_every=snapshot_every,
        hidden_gradient=hidden_gradient,
        check_numerics=bool(train_cfg.get("check_numerics", True)),
        callbacks=callbacks,
    )
    result = trainer.run(iterations)

    window = int(train_cfg.get("summary_window", 1000))
    evaluation = evaluate(state, generator, result.sse, window=window)

    config_copy = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=config_copy,
        network=_describe(state),
    )
    summary_path = write_summary(
        result.sse, run_dir / "summary.json", window=window, extra={"evaluation": evaluation}
    )
    (run_dir / "config.json").write_text(json.dumps(config_copy, indent=2))

    return RunResult(
        iterations=result.iterations,
        sse=result.sse,
        final_sse=result.final_sse,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        evaluation=evaluation,
    )


def evaluate(
    state: NetworkState,
    generator: ExampleGenerator,
    sse: np.ndarray,
    *,
    window: int = 1000,
) -> Dict[str, object]:
    """Score a trained network without disturbing its state."""

    first, last = window_means(sse, window)
    report: Dict[str, object] = {"first_window_sse": first, "last_window_sse": last}
    if isinstance(generator, TruthTable):
        probe = state.copy()
        rows = []
        for inputs, targets in zip(generator.inputs, generator.targets):
            outputs = predict(probe, inputs)
            rows.append(
                {
                    "inputs": inputs.tolist(),
                    "expected": targets.tolist(),
                    "outputs": outputs.tolist(),
                }
            )
        report["truth_table"] = rows
    return report


def _describe(state: NetworkState) -> Mapping[str, object]:
    return {
        "inputs": state.input_count,
        "hidden": state.hidden_count,
        "outputs": state.output_count,
        "reserve_sentinel": state.reserve_sentinel,
        "parameters": int(state.weight_mask().sum()) + state.hidden_count + state.output_count,
    }


def _resolve_run_dir(train_cfg: Mapping[str, object]) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


def _print_startup_summary(
    *,
    state: NetworkState,
    generator: str,
    learning_rate: float,
    iterations: int,
    hidden_gradient: str,
) -> None:
    print("=== BackpropNets run ===")
    print(f"Nodes         : {state.input_count}-{state.hidden_count}-{state.output_count}")
    print(f"Examples      : {generator}")
    print(f"Learning rate : {learning_rate}")
    print(f"Iterations    : {iterations}")
    print(f"Hidden grad   : {hidden_gradient}")
    print("========================")


__all__ = ["run_pipeline", "build_run", "evaluate", "load_preset", "presets"]
