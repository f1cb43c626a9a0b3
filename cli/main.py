"""Command line entry point for BackpropNets training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from backpropnets.training import pipelines


def _format_result(result) -> str:
    payload = {
        "iterations": result.iterations,
        "final_sse": result.final_sse,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
    }
    table = result.evaluation.get("truth_table")
    if table:
        payload["truth_table"] = [
            {"inputs": row["inputs"], "outputs": [round(v, 4) for v in row["outputs"]]}
            for row in table
        ]
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument("--seed", type=int, help="Seed for wiring and examples")
    parser.add_argument("--iterations", type=int, help="Override the iteration budget")
    parser.add_argument("--learning-rate", type=float, help="Override the learning rate")
    parser.add_argument(
        "--snapshot-every",
        type=int,
        help="Iterations between snapshots handed to reporters (0 disables)",
    )
    parser.add_argument(
        "--hidden-gradient",
        choices=["post_update", "pre_update"],
        help="Which hidden→output weight feeds the hidden error gradient",
    )
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write an SSE curve after the run"
    )
    parser.add_argument(
        "--enable-frames", action="store_true", help="Write activation frames per snapshot"
    )
    parser.add_argument(
        "--progress", action="store_true", help="Print SSE at every snapshot"
    )
    parser.add_argument("--quiet", action="store_true", help="Suppress the startup banner")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = _load_override(args.config)
        if {"network", "examples", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = _merge(config, override)

    train = config.setdefault("train", {})
    if args.seed is not None:
        train["seed"] = int(args.seed)
    if args.iterations is not None:
        train["iterations"] = int(args.iterations)
    if args.learning_rate is not None:
        train["learning_rate"] = float(args.learning_rate)
    if args.snapshot_every is not None:
        train["snapshot_every"] = int(args.snapshot_every)
    if args.hidden_gradient:
        train["hidden_gradient"] = args.hidden_gradient
    if args.run_dir is not None:
        train["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train["enable_plots"] = True
    if args.enable_frames:
        train["enable_frames"] = True
    if args.progress:
        train["progress"] = True
    if args.quiet:
        train["quiet"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
