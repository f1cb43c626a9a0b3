import json

import numpy as np

from backpropnets.core.types import Snapshot
from backpropnets.reporting.frames import FrameWriter, intensity
from backpropnets.reporting.metrics import CsvSink, JsonlSink
from backpropnets.reporting.plots import PlotAdapter
from backpropnets.reporting.progress import ProgressPrinter
from backpropnets.reporting.summary import summarise, write_summary


def _snapshot(iteration: int, size: int = 6, sse: float = 0.5) -> Snapshot:
    values = np.linspace(0.0, 1.0, size)
    values.flags.writeable = False
    return Snapshot(iteration=iteration, activations=values, sse=sse)


def test_intensity_truncates_to_gray_levels():
    assert intensity(np.array([0.0, 0.5, 1.0, 0.999])).tolist() == [0, 127, 255, 254]


def test_jsonl_and_csv_sinks(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", seed=3, sha="abc")
    csv_sink = CsvSink(tmp_path / "m.csv")
    for it in (0, 10):
        jsonl.on_snapshot(_snapshot(it, sse=1.0 / (it + 1)))
        csv_sink(_snapshot(it))

    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert [r["iteration"] for r in records] == [0, 10]
    assert records[0] == {"iteration": 0, "sse": 1.0, "seed": 3, "sha": "abc"}

    lines = (tmp_path / "m.csv").read_text().splitlines()
    assert lines[0] == "iteration,sse"
    assert len(lines) == 3


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_snapshot(_snapshot(0, sse=1.0))
    adapter.on_snapshot(_snapshot(1, sse=0.5))
    adapter.close()
    assert (tmp_path / "sse.png").exists()


def test_plot_adapter_disabled_writes_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "off", enable_plots=False)
    adapter.on_snapshot(_snapshot(0))
    adapter.close()
    assert not (tmp_path / "off").exists()


def test_frame_writer_grid_layout(tmp_path):
    writer = FrameWriter(tmp_path, inputs=slice(0, 4), outputs=slice(6, 10), buffer_size=2)
    writer.on_snapshot(_snapshot(0, size=10))
    assert writer.written == []
    writer.on_snapshot(_snapshot(500, size=10))
    assert [p.name for p in writer.written] == ["000000.png", "000500.png"]
    writer.on_snapshot(_snapshot(1000, size=10))
    writer.close()
    assert (tmp_path / "001000.png").exists()


def test_frame_writer_cell_layout(tmp_path):
    writer = FrameWriter(tmp_path, inputs=slice(1, 3), outputs=slice(5, 6))
    writer.on_snapshot(_snapshot(101, size=6))
    writer.close()
    assert (tmp_path / "000101.png").exists()


def test_progress_printer(capsys):
    printer = ProgressPrinter(show_outputs=True, outputs=slice(4, 6))
    printer(_snapshot(7, sse=0.25))
    out = capsys.readouterr().out
    assert "iteration        7" in out
    assert "sse 0.250000" in out
    assert "outputs [0.800 1.000]" in out


def test_summary_windows(tmp_path):
    trace = np.concatenate([np.full(10, 4.0), np.full(10, 1.0)])
    summary = summarise(trace, window=10)
    assert summary["sse"]["first_window_mean"] == 4.0
    assert summary["sse"]["last_window_mean"] == 1.0
    assert summary["iterations"] == 20

    path = write_summary(trace, tmp_path / "summary.json", window=10, extra={"note": 1})
    payload = json.loads(open(path).read())
    assert payload["note"] == 1
    assert summarise([], window=5)["iterations"] == 0
