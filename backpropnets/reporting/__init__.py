"""Reporting utilities for BackpropNets."""

from .artifacts import write_manifest
from .frames import FrameWriter
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter
from .progress import ProgressPrinter
from .summary import write_summary

__all__ = [
    "write_manifest",
    "write_summary",
    "FrameWriter",
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "ProgressPrinter",
]
