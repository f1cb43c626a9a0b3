"""Command line interface for BackpropNets."""
