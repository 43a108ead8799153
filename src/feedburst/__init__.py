"""feedburst: read your feeds in bursts instead of one item at a time."""

__version__ = "0.1.0"
