"""Groundwork — chunking, embedding and temporally re-ranked search over page databases."""

__version__ = "0.1.0"
