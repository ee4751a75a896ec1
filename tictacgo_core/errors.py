from __future__ import annotations


class InvalidIndex(IndexError):
    """A flat index or coordinate outside the board; indicates a coordinate translation bug."""


class GenerationExhausted(RuntimeError):
    """The generator used its whole attempt budget without producing an acceptable puzzle."""
