"""ROM launcher: stage a ROM, pair it with a shuffled MSU and launch it."""

__version__ = "0.1.0"
