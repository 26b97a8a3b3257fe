"""Lane Racer: a lane-based racing game simulation core."""

__version__ = "0.1.0"
