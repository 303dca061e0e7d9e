"""Building blocks for assembling a shell prompt."""

__version__ = "0.1.0"
