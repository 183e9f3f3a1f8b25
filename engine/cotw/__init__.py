"""cotw: rules engine for a two-player cylinder-and-messenger board game."""

__version__ = "0.1.0"
