"""Mindshare: leaderboard rank checker for the multi-timeframe mindshare leaderboard."""

__version__ = "0.1.0"
__author__ = "Mindshare Team"

__all__ = ["__version__", "__author__"]
