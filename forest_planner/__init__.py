"""Monte-Carlo rollout bot for the two-player forest game."""

__version__ = "0.1.0"
