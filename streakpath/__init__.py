"""StreakPath - gamified micro-learning lesson engine."""

__version__ = "0.1.0"
