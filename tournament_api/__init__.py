"""Tournament Board API: matches, standings and player stats with primary/secondary readiness."""

__version__ = "1.0.0"
