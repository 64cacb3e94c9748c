"""Sous-package CLI commands - re-exporte les commandes publiques."""

from arrlink.adapters.cli.commands.backend_commands import (
    health,
    search_library,
    search_movies,
    search_series,
)
from arrlink.adapters.cli.commands.monitoring_commands import (
    delete_movie,
    monitor_movie,
    monitor_series,
    unmonitor_series,
)

__all__ = [
    "delete_movie",
    "health",
    "monitor_movie",
    "monitor_series",
    "search_library",
    "search_movies",
    "search_series",
    "unmonitor_series",
]
