"""
Couche services applicatifs (cas d'usage).

- SeriesMonitoringService : monitoring et demonitoring des series
- MovieMonitoringService : monitoring et suppression des films
- HealthService : etat des backends

Les services dependent des ports definis dans core/, jamais des
implementations concretes des adaptateurs.
"""

from arrlink.services.health import HealthReport, HealthService
from arrlink.services.movie_monitoring import (
    DeleteMovieResult,
    MonitorMovieResult,
    MovieMonitoringService,
)
from arrlink.services.series_monitoring import (
    MonitorSeriesResult,
    SeriesMonitoringService,
    UnmonitorSeriesResult,
)

__all__ = [
    "DeleteMovieResult",
    "HealthReport",
    "HealthService",
    "MonitorMovieResult",
    "MonitorSeriesResult",
    "MovieMonitoringService",
    "SeriesMonitoringService",
    "UnmonitorSeriesResult",
]
