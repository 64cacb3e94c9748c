"""
Business entities returned by the media backends.

Exports:
- Series, SeasonState, Episode: series manager entities
- Movie: movie manager entity
- QueueItem: download queue entry
- QualityProfile, RootFolder, CommandResult: backend configuration and commands
- LibraryItem: media library server item
- AddSeriesRequest, AddMovieRequest: creation parameters
- BackendCapabilities, HealthStatus: client metadata
"""

from arrlink.core.entities.media import (
    SPECIALS_SEASON,
    AddMovieRequest,
    AddSeriesRequest,
    BackendCapabilities,
    CommandResult,
    Episode,
    HealthStatus,
    LibraryItem,
    Movie,
    QualityProfile,
    QueueItem,
    RootFolder,
    SeasonState,
    Series,
)

__all__ = [
    "SPECIALS_SEASON",
    "AddMovieRequest",
    "AddSeriesRequest",
    "BackendCapabilities",
    "CommandResult",
    "Episode",
    "HealthStatus",
    "LibraryItem",
    "Movie",
    "QualityProfile",
    "QueueItem",
    "RootFolder",
    "SeasonState",
    "Series",
]
