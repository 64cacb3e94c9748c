"""
Media entities returned by the backends.

Entities are parsed from the backend JSON payloads by the API adapters.
`raw` keeps the original payload so that update requests can send the
full resource back, as the *arr APIs require.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from arrlink.core.backends import BackendKind
from arrlink.core.value_objects.api_version import ApiVersionResult

SPECIALS_SEASON = 0


@dataclass(frozen=True)
class SeasonState:
    """
    Monitoring flag of one season.

    Attributes:
        season_number: Season number (0 = specials)
        monitored: Whether the season is monitored at series level
    """

    season_number: int
    monitored: bool

    @property
    def is_specials(self) -> bool:
        return self.season_number == SPECIALS_SEASON


@dataclass
class Series:
    """
    TV series as known by the series manager (or a lookup result).

    Attributes:
        id: Series manager ID, None for lookup results not yet added
        tvdb_id: TheTVDB ID used as external identifier
        title: Series title
        year: First air year
        monitored: Series-level monitored flag
        seasons: Season monitoring states
        quality_profile_id: Quality profile assigned to the series
        root_folder_path: Root folder of the series
        raw: Original payload from the backend
    """

    id: Optional[int]
    tvdb_id: int
    title: str
    year: Optional[int] = None
    monitored: bool = False
    seasons: list[SeasonState] = field(default_factory=list)
    quality_profile_id: Optional[int] = None
    root_folder_path: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_fully_monitored(self) -> bool:
        """True if the series and every non-specials season are monitored."""
        regular = [s for s in self.seasons if not s.is_specials]
        return self.monitored and all(s.monitored for s in regular)

    def season(self, season_number: int) -> Optional[SeasonState]:
        for state in self.seasons:
            if state.season_number == season_number:
                return state
        return None


@dataclass
class Episode:
    id: int
    series_id: int
    season_number: int
    episode_number: int
    title: str = ""
    monitored: bool = False
    has_file: bool = False
    episode_file_id: Optional[int] = None


@dataclass
class Movie:
    """
    Movie as known by the movie manager (or a lookup result).

    Attributes:
        id: Movie manager ID, None for lookup results not yet added
        tmdb_id: The Movie Database ID used as external identifier
        title: Movie title
        year: Release year
        monitored: Monitored flag
        has_file: Whether a file is already downloaded
        raw: Original payload from the backend
    """

    id: Optional[int]
    tmdb_id: int
    title: str
    year: Optional[int] = None
    monitored: bool = False
    has_file: bool = False
    quality_profile_id: Optional[int] = None
    root_folder_path: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass(frozen=True)
class QueueItem:
    """
    Download queue entry owned by the backend.

    Only read and cancelled by the orchestrator, never persisted.
    """

    id: int
    title: str = ""
    status: str = ""
    series_id: Optional[int] = None
    episode_id: Optional[int] = None
    season_number: Optional[int] = None
    movie_id: Optional[int] = None


@dataclass(frozen=True)
class QualityProfile:
    id: int
    name: str


@dataclass(frozen=True)
class RootFolder:
    id: int
    path: str
    accessible: bool = True
    free_space: Optional[int] = None


@dataclass(frozen=True)
class CommandResult:
    """Command queued by the backend (e.g. SeriesSearch)."""

    id: int
    name: str
    status: str = ""


@dataclass(frozen=True)
class LibraryItem:
    """Item of the media library server (movie or series)."""

    id: str
    name: str
    item_type: str
    year: Optional[int] = None
    server_id: Optional[str] = None
    provider_ids: dict[str, str] = field(default_factory=dict)


@dataclass
class AddSeriesRequest:
    """
    Parameters to add a series looked up by TVDB ID.

    Attributes:
        series: Lookup result to add
        quality_profile_id: Quality profile to assign
        root_folder_path: Root folder to store the series in
        seasons: Season monitoring states to apply on creation
        monitor: Episode monitor type understood by the backend ("all", "none", ...)
    """

    series: Series
    quality_profile_id: int
    root_folder_path: str
    seasons: list[SeasonState]
    monitor: str = "all"


@dataclass
class AddMovieRequest:
    movie: Movie
    quality_profile_id: int
    root_folder_path: str
    minimum_availability: str = "released"
    monitored: bool = True


@dataclass(frozen=True)
class BackendCapabilities:
    can_search: bool
    can_request: bool
    can_monitor: bool
    supports_queue: bool
    supported_media_types: tuple[str, ...]


@dataclass
class HealthStatus:
    """
    Result of a backend health check.

    Attributes:
        backend: Backend checked
        healthy: True if the system-status endpoint answered correctly
        response_time_ms: Round-trip time of the check
        version: Version reported by the backend, if any
        error: User-facing error message when unhealthy
        api_version: Negotiated API version, if available
        warnings: Non-blocking issues (version warnings, pending restart)
    """

    backend: BackendKind
    healthy: bool
    response_time_ms: float = 0.0
    version: Optional[str] = None
    error: Optional[str] = None
    api_version: Optional[ApiVersionResult] = None
    warnings: list[str] = field(default_factory=list)
