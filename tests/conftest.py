"""
Fixtures pytest partagees pour les tests arrlink.

Ce module contient les fixtures communes utilisees dans les tests:
- FakeClock : horloge instantanee qui enregistre les attentes
- Mocks des ports (ISeriesManager, IMovieManager)
- Settings de test sans fichier .env
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from arrlink.config import Settings
from arrlink.core.entities.media import CommandResult
from arrlink.core.ports.backend_clients import IMovieManager, ISeriesManager
from arrlink.utils.timing import Clock


class FakeClock(Clock):
    """
    Horloge de test : sleep() avance le temps sans attendre.

    Les durees demandees sont conservees dans `sleeps` pour verification.
    """

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_series_manager() -> MagicMock:
    """
    Mock de ISeriesManager pour les tests d'orchestration.

    Toutes les methodes asynchrones sont des AsyncMock. Les valeurs de retour
    doivent etre configurees dans chaque test.
    """
    mock = MagicMock(spec=ISeriesManager)
    for name in (
        "search_series",
        "get_series_by_tvdb_id",
        "get_series",
        "add_series",
        "update_series",
        "delete_series",
        "get_episodes",
        "set_episodes_monitored",
        "delete_episode_file",
        "get_queue",
        "remove_queue_item",
        "trigger_series_search",
        "get_quality_profiles",
        "get_root_folders",
        "check_health",
        "close",
    ):
        setattr(mock, name, AsyncMock())
    mock.get_queue.return_value = []
    mock.trigger_series_search.return_value = CommandResult(id=42, name="SeriesSearch")
    return mock


@pytest.fixture
def mock_movie_manager() -> MagicMock:
    """Mock de IMovieManager, meme principe que mock_series_manager."""
    mock = MagicMock(spec=IMovieManager)
    for name in (
        "search_movies",
        "lookup_movie_by_tmdb_id",
        "get_movie_by_tmdb_id",
        "add_movie",
        "update_movie",
        "delete_movie",
        "get_queue",
        "remove_queue_item",
        "trigger_movie_search",
        "get_quality_profiles",
        "get_root_folders",
        "check_health",
        "close",
    ):
        setattr(mock, name, AsyncMock())
    mock.get_queue.return_value = []
    mock.trigger_movie_search.return_value = CommandResult(id=7, name="MoviesSearch")
    return mock


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """
    Settings de test : les trois backends configures, log dans tmp_path.

    _env_file=None evite de lire un .env present sur la machine.
    """
    return Settings(
        _env_file=None,
        sonarr_url="http://sonarr.test:8989",
        sonarr_api_key="sonarr-key",
        radarr_url="http://radarr.test:7878",
        radarr_api_key="radarr-key",
        emby_url="http://emby.test:8096",
        emby_api_key="emby-key",
        emby_user_id="user-1",
        log_file=tmp_path / "arrlink.log",
    )
