"""
Tests unitaires pour les commandes CLI.

Tests couvrant:
- health: tableau des backends et code de sortie
- search-series / search-library: recherches et erreurs affichees
- monitor-series / unmonitor-series: option --select et resultats
- monitor-movie / delete-movie: options et code de sortie
- -v / -q: niveau de log de la console
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import typer
from typer.testing import CliRunner

from arrlink.adapters.cli.display import format_change
from arrlink.adapters.cli.helpers import parse_selection_option
from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import HealthStatus, LibraryItem, Movie, SeasonState, Series
from arrlink.core.errors import InvalidSearchQueryError, ServiceUnavailableError
from arrlink.core.value_objects.selection import (
    EpisodeSelection,
    MonitoringAction,
    MonitoringChange,
)
from arrlink.main import app
from arrlink.services.health import HealthReport
from arrlink.services.movie_monitoring import DeleteMovieResult, MonitorMovieResult
from arrlink.services.series_monitoring import MonitorSeriesResult, UnmonitorSeriesResult

runner = CliRunner()

SERIES = Series(
    id=12, tvdb_id=81189, title="Breaking Bad", year=2008, monitored=True,
    seasons=[SeasonState(0, False), SeasonState(1, True), SeasonState(2, False)],
)
MOVIE = Movie(id=21, tmdb_id=603, title="The Matrix", year=1999, monitored=True, has_file=True)


@pytest.fixture
def mock_container():
    """Mock le Container instancie par le decorateur @with_container()."""
    with patch("arrlink.adapters.cli.helpers.Container") as mock_cls:
        container_instance = MagicMock()
        mock_cls.return_value = container_instance
        for name in ("sonarr_client", "radarr_client", "emby_client"):
            getattr(container_instance, name).return_value.close = AsyncMock()
        yield container_instance


class TestHealthCommand:
    def test_healthy_backends(self, mock_container) -> None:
        mock_container.health_service.return_value.check_all = AsyncMock(
            return_value=HealthReport([
                HealthStatus(BackendKind.SONARR, True, 12.0, version="4.0.2.1183"),
            ])
        )

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 0
        assert "sonarr" in result.output
        assert "4.0.2.1183" in result.output

    def test_unhealthy_backend_exits_with_error(self, mock_container) -> None:
        mock_container.health_service.return_value.check_all = AsyncMock(
            return_value=HealthReport([
                HealthStatus(BackendKind.RADARR, False, error="unreachable"),
            ])
        )

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 1
        assert "KO" in result.output

    def test_no_backend_configured(self, mock_container) -> None:
        mock_container.health_service.return_value.check_all = AsyncMock(
            return_value=HealthReport([])
        )

        result = runner.invoke(app, ["health"])

        assert result.exit_code == 0
        assert "Aucun backend configure." in result.output

    def test_clients_closed(self, mock_container) -> None:
        mock_container.health_service.return_value.check_all = AsyncMock(
            return_value=HealthReport([])
        )

        runner.invoke(app, ["health"])

        mock_container.sonarr_client.return_value.close.assert_awaited_once()
        mock_container.emby_client.return_value.close.assert_awaited_once()


class TestSearchCommands:
    def test_search_series(self, mock_container) -> None:
        mock_container.sonarr_client.return_value.search_series = AsyncMock(
            return_value=[SERIES]
        )

        result = runner.invoke(app, ["search-series", "breaking bad"])

        assert result.exit_code == 0
        assert "81189" in result.output
        assert "Breaking Bad" in result.output

    def test_search_series_invalid_query(self, mock_container) -> None:
        mock_container.sonarr_client.return_value.search_series = AsyncMock(
            side_effect=InvalidSearchQueryError("Search query too short")
        )

        result = runner.invoke(app, ["search-series", "b"])

        assert result.exit_code == 1
        assert "Erreur:" in result.output

    def test_search_series_backend_error(self, mock_container) -> None:
        mock_container.sonarr_client.return_value.search_series = AsyncMock(
            side_effect=ServiceUnavailableError("HTTP 503", status_code=503)
        )

        result = runner.invoke(app, ["search-series", "breaking bad"])

        assert result.exit_code == 1
        assert "temporarily unavailable" in result.output

    def test_search_series_no_result(self, mock_container) -> None:
        mock_container.sonarr_client.return_value.search_series = AsyncMock(return_value=[])

        result = runner.invoke(app, ["search-series", "nothing here"])

        assert result.exit_code == 0
        assert "Aucun resultat." in result.output

    def test_search_library_builds_links(self, mock_container) -> None:
        emby = mock_container.emby_client.return_value
        emby.search_library = AsyncMock(
            return_value=[LibraryItem("555", "Matrix", "Movie", 1999, "server-abc")]
        )
        emby.build_playback_url = MagicMock(return_value="http://emby/item/555")

        result = runner.invoke(app, ["search-library", "matrix", "--limit", "5"])

        assert result.exit_code == 0
        assert "Matrix" in result.output
        emby.search_library.assert_awaited_once_with("matrix", limit=5)
        emby.build_playback_url.assert_called_once_with("555", "server-abc")


class TestSeriesCommands:
    def test_monitor_series_with_selection(self, mock_container) -> None:
        service = mock_container.series_monitoring.return_value
        service.monitor_and_download = AsyncMock(
            return_value=MonitorSeriesResult(
                success=True, tvdb_id=81189, correlation_id="c", series=SERIES,
                series_added=True, search_triggered=True, command_id=42,
                changes=[MonitoringChange(1, MonitoringAction.MONITORED, (1, 2))],
            )
        )

        result = runner.invoke(app, ["monitor-series", "81189", "--select", "S1E1-2"])

        assert result.exit_code == 0
        assert "S01 E01,E02 : monitored" in result.output
        args = service.monitor_and_download.await_args
        assert args.args == (81189, [EpisodeSelection(1, (1, 2))])
        assert args.kwargs == {"quality_profile_id": None, "root_folder_path": None}

    def test_monitor_series_invalid_selection(self, mock_container) -> None:
        result = runner.invoke(app, ["monitor-series", "81189", "--select", "S1E0"])

        assert result.exit_code == 2
        mock_container.series_monitoring.assert_not_called()

    def test_monitor_series_failure_exits_with_error(self, mock_container) -> None:
        mock_container.series_monitoring.return_value.monitor_and_download = AsyncMock(
            return_value=MonitorSeriesResult(
                success=False, tvdb_id=1, correlation_id="c",
                error="Series with TVDB ID 1 not found",
            )
        )

        result = runner.invoke(app, ["monitor-series", "1"])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_unmonitor_series(self, mock_container) -> None:
        service = mock_container.series_monitoring.return_value
        service.unmonitor_and_delete = AsyncMock(
            return_value=UnmonitorSeriesResult(
                success=True, tvdb_id=81189, correlation_id="c", series=SERIES,
                series_deleted=True, episodes_unmonitored=2,
                changes=[MonitoringChange(0, MonitoringAction.DELETED_SERIES)],
            )
        )

        result = runner.invoke(
            app, ["unmonitor-series", "81189", "-s", "S1", "--delete-files"]
        )

        assert result.exit_code == 0
        assert "Serie supprimee" in result.output
        args = service.unmonitor_and_delete.await_args
        assert args.args == (81189, [EpisodeSelection(1)])
        assert args.kwargs == {"delete_files": True}


class TestMovieCommands:
    def test_monitor_movie(self, mock_container) -> None:
        service = mock_container.movie_monitoring.return_value
        service.monitor_and_download = AsyncMock(
            return_value=MonitorMovieResult(
                success=True, tmdb_id=603, correlation_id="c", movie=MOVIE,
                movie_added=True, search_triggered=True, command_id=7,
            )
        )

        result = runner.invoke(app, ["monitor-movie", "603", "--quality-profile", "4"])

        assert result.exit_code == 0
        assert "Film ajoute" in result.output
        service.monitor_and_download.assert_awaited_once_with(
            603, quality_profile_id=4, root_folder_path=None
        )

    def test_delete_movie_keep_files(self, mock_container) -> None:
        service = mock_container.movie_monitoring.return_value
        service.unmonitor_and_delete = AsyncMock(
            return_value=DeleteMovieResult(
                success=True, tmdb_id=603, correlation_id="c", movie=MOVIE,
                movie_deleted=True,
            )
        )

        result = runner.invoke(app, ["delete-movie", "603", "--keep-files"])

        assert result.exit_code == 0
        assert "Fichiers conserves" in result.output
        service.unmonitor_and_delete.assert_awaited_once_with(603, delete_files=False)

    def test_delete_movie_failure(self, mock_container) -> None:
        mock_container.movie_monitoring.return_value.unmonitor_and_delete = AsyncMock(
            return_value=DeleteMovieResult(
                success=False, tmdb_id=603, correlation_id="c",
                error="Movie not found in library",
            )
        )

        result = runner.invoke(app, ["delete-movie", "603"])

        assert result.exit_code == 1


def test_version() -> None:
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "arrlink v" in result.output


class TestVerbosity:
    @pytest.mark.parametrize("flags, level", [(["-v"], "DEBUG"), (["-vv"], "TRACE")])
    def test_verbose_raises_console_level(self, flags, level) -> None:
        with patch("arrlink.main.configure_logging") as configure:
            result = runner.invoke(app, [*flags, "version"])

        assert result.exit_code == 0
        assert configure.call_args.kwargs["log_level"] == level

    def test_default_keeps_configured_level(self) -> None:
        with patch("arrlink.main.configure_logging") as configure:
            runner.invoke(app, ["version"])

        configure.assert_not_called()

    def test_quiet_disables_logging(self) -> None:
        with patch("arrlink.main.configure_logging") as configure, \
                patch("arrlink.main.logger") as mock_logger:
            runner.invoke(app, ["-q", "-v", "version"])

        mock_logger.disable.assert_called_once_with("arrlink")
        configure.assert_not_called()


class TestParseSelectionOption:
    def test_empty_option(self) -> None:
        assert parse_selection_option(None) is None
        assert parse_selection_option("") is None

    def test_valid_selection(self) -> None:
        assert parse_selection_option("S1, S2E3-4") == [
            EpisodeSelection(1),
            EpisodeSelection(2, (3, 4)),
        ]

    def test_invalid_selection(self) -> None:
        with pytest.raises(typer.BadParameter):
            parse_selection_option("S1E0")


class TestFormatChange:
    def test_season_with_episodes(self) -> None:
        change = MonitoringChange(2, MonitoringAction.UNMONITORED, (5, 12))
        assert format_change(change) == "S02 E05,E12 : unmonitored"

    def test_whole_season(self) -> None:
        change = MonitoringChange(1, MonitoringAction.UNMONITORED_SEASON)
        assert format_change(change) == "S01 : unmonitored_season"

    def test_series_deleted(self) -> None:
        change = MonitoringChange(0, MonitoringAction.DELETED_SERIES)
        assert format_change(change) == "Serie : deleted_series"
