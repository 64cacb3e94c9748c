"""
Tests unitaires pour les regles pures du monitoring et l'annulation des telechargements.
"""

from unittest.mock import call

import pytest

from arrlink.core.entities.media import Episode, QualityProfile, QueueItem, RootFolder, SeasonState
from arrlink.core.errors import ServiceUnavailableError
from arrlink.core.value_objects.context import OperationContext
from arrlink.core.value_objects.selection import EpisodeSelection
from arrlink.services.downloads import CancellationReport, cancel_queue_items, load_queue
from arrlink.services.monitoring_strategy import (
    determine_monitoring_strategy,
    has_remaining_monitored_content,
    select_quality_profile,
    select_root_folder,
)

SEASONS = [SeasonState(0, True), SeasonState(1, False), SeasonState(2, True), SeasonState(3, False)]


def _episode(episode_id: int, season: int, monitored: bool) -> Episode:
    return Episode(
        id=episode_id, series_id=1, season_number=season, episode_number=episode_id,
        monitored=monitored,
    )


class TestDetermineMonitoringStrategy:
    def test_no_selection_monitors_regular_seasons(self) -> None:
        """Sans selection, les specials gardent leur etat."""
        planned = determine_monitoring_strategy(SEASONS)
        assert planned == [
            SeasonState(0, True),
            SeasonState(1, True),
            SeasonState(2, True),
            SeasonState(3, True),
        ]

    def test_no_selection_keeps_unmonitored_specials(self) -> None:
        planned = determine_monitoring_strategy([SeasonState(0, False), SeasonState(1, False)])
        assert planned == [SeasonState(0, False), SeasonState(1, True)]

    def test_selection_replaces_state(self) -> None:
        planned = determine_monitoring_strategy(
            SEASONS, [EpisodeSelection(1), EpisodeSelection(3, (2,))]
        )
        assert planned == [
            SeasonState(0, False),
            SeasonState(1, True),
            SeasonState(2, False),
            SeasonState(3, True),
        ]

    def test_selection_of_specials(self) -> None:
        planned = determine_monitoring_strategy(SEASONS, [EpisodeSelection(0)])
        assert [s.monitored for s in planned] == [True, False, False, False]


class TestHasRemainingMonitoredContent:
    def test_monitored_episode_remaining(self) -> None:
        assert has_remaining_monitored_content(
            SEASONS, {1: [_episode(1, 1, False)], 2: [_episode(2, 2, True)]}
        )

    def test_specials_ignored(self) -> None:
        assert not has_remaining_monitored_content(
            SEASONS, {0: [_episode(1, 0, True)], 1: [_episode(2, 1, False)]}
        )

    def test_missing_and_empty_seasons_count_as_empty(self) -> None:
        assert not has_remaining_monitored_content(SEASONS, {2: []})


class TestDefaults:
    def test_quality_profile_prefers_any(self) -> None:
        profiles = [QualityProfile(4, "HD-1080p"), QualityProfile(1, "Any")]
        assert select_quality_profile(profiles).id == 1

    def test_quality_profile_first_otherwise(self) -> None:
        assert select_quality_profile([QualityProfile(4, "HD"), QualityProfile(5, "4K")]).id == 4

    def test_no_quality_profile(self) -> None:
        assert select_quality_profile([]) is None

    def test_first_accessible_root_folder(self) -> None:
        folders = [RootFolder(1, "/offline", accessible=False), RootFolder(2, "/tv")]
        assert select_root_folder(folders).path == "/tv"
        assert select_root_folder(folders[:1]) is None


class TestDownloads:
    def test_report_warning(self) -> None:
        assert CancellationReport(found=2, cancelled=2).warning() is None
        assert CancellationReport(found=3, cancelled=1).warning() == (
            "Could not cancel 2 of 3 queue items"
        )

    @pytest.mark.asyncio
    async def test_cancel_continues_after_failure(self, mock_series_manager) -> None:
        queue = [QueueItem(1, series_id=5), QueueItem(2, series_id=6), QueueItem(3, series_id=5)]
        mock_series_manager.remove_queue_item.side_effect = [
            ServiceUnavailableError("x", status_code=503),
            None,
        ]
        ctx = OperationContext("corr")

        report = await cancel_queue_items(
            mock_series_manager, queue, lambda item: item.series_id == 5, ctx
        )

        assert report.found == 2
        assert report.cancelled == 1
        assert mock_series_manager.remove_queue_item.await_args_list == [
            call(1, remove_from_client=True, ctx=ctx),
            call(3, remove_from_client=True, ctx=ctx),
        ]

    @pytest.mark.asyncio
    async def test_unreadable_queue_becomes_warning(self, mock_series_manager) -> None:
        mock_series_manager.get_queue.side_effect = ServiceUnavailableError("x", status_code=503)
        warnings: list[str] = []

        queue = await load_queue(mock_series_manager, OperationContext(), warnings)

        assert queue == []
        assert warnings[0].startswith("Could not read download queue")
