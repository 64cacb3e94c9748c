"""
Tests unitaires pour la validation des recherches et les entites media.
"""

import pytest

from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import SeasonState, Series
from arrlink.core.errors import InvalidSearchQueryError
from arrlink.core.value_objects.context import OperationContext
from arrlink.core.value_objects.search import validate_search_query


class TestValidateSearchQuery:
    def test_strips_whitespace(self) -> None:
        assert validate_search_query("  Matrix ") == "Matrix"

    @pytest.mark.parametrize("query", ["", " ", "a", " b "])
    def test_too_short(self, query: str) -> None:
        with pytest.raises(InvalidSearchQueryError, match="at least 2"):
            validate_search_query(query)

    def test_too_long(self) -> None:
        with pytest.raises(InvalidSearchQueryError, match="at most 200"):
            validate_search_query("x" * 201)

    def test_boundaries_accepted(self) -> None:
        assert validate_search_query("ab") == "ab"
        assert len(validate_search_query("x" * 200)) == 200


class TestSeries:
    def test_fully_monitored_ignores_specials(self) -> None:
        series = Series(
            id=1,
            tvdb_id=2,
            title="Show",
            monitored=True,
            seasons=[SeasonState(0, False), SeasonState(1, True), SeasonState(2, True)],
        )
        assert series.is_fully_monitored

    def test_not_fully_monitored_when_series_flag_off(self) -> None:
        series = Series(id=1, tvdb_id=2, title="Show", monitored=False,
                        seasons=[SeasonState(1, True)])
        assert not series.is_fully_monitored

    def test_season_lookup(self) -> None:
        series = Series(id=1, tvdb_id=2, title="Show", seasons=[SeasonState(3, True)])
        assert series.season(3) == SeasonState(3, True)
        assert series.season(4) is None


class TestMisc:
    def test_display_names_hide_backend(self) -> None:
        assert BackendKind.SONARR.display_name == "TV Show service"
        assert BackendKind.RADARR.display_name == "Movie service"
        assert BackendKind.EMBY.display_name == "Media library"

    def test_context_generates_unique_correlation_ids(self) -> None:
        assert OperationContext().correlation_id != OperationContext().correlation_id
