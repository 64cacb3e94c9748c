"""
Tests unitaires pour EmbyClient.
"""

import httpx
import pytest
import respx

from arrlink.adapters.api.auth import QueryParamAuth
from arrlink.adapters.api.client_config import ClientConfig
from arrlink.adapters.api.emby_client import EmbyClient
from arrlink.core.backends import BackendKind
from arrlink.core.errors import InvalidSearchQueryError
from tests.fixtures.emby_responses import (
    EMBY_BASE_URL,
    EMBY_EMPTY_RESPONSE,
    EMBY_SEARCH_RESPONSE,
    EMBY_SYSTEM_INFO_RESPONSE,
)


@pytest.fixture
def client(fake_clock) -> EmbyClient:
    config = ClientConfig(
        backend=BackendKind.EMBY,
        base_url=EMBY_BASE_URL,
        supported_versions=("4.7.0", "4.8.0"),
        fallback_version="4.8.0",
    )
    return EmbyClient(config, QueryParamAuth(api_key="emby-key", userId="user-1"), clock=fake_clock)


class TestEmbyHealth:
    @pytest.mark.asyncio
    @respx.mock
    async def test_healthy_and_server_id_stored(self, client) -> None:
        route = respx.get(f"{EMBY_BASE_URL}/System/Info").mock(
            return_value=httpx.Response(200, json=EMBY_SYSTEM_INFO_RESPONSE)
        )

        try:
            status = await client.check_health()
        finally:
            await client.close()

        assert status.healthy
        assert status.version == "4.8.1.0"
        assert route.calls.last.request.url.params["api_key"] == "emby-key"
        assert client.build_playback_url("555").endswith("&serverId=server-abc")

    @pytest.mark.asyncio
    @respx.mock
    async def test_pending_restart_is_warning(self, client) -> None:
        respx.get(f"{EMBY_BASE_URL}/System/Info").mock(
            return_value=httpx.Response(
                200, json={**EMBY_SYSTEM_INFO_RESPONSE, "HasPendingRestart": True}
            )
        )

        try:
            status = await client.check_health()
        finally:
            await client.close()

        assert status.healthy
        assert "Media library has a pending restart" in status.warnings

    @pytest.mark.asyncio
    @respx.mock
    async def test_shutting_down_is_unhealthy(self, client) -> None:
        respx.get(f"{EMBY_BASE_URL}/System/Info").mock(
            return_value=httpx.Response(
                200, json={**EMBY_SYSTEM_INFO_RESPONSE, "IsShuttingDown": True}
            )
        )

        try:
            status = await client.check_health()
        finally:
            await client.close()

        assert not status.healthy
        assert status.error == "Media library is shutting down"

    def test_capabilities(self, client) -> None:
        capabilities = client.capabilities()
        assert not capabilities.supports_queue
        assert not capabilities.can_monitor


class TestEmbySearch:
    @pytest.mark.asyncio
    @respx.mock(assert_all_called=False)
    async def test_short_query_rejected_without_request(self, client) -> None:
        route = respx.get(f"{EMBY_BASE_URL}/Items")

        try:
            with pytest.raises(InvalidSearchQueryError):
                await client.search_library("m")
        finally:
            await client.close()

        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_search_library(self, client) -> None:
        route = respx.get(f"{EMBY_BASE_URL}/Items").mock(
            return_value=httpx.Response(200, json=EMBY_SEARCH_RESPONSE)
        )

        try:
            items = await client.search_library("matrix", limit=5)
        finally:
            await client.close()

        params = route.calls.last.request.url.params
        assert params["searchTerm"] == "matrix"
        assert params["IncludeItemTypes"] == "Movie,Series"
        assert params["Limit"] == "5"
        assert params["userId"] == "user-1"
        assert [item.id for item in items] == ["555", "777"]
        assert items[0].provider_ids["Tmdb"] == "603"
        assert items[1].provider_ids == {}

    @pytest.mark.asyncio
    @respx.mock
    async def test_get_item_missing(self, client) -> None:
        respx.get(f"{EMBY_BASE_URL}/Items").mock(
            return_value=httpx.Response(200, json=EMBY_EMPTY_RESPONSE)
        )

        try:
            item = await client.get_item("404")
        finally:
            await client.close()

        assert item is None

    def test_playback_url(self, client) -> None:
        assert client.build_playback_url("555", "srv") == (
            f"{EMBY_BASE_URL}/web/index.html#!/item?id=555&serverId=srv"
        )
        assert client.build_playback_url("555") == f"{EMBY_BASE_URL}/web/index.html#!/item?id=555"
