"""
Tests unitaires pour HealthService.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import HealthStatus
from arrlink.core.ports.backend_clients import IBackendClient
from arrlink.services.health import HealthService, enabled_health_service


def _client(backend: BackendKind, healthy: bool = True) -> MagicMock:
    client = MagicMock(spec=IBackendClient)
    client.check_health = AsyncMock(
        return_value=HealthStatus(
            backend=backend, healthy=healthy, error=None if healthy else "down"
        )
    )
    return client


class TestHealthService:
    @pytest.mark.asyncio
    async def test_all_healthy(self) -> None:
        service = HealthService([_client(BackendKind.SONARR), _client(BackendKind.RADARR)])

        report = await service.check_all(correlation_id="corr-h")

        assert report.healthy
        assert [s.backend for s in report.statuses] == [BackendKind.SONARR, BackendKind.RADARR]

    @pytest.mark.asyncio
    async def test_unhealthy_backend_reported(self) -> None:
        emby = _client(BackendKind.EMBY, healthy=False)
        service = HealthService([_client(BackendKind.SONARR), None, emby])

        report = await service.check_all()

        assert not report.healthy
        assert [s.backend for s in report.unhealthy] == [BackendKind.EMBY]
        assert len(report.statuses) == 2

    @pytest.mark.asyncio
    async def test_same_context_for_all_backends(self) -> None:
        sonarr, radarr = _client(BackendKind.SONARR), _client(BackendKind.RADARR)

        await HealthService([sonarr, radarr]).check_all(correlation_id="corr-h")

        sonarr_ctx = sonarr.check_health.await_args.kwargs["ctx"]
        assert sonarr_ctx.correlation_id == "corr-h"
        assert radarr.check_health.await_args.kwargs["ctx"] is sonarr_ctx


class TestEnabledHealthService:
    @pytest.mark.asyncio
    async def test_only_configured_backends(self, test_settings) -> None:
        settings = test_settings.model_copy(update={"radarr_api_key": None, "emby_user_id": None})
        sonarr = _client(BackendKind.SONARR)
        radarr = _client(BackendKind.RADARR)
        emby = _client(BackendKind.EMBY)

        report = await enabled_health_service(settings, sonarr, radarr, emby).check_all()

        assert [s.backend for s in report.statuses] == [BackendKind.SONARR]
        radarr.check_health.assert_not_awaited()
        emby.check_health.assert_not_awaited()
