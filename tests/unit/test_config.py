"""
Tests unitaires pour la configuration et le container DI.
"""

import pytest
from dependency_injector import providers
from pydantic import ValidationError

from arrlink.adapters.api.emby_client import EmbyClient
from arrlink.adapters.api.sonarr_client import SonarrClient
from arrlink.config import Settings
from arrlink.container import Container
from arrlink.core.backends import BackendKind
from arrlink.core.value_objects.api_version import CompatibilityMode
from arrlink.services.health import HealthService
from arrlink.services.series_monitoring import SeriesMonitoringService


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("ARRLINK_SONARR_API_KEY", raising=False)
        settings = Settings(_env_file=None)
        assert settings.max_retries == 3
        assert settings.operation_timeout == 300.0
        assert settings.version_compatibility is CompatibilityMode.LOOSE
        assert not settings.sonarr_enabled

    def test_environment_override(self, monkeypatch) -> None:
        monkeypatch.setenv("ARRLINK_MAX_RETRIES", "5")
        monkeypatch.setenv("ARRLINK_VERSION_COMPATIBILITY", "strict")
        settings = Settings(_env_file=None)
        assert settings.max_retries == 5
        assert settings.version_compatibility is CompatibilityMode.STRICT

    @pytest.mark.parametrize("value", [0, 11])
    def test_max_retries_bounds(self, value: int) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, max_retries=value)

    def test_trailing_slash_removed(self) -> None:
        settings = Settings(_env_file=None, sonarr_url="http://sonarr:8989/")
        assert settings.sonarr_url == "http://sonarr:8989"

    def test_emby_requires_user(self, test_settings) -> None:
        assert test_settings.emby_enabled
        assert not test_settings.model_copy(update={"emby_user_id": None}).emby_enabled

    def test_client_config(self, test_settings) -> None:
        config = test_settings.client_config(BackendKind.RADARR)
        assert config.backend is BackendKind.RADARR
        assert config.base_url == "http://radarr.test:7878"
        assert config.max_retries == test_settings.max_retries
        assert config.supported_versions == ("4.0.0", "5.0.0")
        assert config.retry_policy().max_attempts == test_settings.max_retries


class TestContainer:
    @pytest.fixture
    def container(self, test_settings) -> Container:
        container = Container()
        container.config.override(providers.Object(test_settings))
        yield container
        container.config.reset_override()

    def test_clients_are_singletons(self, container) -> None:
        client = container.sonarr_client()
        assert isinstance(client, SonarrClient)
        assert container.sonarr_client() is client

    def test_client_configs_follow_settings(self, container) -> None:
        assert container.sonarr_config().base_url == "http://sonarr.test:8989"
        assert container.emby_config().backend is BackendKind.EMBY
        assert isinstance(container.emby_client(), EmbyClient)

    def test_services(self, container) -> None:
        assert isinstance(container.series_monitoring(), SeriesMonitoringService)
        assert isinstance(container.health_service(), HealthService)
