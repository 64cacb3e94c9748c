"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI : configuration,
un client par backend (pool de connexions et cache de version partages) et
les services d'orchestration.
"""

from dependency_injector import containers, providers

from .adapters.api.auth import ApiKeyHeaderAuth, QueryParamAuth
from .adapters.api.emby_client import EmbyClient
from .adapters.api.radarr_client import RadarrClient
from .adapters.api.sonarr_client import SonarrClient
from .config import Settings
from .core.backends import BackendKind
from .services.health import enabled_health_service
from .services.movie_monitoring import MovieMonitoringService
from .services.series_monitoring import SeriesMonitoringService
from .utils.timing import SystemClock


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        service = container.series_monitoring()
        result = await service.monitor_and_download(81189)
        await container.sonarr_client().close()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    clock = providers.Singleton(SystemClock)

    # Configuration immuable de chaque client
    sonarr_config = config.provided.client_config.call(BackendKind.SONARR)
    radarr_config = config.provided.client_config.call(BackendKind.RADARR)
    emby_config = config.provided.client_config.call(BackendKind.EMBY)

    # Authentification : en-tete pour les *arr, parametres de requete pour Emby
    sonarr_auth = providers.Singleton(ApiKeyHeaderAuth, api_key=config.provided.sonarr_api_key)
    radarr_auth = providers.Singleton(ApiKeyHeaderAuth, api_key=config.provided.radarr_api_key)
    emby_auth = providers.Singleton(
        QueryParamAuth,
        api_key=config.provided.emby_api_key,
        userId=config.provided.emby_user_id,
    )

    # Clients - Singleton : un pool de connexions et un cache de version par backend
    sonarr_client = providers.Singleton(
        SonarrClient, config=sonarr_config, auth=sonarr_auth, clock=clock
    )
    radarr_client = providers.Singleton(
        RadarrClient, config=radarr_config, auth=radarr_auth, clock=clock
    )
    emby_client = providers.Singleton(
        EmbyClient, config=emby_config, auth=emby_auth, clock=clock
    )

    # Services d'orchestration - Factory (sans etat propre)
    series_monitoring = providers.Factory(
        SeriesMonitoringService,
        client=sonarr_client,
        clock=clock,
        operation_timeout=config.provided.operation_timeout,
        episode_retry_attempts=config.provided.episode_retry_attempts,
        episode_retry_delay=config.provided.episode_retry_delay,
        deletion_recheck_delay=config.provided.deletion_recheck_delay,
        recheck_episode_attempts=config.provided.recheck_episode_attempts,
    )
    movie_monitoring = providers.Factory(
        MovieMonitoringService,
        client=radarr_client,
        clock=clock,
        operation_timeout=config.provided.operation_timeout,
    )
    health_service = providers.Factory(
        enabled_health_service,
        settings=config,
        sonarr=sonarr_client,
        radarr=radarr_client,
        emby=emby_client,
    )
