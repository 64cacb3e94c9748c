"""
Client Sonarr API v3 (gestionnaire de series).

Implemente ISeriesManager a partir du RequestExecutor : authentification par
en-tete X-Api-Key, relances, classification des erreurs et negociation de
version sont fournies par le pipeline, ce module ne contient que la table
des endpoints et le parsing des reponses.

Reference API: https://sonarr.tv/docs/api/
"""

import time
from typing import Any, Optional, Sequence

from loguru import logger

from arrlink.adapters.api.arr_common import (
    parse_command,
    parse_quality_profiles,
    parse_queue,
    parse_root_folders,
)
from arrlink.adapters.api.auth import AuthStrategy
from arrlink.adapters.api.client_config import ClientConfig
from arrlink.adapters.api.executor import RequestExecutor, RequestObserver
from arrlink.adapters.api.version import VersionNegotiator
from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import (
    AddSeriesRequest,
    BackendCapabilities,
    CommandResult,
    Episode,
    HealthStatus,
    QualityProfile,
    QueueItem,
    RootFolder,
    SeasonState,
    Series,
)
from arrlink.core.errors import ApiError
from arrlink.core.ports.backend_clients import ISeriesManager
from arrlink.core.value_objects.api_version import ApiVersionResult
from arrlink.core.value_objects.context import OperationContext
from arrlink.core.value_objects.search import validate_search_query
from arrlink.utils.constants import (
    QUEUE_PAGE_SIZE,
    SERIES_SEARCH_COMMAND,
    VERSION_EXTRA_KEYS,
    VERSION_PROBE_PATHS,
)
from arrlink.utils.timing import Clock

API_BASE = "/api/v3"


def parse_series(data: dict[str, Any]) -> Series:
    """Convertit une ressource serie Sonarr en entite Series."""
    seasons = [
        SeasonState(
            season_number=int(season.get("seasonNumber", 0)),
            monitored=bool(season.get("monitored", False)),
        )
        for season in data.get("seasons") or []
    ]
    return Series(
        id=data.get("id") or None,
        tvdb_id=int(data.get("tvdbId") or 0),
        title=data.get("title", ""),
        year=data.get("year") or None,
        monitored=bool(data.get("monitored", False)),
        seasons=seasons,
        quality_profile_id=data.get("qualityProfileId"),
        root_folder_path=data.get("rootFolderPath"),
        raw=data,
    )


def parse_episode(data: dict[str, Any]) -> Episode:
    return Episode(
        id=int(data["id"]),
        series_id=int(data.get("seriesId", 0)),
        season_number=int(data.get("seasonNumber", 0)),
        episode_number=int(data.get("episodeNumber", 0)),
        title=data.get("title", ""),
        monitored=bool(data.get("monitored", False)),
        has_file=bool(data.get("hasFile", False)),
        episode_file_id=data.get("episodeFileId") or None,
    )


def series_payload(series: Series) -> dict[str, Any]:
    """
    Ressource complete a renvoyer a Sonarr pour une mise a jour.

    Les saisons du payload d'origine (avec leurs statistiques) sont conservees,
    seul leur flag monitored est remplace par l'etat de l'entite.
    """
    states = {s.season_number: s.monitored for s in series.seasons}
    raw_seasons = series.raw.get("seasons") or []
    known = {season.get("seasonNumber") for season in raw_seasons}
    seasons = [
        {**season, "monitored": states.get(season.get("seasonNumber"), season.get("monitored", False))}
        for season in raw_seasons
    ]
    seasons.extend(
        {"seasonNumber": number, "monitored": monitored}
        for number, monitored in states.items()
        if number not in known
    )
    return {**series.raw, "monitored": series.monitored, "seasons": seasons}


class SonarrClient(ISeriesManager):
    """
    Client Sonarr pour la gestion des series.

    Example:
        config = ClientConfig(backend=BackendKind.SONARR, base_url="http://sonarr:8989")
        client = SonarrClient(config, ApiKeyHeaderAuth("api-key"))
        series = await client.get_series_by_tvdb_id(81189)
        await client.close()
    """

    def __init__(
        self,
        config: ClientConfig,
        auth: AuthStrategy,
        *,
        executor: Optional[RequestExecutor] = None,
        observer: Optional[RequestObserver] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        Initialise le client Sonarr.

        Args:
            config: Configuration du client (backend SONARR)
            auth: Strategie d'authentification (en-tete X-Api-Key)
            executor: Pipeline de requetes (defaut: construit depuis config)
            observer: Observateur des evenements de requete
            clock: Horloge pour les attentes entre relances
        """
        self._config = config
        self._executor = executor or RequestExecutor(
            config, auth, observer=observer, clock=clock
        )
        self._versions = VersionNegotiator(
            self._executor,
            config,
            VERSION_PROBE_PATHS[BackendKind.SONARR],
            VERSION_EXTRA_KEYS[BackendKind.SONARR],
        )

    @property
    def backend(self) -> BackendKind:
        return BackendKind.SONARR

    def capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            can_search=True,
            can_request=True,
            can_monitor=True,
            supports_queue=True,
            supported_media_types=("series",),
        )

    async def close(self) -> None:
        await self._executor.close()

    async def get_api_version(self, *, ctx: Optional[OperationContext] = None) -> ApiVersionResult:
        return await self._versions.get_version(ctx)

    async def refresh_api_version(
        self, *, ctx: Optional[OperationContext] = None
    ) -> ApiVersionResult:
        return await self._versions.refresh(ctx)

    async def check_health(self, *, ctx: Optional[OperationContext] = None) -> HealthStatus:
        """Verifie /api/v3/system/status et la version d'API."""
        ctx = ctx or OperationContext()
        started = time.perf_counter()
        try:
            status = await self._executor.execute(
                "GET", f"{API_BASE}/system/status", ctx=ctx, max_attempts=1
            )
            api_version = await self.get_api_version(ctx=ctx)
        except ApiError as e:
            logger.warning("Sonarr indisponible", error_kind=e.kind.value)
            return HealthStatus(
                backend=self.backend,
                healthy=False,
                response_time_ms=_elapsed_ms(started),
                error=e.user_message(),
            )

        status = status if isinstance(status, dict) else {}
        return HealthStatus(
            backend=self.backend,
            healthy=True,
            response_time_ms=_elapsed_ms(started),
            version=status.get("version"),
            api_version=api_version,
            warnings=list(api_version.warnings),
        )

    async def search_series(
        self, query: str, *, ctx: Optional[OperationContext] = None
    ) -> list[Series]:
        term = validate_search_query(query)
        data = await self._executor.execute(
            "GET", f"{API_BASE}/series/lookup", params={"term": term}, ctx=ctx
        )
        return [parse_series(item) for item in data or []]

    async def get_series_by_tvdb_id(
        self, tvdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Series]:
        data = await self._executor.execute(
            "GET", f"{API_BASE}/series", params={"tvdbId": tvdb_id}, ctx=ctx
        )
        # Certaines versions ignorent le filtre tvdbId : on filtre cote client
        for item in data or []:
            if int(item.get("tvdbId") or 0) == tvdb_id:
                return parse_series(item)
        return None

    async def get_series(self, series_id: int, *, ctx: Optional[OperationContext] = None) -> Series:
        data = await self._executor.execute(
            "GET",
            f"{API_BASE}/series/{series_id}",
            ctx=ctx,
            resource_type="Series",
            resource_id=str(series_id),
        )
        return parse_series(data)

    async def add_series(
        self, request: AddSeriesRequest, *, ctx: Optional[OperationContext] = None
    ) -> Series:
        """
        Ajoute une serie issue du lookup.

        La recherche automatique a l'ajout est desactivee : l'orchestrateur
        declenche la recherche apres avoir regle le monitoring des episodes.
        """
        payload = {
            **request.series.raw,
            "tvdbId": request.series.tvdb_id,
            "title": request.series.title,
            "qualityProfileId": request.quality_profile_id,
            "rootFolderPath": request.root_folder_path,
            "monitored": True,
            "seasonFolder": True,
            "seasons": [
                {"seasonNumber": s.season_number, "monitored": s.monitored}
                for s in request.seasons
            ],
            "addOptions": {
                "monitor": request.monitor,
                "searchForMissingEpisodes": False,
                "searchForCutoffUnmetEpisodes": False,
            },
        }
        data = await self._executor.execute(
            "POST", f"{API_BASE}/series", json_body=payload, ctx=ctx
        )
        series = parse_series(data)
        logger.info("Serie ajoutee", title=series.title, series_id=series.id)
        return series

    async def update_series(
        self, series: Series, *, ctx: Optional[OperationContext] = None
    ) -> Series:
        data = await self._executor.execute(
            "PUT",
            f"{API_BASE}/series/{series.id}",
            json_body=series_payload(series),
            ctx=ctx,
            resource_type="Series",
            resource_id=str(series.id),
        )
        if isinstance(data, dict):
            return parse_series(data)
        return series

    async def delete_series(
        self,
        series_id: int,
        *,
        delete_files: bool,
        add_import_list_exclusion: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        await self._executor.execute(
            "DELETE",
            f"{API_BASE}/series/{series_id}",
            params={
                "deleteFiles": _flag(delete_files),
                "addImportListExclusion": _flag(add_import_list_exclusion),
            },
            ctx=ctx,
            resource_type="Series",
            resource_id=str(series_id),
        )
        logger.info("Serie supprimee", series_id=series_id, delete_files=delete_files)

    async def get_episodes(
        self,
        series_id: int,
        season_number: Optional[int] = None,
        *,
        ctx: Optional[OperationContext] = None,
    ) -> list[Episode]:
        params: dict[str, Any] = {"seriesId": series_id}
        if season_number is not None:
            params["seasonNumber"] = season_number
        data = await self._executor.execute(
            "GET", f"{API_BASE}/episode", params=params, ctx=ctx
        )
        episodes = [parse_episode(item) for item in data or [] if "id" in item]
        if season_number is not None:
            episodes = [e for e in episodes if e.season_number == season_number]
        return episodes

    async def set_episodes_monitored(
        self,
        episode_ids: Sequence[int],
        monitored: bool,
        *,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        if not episode_ids:
            return
        await self._executor.execute(
            "PUT",
            f"{API_BASE}/episode/monitor",
            json_body={"episodeIds": list(episode_ids), "monitored": monitored},
            ctx=ctx,
        )

    async def delete_episode_file(
        self, episode_file_id: int, *, ctx: Optional[OperationContext] = None
    ) -> None:
        await self._executor.execute(
            "DELETE",
            f"{API_BASE}/episodefile/{episode_file_id}",
            ctx=ctx,
            resource_type="Episode file",
            resource_id=str(episode_file_id),
        )

    async def get_queue(self, *, ctx: Optional[OperationContext] = None) -> list[QueueItem]:
        data = await self._executor.execute(
            "GET",
            f"{API_BASE}/queue",
            params={"page": 1, "pageSize": QUEUE_PAGE_SIZE, "includeUnknownSeriesItems": "false"},
            ctx=ctx,
        )
        return parse_queue(data)

    async def remove_queue_item(
        self,
        queue_id: int,
        *,
        remove_from_client: bool = True,
        blocklist: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        await self._executor.execute(
            "DELETE",
            f"{API_BASE}/queue/{queue_id}",
            params={"removeFromClient": _flag(remove_from_client), "blocklist": _flag(blocklist)},
            ctx=ctx,
            resource_type="Queue item",
            resource_id=str(queue_id),
        )

    async def trigger_series_search(
        self, series_id: int, *, ctx: Optional[OperationContext] = None
    ) -> CommandResult:
        data = await self._executor.execute(
            "POST",
            f"{API_BASE}/command",
            json_body={"name": SERIES_SEARCH_COMMAND, "seriesId": series_id},
            ctx=ctx,
        )
        return parse_command(data)

    async def get_quality_profiles(
        self, *, ctx: Optional[OperationContext] = None
    ) -> list[QualityProfile]:
        data = await self._executor.execute("GET", f"{API_BASE}/qualityprofile", ctx=ctx)
        return parse_quality_profiles(data)

    async def get_root_folders(self, *, ctx: Optional[OperationContext] = None) -> list[RootFolder]:
        data = await self._executor.execute("GET", f"{API_BASE}/rootfolder", ctx=ctx)
        return parse_root_folders(data)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)
