"""
Client Radarr API v3 (gestionnaire de films).

Implemente IMovieManager a partir du RequestExecutor, avec la meme
authentification par en-tete X-Api-Key que Sonarr.

Reference API: https://radarr.video/docs/api/
"""

import time
from typing import Any, Optional

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
    AddMovieRequest,
    BackendCapabilities,
    CommandResult,
    HealthStatus,
    Movie,
    QualityProfile,
    QueueItem,
    RootFolder,
)
from arrlink.core.errors import ApiError, NotFoundError
from arrlink.core.ports.backend_clients import IMovieManager
from arrlink.core.value_objects.api_version import ApiVersionResult
from arrlink.core.value_objects.context import OperationContext
from arrlink.core.value_objects.search import validate_search_query
from arrlink.utils.constants import (
    MOVIES_SEARCH_COMMAND,
    QUEUE_PAGE_SIZE,
    VERSION_EXTRA_KEYS,
    VERSION_PROBE_PATHS,
)
from arrlink.utils.timing import Clock

API_BASE = "/api/v3"


def parse_movie(data: dict[str, Any]) -> Movie:
    """Convertit une ressource film Radarr en entite Movie."""
    return Movie(
        id=data.get("id") or None,
        tmdb_id=int(data.get("tmdbId") or 0),
        title=data.get("title", ""),
        year=data.get("year") or None,
        monitored=bool(data.get("monitored", False)),
        has_file=bool(data.get("hasFile", False)),
        quality_profile_id=data.get("qualityProfileId"),
        root_folder_path=data.get("rootFolderPath"),
        raw=data,
    )


class RadarrClient(IMovieManager):
    """
    Client Radarr pour la gestion des films.

    Example:
        config = ClientConfig(backend=BackendKind.RADARR, base_url="http://radarr:7878")
        client = RadarrClient(config, ApiKeyHeaderAuth("api-key"))
        movie = await client.get_movie_by_tmdb_id(603)
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
        self._config = config
        self._executor = executor or RequestExecutor(
            config, auth, observer=observer, clock=clock
        )
        self._versions = VersionNegotiator(
            self._executor,
            config,
            VERSION_PROBE_PATHS[BackendKind.RADARR],
            VERSION_EXTRA_KEYS[BackendKind.RADARR],
        )

    @property
    def backend(self) -> BackendKind:
        return BackendKind.RADARR

    def capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            can_search=True,
            can_request=True,
            can_monitor=True,
            supports_queue=True,
            supported_media_types=("movie",),
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
        ctx = ctx or OperationContext()
        started = time.perf_counter()
        try:
            status = await self._executor.execute(
                "GET", f"{API_BASE}/system/status", ctx=ctx, max_attempts=1
            )
            api_version = await self.get_api_version(ctx=ctx)
        except ApiError as e:
            logger.warning("Radarr indisponible", error_kind=e.kind.value)
            return HealthStatus(
                backend=self.backend,
                healthy=False,
                response_time_ms=round((time.perf_counter() - started) * 1000, 1),
                error=e.user_message(),
            )

        status = status if isinstance(status, dict) else {}
        return HealthStatus(
            backend=self.backend,
            healthy=True,
            response_time_ms=round((time.perf_counter() - started) * 1000, 1),
            version=status.get("version"),
            api_version=api_version,
            warnings=list(api_version.warnings),
        )

    async def search_movies(
        self, query: str, *, ctx: Optional[OperationContext] = None
    ) -> list[Movie]:
        term = validate_search_query(query)
        data = await self._executor.execute(
            "GET", f"{API_BASE}/movie/lookup", params={"term": term}, ctx=ctx
        )
        return [parse_movie(item) for item in data or []]

    async def lookup_movie_by_tmdb_id(
        self, tmdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Movie]:
        """
        Resout un film par son ID TMDB via /movie/lookup/tmdb.

        Un 404 apres relance signifie que TMDB ne connait pas ce film : None.
        """
        try:
            data = await self._executor.execute(
                "GET",
                f"{API_BASE}/movie/lookup/tmdb",
                params={"tmdbId": tmdb_id},
                ctx=ctx,
                resource_type="Movie",
                resource_id=str(tmdb_id),
            )
        except NotFoundError:
            return None
        if isinstance(data, list):
            data = next((item for item in data if item.get("tmdbId") == tmdb_id), None)
        if not isinstance(data, dict) or int(data.get("tmdbId") or 0) != tmdb_id:
            return None
        return parse_movie(data)

    async def get_movie_by_tmdb_id(
        self, tmdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Movie]:
        data = await self._executor.execute(
            "GET", f"{API_BASE}/movie", params={"tmdbId": tmdb_id}, ctx=ctx
        )
        for item in data or []:
            if int(item.get("tmdbId") or 0) == tmdb_id:
                return parse_movie(item)
        return None

    async def add_movie(
        self, request: AddMovieRequest, *, ctx: Optional[OperationContext] = None
    ) -> Movie:
        payload = {
            **request.movie.raw,
            "tmdbId": request.movie.tmdb_id,
            "title": request.movie.title,
            "qualityProfileId": request.quality_profile_id,
            "rootFolderPath": request.root_folder_path,
            "monitored": request.monitored,
            "minimumAvailability": request.minimum_availability,
            "addOptions": {"searchForMovie": False},
        }
        data = await self._executor.execute(
            "POST", f"{API_BASE}/movie", json_body=payload, ctx=ctx
        )
        movie = parse_movie(data)
        logger.info("Film ajoute", title=movie.title, movie_id=movie.id)
        return movie

    async def update_movie(self, movie: Movie, *, ctx: Optional[OperationContext] = None) -> Movie:
        payload = {**movie.raw, "monitored": movie.monitored}
        data = await self._executor.execute(
            "PUT",
            f"{API_BASE}/movie/{movie.id}",
            json_body=payload,
            ctx=ctx,
            resource_type="Movie",
            resource_id=str(movie.id),
        )
        if isinstance(data, dict):
            return parse_movie(data)
        return movie

    async def delete_movie(
        self,
        movie_id: int,
        *,
        delete_files: bool,
        add_import_exclusion: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        await self._executor.execute(
            "DELETE",
            f"{API_BASE}/movie/{movie_id}",
            params={
                "deleteFiles": "true" if delete_files else "false",
                "addImportExclusion": "true" if add_import_exclusion else "false",
            },
            ctx=ctx,
            resource_type="Movie",
            resource_id=str(movie_id),
        )
        logger.info("Film supprime", movie_id=movie_id, delete_files=delete_files)

    async def get_queue(self, *, ctx: Optional[OperationContext] = None) -> list[QueueItem]:
        data = await self._executor.execute(
            "GET",
            f"{API_BASE}/queue",
            params={"page": 1, "pageSize": QUEUE_PAGE_SIZE, "includeUnknownMovieItems": "false"},
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
            params={
                "removeFromClient": "true" if remove_from_client else "false",
                "blocklist": "true" if blocklist else "false",
            },
            ctx=ctx,
            resource_type="Queue item",
            resource_id=str(queue_id),
        )

    async def trigger_movie_search(
        self, movie_id: int, *, ctx: Optional[OperationContext] = None
    ) -> CommandResult:
        data = await self._executor.execute(
            "POST",
            f"{API_BASE}/command",
            json_body={"name": MOVIES_SEARCH_COMMAND, "movieIds": [movie_id]},
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
