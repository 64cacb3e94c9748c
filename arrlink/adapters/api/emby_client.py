"""
Client Emby (serveur de mediatheque).

Implemente ILibraryServer. L'authentification passe par les parametres de
requete api_key et userId (QueryParamAuth). Emby n'a pas de file de
telechargement : ses capacites l'indiquent.

Reference API: https://dev.emby.media/reference/RestAPI.html
"""

import time
from typing import Any, Optional

from loguru import logger

from arrlink.adapters.api.auth import AuthStrategy
from arrlink.adapters.api.client_config import ClientConfig
from arrlink.adapters.api.executor import RequestExecutor, RequestObserver
from arrlink.adapters.api.version import VersionNegotiator
from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import BackendCapabilities, HealthStatus, LibraryItem
from arrlink.core.errors import ApiError
from arrlink.core.ports.backend_clients import ILibraryServer
from arrlink.core.value_objects.api_version import ApiVersionResult
from arrlink.core.value_objects.context import OperationContext
from arrlink.core.value_objects.search import validate_search_query
from arrlink.utils.constants import VERSION_EXTRA_KEYS, VERSION_PROBE_PATHS
from arrlink.utils.timing import Clock

SEARCHABLE_TYPES = "Movie,Series"


def parse_item(data: dict[str, Any]) -> LibraryItem:
    return LibraryItem(
        id=str(data.get("Id", "")),
        name=data.get("Name", ""),
        item_type=data.get("Type", ""),
        year=data.get("ProductionYear"),
        server_id=data.get("ServerId"),
        provider_ids=dict(data.get("ProviderIds") or {}),
    )


class EmbyClient(ILibraryServer):
    """
    Client Emby pour la recherche dans la mediatheque.

    Example:
        config = ClientConfig(backend=BackendKind.EMBY, base_url="http://emby:8096")
        client = EmbyClient(config, QueryParamAuth(api_key="token", userId="user"))
        items = await client.search_library("Matrix")
        url = client.build_playback_url(items[0].id, items[0].server_id)
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
            VERSION_PROBE_PATHS[BackendKind.EMBY],
            VERSION_EXTRA_KEYS[BackendKind.EMBY],
        )
        self._server_id: Optional[str] = None

    @property
    def backend(self) -> BackendKind:
        return BackendKind.EMBY

    def capabilities(self) -> BackendCapabilities:
        return BackendCapabilities(
            can_search=True,
            can_request=False,
            can_monitor=False,
            supports_queue=False,
            supported_media_types=("movie", "series"),
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
        """
        Verifie /System/Info.

        Un serveur en cours d'arret est considere indisponible, un redemarrage
        en attente produit un avertissement.
        """
        ctx = ctx or OperationContext()
        started = time.perf_counter()
        try:
            info = await self._executor.execute("GET", "/System/Info", ctx=ctx, max_attempts=1)
            api_version = await self.get_api_version(ctx=ctx)
        except ApiError as e:
            logger.warning("Emby indisponible", error_kind=e.kind.value)
            return HealthStatus(
                backend=self.backend,
                healthy=False,
                response_time_ms=round((time.perf_counter() - started) * 1000, 1),
                error=e.user_message(),
            )

        info = info if isinstance(info, dict) else {}
        self._server_id = info.get("Id") or self._server_id
        warnings = list(api_version.warnings)
        if info.get("HasPendingRestart"):
            warnings.append("Media library has a pending restart")
        shutting_down = bool(info.get("IsShuttingDown"))

        return HealthStatus(
            backend=self.backend,
            healthy=not shutting_down,
            response_time_ms=round((time.perf_counter() - started) * 1000, 1),
            version=info.get("Version"),
            error="Media library is shutting down" if shutting_down else None,
            api_version=api_version,
            warnings=warnings,
        )

    async def search_library(
        self, query: str, *, limit: int = 20, ctx: Optional[OperationContext] = None
    ) -> list[LibraryItem]:
        term = validate_search_query(query)
        data = await self._executor.execute(
            "GET",
            "/Items",
            params={
                "searchTerm": term,
                "Recursive": "true",
                "IncludeItemTypes": SEARCHABLE_TYPES,
                "Fields": "ProviderIds,ProductionYear",
                "Limit": limit,
            },
            ctx=ctx,
        )
        items = data.get("Items", []) if isinstance(data, dict) else []
        return [parse_item(item) for item in items]

    async def get_item(
        self, item_id: str, *, ctx: Optional[OperationContext] = None
    ) -> Optional[LibraryItem]:
        data = await self._executor.execute(
            "GET",
            "/Items",
            params={"Ids": item_id, "Fields": "ProviderIds,ProductionYear"},
            ctx=ctx,
        )
        items = data.get("Items", []) if isinstance(data, dict) else []
        return parse_item(items[0]) if items else None

    def build_playback_url(self, item_id: str, server_id: Optional[str] = None) -> str:
        """Lien vers la page de l'element dans l'interface web d'Emby."""
        url = f"{self._config.base_url}/web/index.html#!/item?id={item_id}"
        server = server_id or self._server_id
        if server:
            url += f"&serverId={server}"
        return url
