"""
Orchestration du monitoring des films.

Variante simplifiee de l'orchestration des series : pas de saisons ni
d'episodes, un film est monitore (et recherche) ou supprime.
"""

from dataclasses import dataclass, field, replace
from typing import Optional

from loguru import logger

from arrlink.core.entities.media import AddMovieRequest, Movie
from arrlink.core.errors import ApiError, ArrLinkError, DeadlineExceededError, MonitoringError
from arrlink.core.ports.backend_clients import IMovieManager
from arrlink.core.value_objects.context import OperationContext, new_correlation_id
from arrlink.services.downloads import cancel_queue_items, load_queue
from arrlink.services.monitoring_strategy import select_quality_profile, select_root_folder
from arrlink.services.series_monitoring import error_message
from arrlink.utils.timing import Clock, Deadline, SystemClock


@dataclass
class MonitorMovieResult:
    success: bool
    tmdb_id: int
    correlation_id: str
    movie: Optional[Movie] = None
    movie_added: bool = False
    search_triggered: bool = False
    command_id: Optional[int] = None
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class DeleteMovieResult:
    success: bool
    tmdb_id: int
    correlation_id: str
    movie: Optional[Movie] = None
    movie_deleted: bool = False
    files_deleted: bool = False
    downloads_found: int = 0
    downloads_cancelled: int = 0
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None


class MovieMonitoringService:
    """
    Orchestrateur du monitoring des films.

    Example:
        service = MovieMonitoringService(radarr_client)
        result = await service.monitor_and_download(603)
        result = await service.unmonitor_and_delete(603, delete_files=True)
    """

    def __init__(
        self,
        client: IMovieManager,
        *,
        clock: Optional[Clock] = None,
        operation_timeout: float = 300.0,
    ) -> None:
        self._client = client
        self._clock = clock or SystemClock()
        self._operation_timeout = operation_timeout

    def _new_context(self, correlation_id: Optional[str]) -> OperationContext:
        deadline = Deadline(self._clock, self._operation_timeout)
        return OperationContext(correlation_id or new_correlation_id(), deadline)

    async def monitor_and_download(
        self,
        tmdb_id: int,
        *,
        quality_profile_id: Optional[int] = None,
        root_folder_path: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> MonitorMovieResult:
        """
        Monitore un film et lance sa recherche.

        Un film deja present est reutilise (et remonitore si besoin), un film
        absent est resolu par son ID TMDB puis ajoute.

        Returns:
            MonitorMovieResult, success=False avec `error` en cas d'echec fatal
        """
        ctx = self._new_context(correlation_id)
        result = MonitorMovieResult(
            success=False, tmdb_id=tmdb_id, correlation_id=ctx.correlation_id
        )
        logger.info(
            "Monitoring du film {tmdb_id}", tmdb_id=tmdb_id, correlation_id=ctx.correlation_id
        )
        try:
            await self._monitor(tmdb_id, quality_profile_id, root_folder_path, ctx, result)
            result.success = True
        except ArrLinkError as e:
            result.error = error_message(e)
            logger.error(
                "Monitoring du film {tmdb_id} en echec",
                tmdb_id=tmdb_id,
                correlation_id=ctx.correlation_id,
                error=str(e),
            )
        return result

    async def _monitor(
        self,
        tmdb_id: int,
        quality_profile_id: Optional[int],
        root_folder_path: Optional[str],
        ctx: OperationContext,
        result: MonitorMovieResult,
    ) -> None:
        existing = await self._client.get_movie_by_tmdb_id(tmdb_id, ctx=ctx)

        if existing is not None and existing.monitored:
            # La recherche est la seule action : son echec est fatal
            result.movie = existing
            result.warnings.append("Movie already monitored in library")
            command = await self._client.trigger_movie_search(existing.id, ctx=ctx)
            result.search_triggered = True
            result.command_id = command.id
            return

        if existing is not None:
            movie = await self._client.update_movie(replace(existing, monitored=True), ctx=ctx)
            result.movie = movie
            result.warnings.append("Movie existed but was not monitored")
            await self._search(movie, ctx, result, "Movie updated but search failed")
            return

        candidate = await self._client.lookup_movie_by_tmdb_id(tmdb_id, ctx=ctx)
        if candidate is None:
            raise MonitoringError(f"Movie with TMDB ID {tmdb_id} not found")

        profile_id = quality_profile_id
        if profile_id is None:
            profile = select_quality_profile(await self._client.get_quality_profiles(ctx=ctx))
            if profile is None:
                raise MonitoringError("No quality profiles configured")
            profile_id = profile.id
        root_path = root_folder_path
        if root_path is None:
            folder = select_root_folder(await self._client.get_root_folders(ctx=ctx))
            if folder is None:
                raise MonitoringError("No root folders configured")
            root_path = folder.path

        movie = await self._client.add_movie(
            AddMovieRequest(
                movie=candidate, quality_profile_id=profile_id, root_folder_path=root_path
            ),
            ctx=ctx,
        )
        result.movie = movie
        result.movie_added = True
        await self._search(movie, ctx, result, "Movie added but search failed")

    async def _search(
        self, movie: Movie, ctx: OperationContext, result: MonitorMovieResult, failure: str
    ) -> None:
        try:
            command = await self._client.trigger_movie_search(movie.id, ctx=ctx)
        except (ApiError, DeadlineExceededError) as e:
            result.warnings.append(f"{failure}: {e.user_message()}")
            return
        result.search_triggered = True
        result.command_id = command.id

    async def unmonitor_and_delete(
        self,
        tmdb_id: int,
        *,
        delete_files: bool = True,
        correlation_id: Optional[str] = None,
    ) -> DeleteMovieResult:
        """
        Annule les telechargements du film puis le supprime.

        Args:
            tmdb_id: ID TMDB du film
            delete_files: Supprime aussi les fichiers telecharges
            correlation_id: Identifiant de correlation (defaut: genere)

        Returns:
            DeleteMovieResult, success=False avec `error` en cas d'echec fatal
        """
        ctx = self._new_context(correlation_id)
        result = DeleteMovieResult(
            success=False, tmdb_id=tmdb_id, correlation_id=ctx.correlation_id
        )
        logger.info(
            "Suppression du film {tmdb_id}", tmdb_id=tmdb_id, correlation_id=ctx.correlation_id
        )
        try:
            movie = await self._client.get_movie_by_tmdb_id(tmdb_id, ctx=ctx)
            if movie is None:
                raise MonitoringError("Movie not found in library")
            result.movie = movie
            if not movie.monitored:
                result.warnings.append("Movie was not monitored before deletion")

            queue = await load_queue(self._client, ctx, result.warnings)
            report = await cancel_queue_items(
                self._client, queue, lambda item: item.movie_id == movie.id, ctx
            )
            result.downloads_found = report.found
            result.downloads_cancelled = report.cancelled
            if report.warning():
                result.warnings.append(report.warning())

            await self._client.delete_movie(movie.id, delete_files=delete_files, ctx=ctx)
            result.movie_deleted = True
            result.files_deleted = delete_files and movie.has_file
            if delete_files and not movie.has_file:
                result.warnings.append("Movie had no files to delete")
            result.success = True
        except ArrLinkError as e:
            result.error = error_message(e)
            logger.error(
                "Suppression du film {tmdb_id} en echec",
                tmdb_id=tmdb_id,
                correlation_id=ctx.correlation_id,
                error=str(e),
            )
        return result
