"""
Orchestration du monitoring des series.

Deux operations :
- monitor_and_download : ajoute (ou met a jour) une serie, regle le
  monitoring saison par saison et episode par episode, puis declenche une
  recherche si quelque chose a change.
- unmonitor_and_delete : annule les telechargements, supprime les fichiers et
  demonitore la selection ; supprime la serie lorsqu'il ne reste plus aucun
  episode monitore.

Les deux operations sont "best effort" : un echec secondaire (recherche,
saison dont les episodes sont introuvables) devient un avertissement et le
resultat reste success=True. Seuls les echecs qui empechent de determiner la
cible ou la configuration sont fatals.

Toutes les attentes passent par la Clock injectee et sont bornees par
l'echeance globale de l'operation. L'echeance n'est fatale qu'avant le
premier changement d'etat ; ensuite l'operation s'arrete avec un
avertissement et les changements deja appliques sont rapportes.
"""

import asyncio
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence

from loguru import logger

from arrlink.core.entities.media import (
    AddSeriesRequest,
    Episode,
    QueueItem,
    SeasonState,
    Series,
)
from arrlink.core.errors import (
    ApiError,
    ArrLinkError,
    DeadlineExceededError,
    MonitoringError,
)
from arrlink.core.ports.backend_clients import ISeriesManager
from arrlink.core.value_objects.context import OperationContext, new_correlation_id
from arrlink.core.value_objects.selection import (
    EpisodeSelection,
    MonitoringAction,
    MonitoringChange,
    validate_selection,
)
from arrlink.services.downloads import cancel_queue_items, load_queue
from arrlink.services.monitoring_strategy import (
    DEFAULT_MONITOR_TYPE,
    determine_monitoring_strategy,
    has_remaining_monitored_content,
    select_quality_profile,
    select_root_folder,
)
from arrlink.utils.timing import Clock, Deadline, RecheckScheduler, SystemClock, wait

# Numero de saison utilise par les changements qui portent sur toute la serie
WHOLE_SERIES = 0


@dataclass
class MonitorSeriesResult:
    """Resultat de monitor_and_download."""

    success: bool
    tvdb_id: int
    correlation_id: str
    series: Optional[Series] = None
    series_added: bool = False
    search_triggered: bool = False
    command_id: Optional[int] = None
    changes: list[MonitoringChange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class UnmonitorSeriesResult:
    """Resultat de unmonitor_and_delete."""

    success: bool
    tvdb_id: int
    correlation_id: str
    series: Optional[Series] = None
    series_deleted: bool = False
    episodes_unmonitored: int = 0
    downloads_cancelled: int = 0
    files_deleted: int = 0
    changes: list[MonitoringChange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class _EntryOutcome:
    """Bilan du demonitoring d'une entree de selection."""

    season: int
    changes: list[MonitoringChange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    episodes_unmonitored: int = 0
    downloads_cancelled: int = 0
    files_deleted: int = 0
    season_emptied: bool = False
    deadline_reached: bool = False

    @property
    def touched(self) -> bool:
        """True si l'entree a modifie l'etat du backend."""
        return bool(self.changes or self.downloads_cancelled or self.files_deleted)


def error_message(error: ArrLinkError) -> str:
    """Message utilisateur d'une erreur fatale d'orchestration."""
    if isinstance(error, (ApiError, DeadlineExceededError)):
        return error.user_message()
    return str(error)


class SeriesMonitoringService:
    """
    Orchestrateur du monitoring des series.

    Ne depend que du port ISeriesManager, jamais des details HTTP.

    Example:
        service = SeriesMonitoringService(sonarr_client)
        result = await service.monitor_and_download(
            81189, [EpisodeSelection(season=1), EpisodeSelection(2, (1, 2))]
        )
        if result.success:
            print(result.changes, result.warnings)
    """

    def __init__(
        self,
        client: ISeriesManager,
        *,
        clock: Optional[Clock] = None,
        operation_timeout: float = 300.0,
        episode_retry_attempts: int = 3,
        episode_retry_delay: float = 2.0,
        deletion_recheck_delay: float = 5.0,
        recheck_episode_attempts: int = 4,
    ) -> None:
        """
        Args:
            client: Gestionnaire de series
            clock: Horloge des attentes (defaut: SystemClock)
            operation_timeout: Echeance globale d'une operation, en secondes
            episode_retry_attempts: Lectures des episodes d'une saison avant abandon
            episode_retry_delay: Delai de base entre lectures (multiplie par la tentative)
            deletion_recheck_delay: Attente avant la verification finale
            recheck_episode_attempts: Lectures par saison lors de la verification finale
        """
        self._client = client
        self._clock = clock or SystemClock()
        self._operation_timeout = operation_timeout
        self._episode_retry_attempts = max(1, episode_retry_attempts)
        self._episode_retry_delay = episode_retry_delay
        self._deletion_recheck_delay = deletion_recheck_delay
        self._recheck_episode_attempts = max(1, recheck_episode_attempts)

    def _new_context(self, correlation_id: Optional[str]) -> OperationContext:
        deadline = Deadline(self._clock, self._operation_timeout)
        return OperationContext(correlation_id or new_correlation_id(), deadline)

    # ------------------------------------------------------------------
    # Monitor and download
    # ------------------------------------------------------------------

    async def monitor_and_download(
        self,
        tvdb_id: int,
        selection: Optional[Sequence[EpisodeSelection]] = None,
        *,
        quality_profile_id: Optional[int] = None,
        root_folder_path: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> MonitorSeriesResult:
        """
        Monitore une serie (entiere ou selection) et lance son telechargement.

        Args:
            tvdb_id: ID TVDB de la serie
            selection: Saisons/episodes a monitorer, None pour toute la serie
            quality_profile_id: Profil de qualite (defaut: choisi sur le backend)
            root_folder_path: Dossier racine (defaut: premier dossier accessible)
            correlation_id: Identifiant de correlation (defaut: genere)

        Returns:
            MonitorSeriesResult, success=False avec `error` en cas d'echec fatal
        """
        ctx = self._new_context(correlation_id)
        result = MonitorSeriesResult(
            success=False, tvdb_id=tvdb_id, correlation_id=ctx.correlation_id
        )
        logger.info(
            "Monitoring de la serie {tvdb_id}",
            tvdb_id=tvdb_id,
            correlation_id=ctx.correlation_id,
            selection=len(selection or ()),
        )
        try:
            entries = validate_selection(selection or ())
            await self._monitor(
                tvdb_id, entries, quality_profile_id, root_folder_path, ctx, result
            )
            result.success = True
        except ArrLinkError as e:
            result.error = error_message(e)
            logger.error(
                "Monitoring de la serie {tvdb_id} en echec",
                tvdb_id=tvdb_id,
                correlation_id=ctx.correlation_id,
                error=str(e),
            )
        return result

    async def _monitor(
        self,
        tvdb_id: int,
        entries: list[EpisodeSelection],
        quality_profile_id: Optional[int],
        root_folder_path: Optional[str],
        ctx: OperationContext,
        result: MonitorSeriesResult,
    ) -> None:
        existing = await self._client.get_series_by_tvdb_id(tvdb_id, ctx=ctx)

        if existing is not None and existing.is_fully_monitored and not entries:
            logger.info(
                "Serie deja monitoree, recherche directe",
                series_id=existing.id,
                correlation_id=ctx.correlation_id,
            )
            result.series = existing
            command = await self._client.trigger_series_search(existing.id, ctx=ctx)
            result.search_triggered = True
            result.command_id = command.id
            return

        if existing is not None:
            planned = determine_monitoring_strategy(existing.seasons, entries)
            series = existing
            if planned != existing.seasons or not existing.monitored:
                series = await self._client.update_series(
                    replace(existing, seasons=planned, monitored=True), ctx=ctx
                )
        else:
            candidate = await self._lookup(tvdb_id, ctx)
            planned = determine_monitoring_strategy(candidate.seasons, entries)
            profile_id = quality_profile_id
            if profile_id is None:
                profile_id = await self._default_quality_profile(ctx)
            root_path = root_folder_path or await self._default_root_folder(ctx)
            series = await self._client.add_series(
                AddSeriesRequest(
                    series=candidate,
                    quality_profile_id=profile_id,
                    root_folder_path=root_path,
                    seasons=planned,
                    monitor=DEFAULT_MONITOR_TYPE,
                ),
                ctx=ctx,
            )
            result.series_added = True
        result.series = series

        targets = entries or [
            EpisodeSelection(state.season_number)
            for state in planned
            if state.monitored and not state.is_specials
        ]
        # La serie existe desormais : l'echeance devient un avertissement
        for index, entry in enumerate(targets):
            try:
                await self._configure_season(series, entry, ctx, result)
            except DeadlineExceededError:
                skipped = ", ".join(str(e.season) for e in targets[index:])
                result.warnings.append(
                    f"Operation deadline reached; season(s) {skipped} skipped"
                )
                if result.changes:
                    result.warnings.append("Search not triggered: operation deadline reached")
                logger.warning(
                    "Echeance atteinte pendant la configuration des saisons",
                    series_id=series.id,
                    skipped=skipped,
                    correlation_id=ctx.correlation_id,
                )
                return

        if not result.changes:
            logger.info("Aucun changement de monitoring, pas de recherche", series_id=series.id)
            return

        try:
            command = await self._client.trigger_series_search(series.id, ctx=ctx)
        except (ApiError, DeadlineExceededError) as e:
            result.warnings.append(f"Series updated but search failed: {e.user_message()}")
            return
        result.search_triggered = True
        result.command_id = command.id

    async def _lookup(self, tvdb_id: int, ctx: OperationContext) -> Series:
        """Resolution exacte par ID TVDB via le lookup du backend."""
        matches = await self._client.search_series(f"tvdb:{tvdb_id}", ctx=ctx)
        for candidate in matches:
            if candidate.tvdb_id == tvdb_id:
                return candidate
        raise MonitoringError(f"Series with TVDB ID {tvdb_id} not found")

    async def _default_quality_profile(self, ctx: OperationContext) -> int:
        profile = select_quality_profile(await self._client.get_quality_profiles(ctx=ctx))
        if profile is None:
            raise MonitoringError("No quality profiles configured")
        return profile.id

    async def _default_root_folder(self, ctx: OperationContext) -> str:
        folder = select_root_folder(await self._client.get_root_folders(ctx=ctx))
        if folder is None:
            raise MonitoringError("No root folders configured")
        return folder.path

    async def _configure_season(
        self,
        series: Series,
        entry: EpisodeSelection,
        ctx: OperationContext,
        result: MonitorSeriesResult,
    ) -> None:
        """
        Regle le monitoring des episodes d'une saison.

        Saison entiere : tous les episodes sont monitores. Selection partielle :
        les episodes choisis sont monitores, les autres demonitores.
        Un echec sur la saison devient un avertissement.
        """
        season = entry.season
        try:
            episodes = await self._episodes_with_retry(
                series.id, season, ctx, self._episode_retry_attempts
            )
            if not episodes:
                result.warnings.append(f"No episodes found for season {season}")
                return

            if entry.is_whole_season:
                await self._client.set_episodes_monitored(
                    [episode.id for episode in episodes], True, ctx=ctx
                )
                result.changes.append(MonitoringChange(season, MonitoringAction.MONITORED))
                return

            wanted = set(entry.episodes)
            chosen = [e for e in episodes if e.episode_number in wanted]
            others = [e for e in episodes if e.episode_number not in wanted and e.monitored]
            missing = sorted(wanted - {e.episode_number for e in episodes})
            if missing:
                result.warnings.append(
                    f"Season {season}: episodes {', '.join(str(n) for n in missing)} not found"
                )

            if chosen:
                await self._client.set_episodes_monitored([e.id for e in chosen], True, ctx=ctx)
                result.changes.append(
                    MonitoringChange(season, MonitoringAction.MONITORED, _numbers(chosen))
                )
            if others:
                await self._client.set_episodes_monitored([e.id for e in others], False, ctx=ctx)
                result.changes.append(
                    MonitoringChange(season, MonitoringAction.UNMONITORED, _numbers(others))
                )
        except ApiError as e:
            logger.warning(
                "Saison {season} non configuree",
                season=season,
                series_id=series.id,
                error_kind=e.kind.value,
                correlation_id=ctx.correlation_id,
            )
            result.warnings.append(f"Season {season}: {e.user_message()}")

    async def _episodes_with_retry(
        self, series_id: int, season: int, ctx: OperationContext, attempts: int
    ) -> list[Episode]:
        """
        Liste les episodes d'une saison en relisant tant que la liste est vide.

        Un backend qui vient d'ajouter une serie peut mettre quelques secondes
        a peupler ses episodes. L'attente croit avec le numero de tentative.
        """
        episodes: list[Episode] = []
        for attempt in range(1, attempts + 1):
            episodes = await self._client.get_episodes(series_id, season, ctx=ctx)
            if episodes or attempt == attempts:
                break
            delay = self._episode_retry_delay * attempt
            logger.debug(
                "Episodes indisponibles, nouvelle lecture dans {delay}s",
                delay=delay,
                series_id=series_id,
                season=season,
                attempt=attempt,
            )
            await wait(self._clock, delay, ctx.deadline)
        return episodes

    # ------------------------------------------------------------------
    # Unmonitor and delete
    # ------------------------------------------------------------------

    async def unmonitor_and_delete(
        self,
        tvdb_id: int,
        selection: Optional[Sequence[EpisodeSelection]] = None,
        *,
        delete_files: bool = False,
        correlation_id: Optional[str] = None,
    ) -> UnmonitorSeriesResult:
        """
        Demonitore une selection, ou supprime toute la serie sans selection.

        Args:
            tvdb_id: ID TVDB de la serie
            selection: Saisons/episodes a retirer, None pour supprimer la serie
            delete_files: Suppression des fichiers restants si la serie est
                supprimee apres un demonitoring partiel (sans selection, les
                fichiers sont toujours supprimes)
            correlation_id: Identifiant de correlation (defaut: genere)

        Returns:
            UnmonitorSeriesResult, success=False avec `error` en cas d'echec fatal
        """
        ctx = self._new_context(correlation_id)
        result = UnmonitorSeriesResult(
            success=False, tvdb_id=tvdb_id, correlation_id=ctx.correlation_id
        )
        logger.info(
            "Demonitoring de la serie {tvdb_id}",
            tvdb_id=tvdb_id,
            correlation_id=ctx.correlation_id,
            selection=len(selection or ()),
        )
        try:
            entries = validate_selection(selection or ())
            series = await self._client.get_series_by_tvdb_id(tvdb_id, ctx=ctx)
            if series is None:
                raise MonitoringError("Series not found in library")
            result.series = series

            if not entries:
                await self._delete_series(series, ctx, result)
            else:
                await self._unmonitor_selection(series, entries, delete_files, ctx, result)
            result.success = True
        except ArrLinkError as e:
            result.error = error_message(e)
            logger.error(
                "Demonitoring de la serie {tvdb_id} en echec",
                tvdb_id=tvdb_id,
                correlation_id=ctx.correlation_id,
                error=str(e),
            )
        return result

    async def _delete_series(
        self, series: Series, ctx: OperationContext, result: UnmonitorSeriesResult
    ) -> None:
        """Suppression complete : annulation des telechargements puis de la serie."""
        queue = await load_queue(self._client, ctx, result.warnings)
        report = await cancel_queue_items(
            self._client, queue, lambda item: item.series_id == series.id, ctx
        )
        result.downloads_cancelled = report.cancelled
        if report.warning():
            result.warnings.append(report.warning())

        await self._client.delete_series(series.id, delete_files=True, ctx=ctx)
        result.series_deleted = True
        result.changes.append(MonitoringChange(WHOLE_SERIES, MonitoringAction.DELETED_SERIES))
        logger.info(
            "Serie supprimee avec ses fichiers",
            series_id=series.id,
            cancelled=report.cancelled,
            correlation_id=ctx.correlation_id,
        )

    async def _unmonitor_selection(
        self,
        series: Series,
        entries: list[EpisodeSelection],
        delete_files: bool,
        ctx: OperationContext,
        result: UnmonitorSeriesResult,
    ) -> None:
        queue = await load_queue(self._client, ctx, result.warnings)

        # Les saisons sont independantes : traitees en parallele, puis l'etat
        # des saisons de la serie est applique en une seule mise a jour.
        tasks = [
            asyncio.create_task(self._unmonitor_entry(series, entry, queue, ctx))
            for entry in entries
        ]
        try:
            outcomes = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        for outcome in outcomes:
            result.changes.extend(outcome.changes)
            result.warnings.extend(outcome.warnings)
            result.episodes_unmonitored += outcome.episodes_unmonitored
            result.downloads_cancelled += outcome.downloads_cancelled
            result.files_deleted += outcome.files_deleted

        # Avant tout changement, l'echeance reste fatale ; ensuite elle
        # interrompt l'operation avec un avertissement.
        state_changed = any(outcome.touched for outcome in outcomes)
        if any(outcome.deadline_reached for outcome in outcomes):
            if not state_changed:
                raise DeadlineExceededError(self._operation_timeout)
            result.warnings.append("Operation deadline reached; final verification skipped")
            return

        emptied = [outcome.season for outcome in outcomes if outcome.season_emptied]
        try:
            await self._finalize(series, emptied, delete_files, ctx, result)
        except DeadlineExceededError:
            if not (state_changed or result.changes):
                raise
            result.warnings.append("Operation deadline reached; final verification skipped")
            logger.warning(
                "Echeance atteinte avant la verification finale",
                series_id=series.id,
                correlation_id=ctx.correlation_id,
            )

    async def _finalize(
        self,
        series: Series,
        emptied: list[int],
        delete_files: bool,
        ctx: OperationContext,
        result: UnmonitorSeriesResult,
    ) -> None:
        """Demonitore les saisons videes puis supprime la serie si plus rien n'est monitore."""
        if emptied:
            await self._unmonitor_seasons(series, emptied, ctx, result)

        scheduler = RecheckScheduler(self._clock, ctx.deadline)
        scheduler.schedule_recheck(self._deletion_recheck_delay)
        remaining = await scheduler.recheck(
            lambda: self._has_monitored_content(series.id, ctx, result)
        )
        if remaining:
            return

        logger.info(
            "Plus aucun episode monitore, suppression de la serie",
            series_id=series.id,
            correlation_id=ctx.correlation_id,
        )
        try:
            await self._client.delete_series(series.id, delete_files=delete_files, ctx=ctx)
        except ApiError as e:
            result.warnings.append(
                f"Series has no monitored episodes left but could not be deleted: "
                f"{e.user_message()}"
            )
            return
        result.series_deleted = True
        result.changes.append(MonitoringChange(WHOLE_SERIES, MonitoringAction.DELETED_SERIES))

    async def _unmonitor_entry(
        self,
        series: Series,
        entry: EpisodeSelection,
        queue: list[QueueItem],
        ctx: OperationContext,
    ) -> _EntryOutcome:
        """Traite une entree ; l'echeance l'interrompt sans perdre son bilan."""
        outcome = _EntryOutcome(entry.season)
        try:
            await self._process_entry(series, entry, queue, ctx, outcome)
        except DeadlineExceededError:
            outcome.deadline_reached = True
            outcome.warnings.append(
                f"Operation deadline reached; season {entry.season} not fully processed"
            )
        return outcome

    async def _process_entry(
        self,
        series: Series,
        entry: EpisodeSelection,
        queue: list[QueueItem],
        ctx: OperationContext,
        outcome: _EntryOutcome,
    ) -> None:
        """Annule, supprime les fichiers puis demonitore une entree de selection."""
        season = entry.season
        try:
            episodes = await self._episodes_with_retry(
                series.id, season, ctx, self._episode_retry_attempts
            )
        except ApiError as e:
            outcome.warnings.append(f"Season {season}: {e.user_message()}")
            return

        if entry.is_whole_season:
            targets = episodes
            if not episodes:
                outcome.warnings.append(f"No episodes found for season {season}")
        else:
            wanted = set(entry.episodes)
            targets = [e for e in episodes if e.episode_number in wanted]
            missing = sorted(wanted - {e.episode_number for e in episodes})
            if missing:
                outcome.warnings.append(
                    f"Season {season}: episodes {', '.join(str(n) for n in missing)} not found"
                )

        # Sans episode cible, rien n'est modifie : seul l'etat de la saison est evalue
        if targets and not await self._unmonitor_targets(entry, targets, queue, ctx, outcome):
            return

        if entry.is_whole_season:
            outcome.season_emptied = True
        else:
            outcome.season_emptied = await self._season_is_empty(series.id, season, ctx, outcome)

    async def _unmonitor_targets(
        self,
        entry: EpisodeSelection,
        targets: list[Episode],
        queue: list[QueueItem],
        ctx: OperationContext,
        outcome: _EntryOutcome,
    ) -> bool:
        """Retourne False si le demonitoring lui-meme a echoue."""
        season = entry.season
        episode_numbers = None if entry.is_whole_season else _numbers(targets)

        target_ids = {episode.id for episode in targets}
        report = await cancel_queue_items(
            self._client, queue, lambda item: item.episode_id in target_ids, ctx
        )
        outcome.downloads_cancelled = report.cancelled
        if report.warning():
            outcome.warnings.append(f"Season {season}: {report.warning()}")

        # Un fichier peut contenir plusieurs episodes
        file_ids = sorted(
            {e.episode_file_id for e in targets if e.has_file and e.episode_file_id}
        )
        for file_id in file_ids:
            try:
                await self._client.delete_episode_file(file_id, ctx=ctx)
            except ApiError as e:
                outcome.warnings.append(
                    f"Season {season}: could not delete episode file: {e.user_message()}"
                )
                continue
            outcome.files_deleted += 1

        try:
            await self._client.set_episodes_monitored(sorted(target_ids), False, ctx=ctx)
        except ApiError as e:
            outcome.warnings.append(f"Season {season}: {e.user_message()}")
            return False

        outcome.episodes_unmonitored = len(targets)
        outcome.changes.append(
            MonitoringChange(season, MonitoringAction.UNMONITORED, episode_numbers)
        )
        if outcome.files_deleted:
            outcome.changes.append(
                MonitoringChange(season, MonitoringAction.DELETED_FILES, episode_numbers)
            )
        return True

    async def _season_is_empty(
        self, series_id: int, season: int, ctx: OperationContext, outcome: _EntryOutcome
    ) -> bool:
        try:
            episodes = await self._client.get_episodes(series_id, season, ctx=ctx)
        except ApiError as e:
            outcome.warnings.append(f"Season {season}: {e.user_message()}")
            return False
        return not any(episode.monitored for episode in episodes)

    async def _unmonitor_seasons(
        self,
        series: Series,
        seasons: list[int],
        ctx: OperationContext,
        result: UnmonitorSeriesResult,
    ) -> None:
        """Demonitore les saisons videes, en une seule mise a jour de la serie."""
        try:
            current = await self._client.get_series(series.id, ctx=ctx)
        except ApiError as e:
            logger.debug(
                "Relecture de la serie impossible, etat local utilise",
                series_id=series.id,
                error_kind=e.kind.value,
            )
            current = series

        emptied = set(seasons)
        updated_seasons = [
            SeasonState(state.season_number, False)
            if state.season_number in emptied
            else state
            for state in current.seasons
        ]
        try:
            result.series = await self._client.update_series(
                replace(current, seasons=updated_seasons), ctx=ctx
            )
        except ApiError as e:
            result.warnings.append(
                f"Could not unmonitor seasons {', '.join(str(s) for s in sorted(emptied))}: "
                f"{e.user_message()}"
            )
            return
        for season in sorted(emptied):
            result.changes.append(MonitoringChange(season, MonitoringAction.UNMONITORED_SEASON))

    async def _has_monitored_content(
        self, series_id: int, ctx: OperationContext, result: UnmonitorSeriesResult
    ) -> bool:
        """
        Verification finale : reste-t-il un episode monitore hors specials ?

        Une saison dont la liste reste vide apres relectures compte comme vide.
        En cas d'erreur, la serie est conservee.
        """
        try:
            current = await self._client.get_series(series_id, ctx=ctx)
        except ApiError as e:
            result.warnings.append(f"Could not verify remaining episodes: {e.user_message()}")
            return True

        episodes_by_season: dict[int, list[Episode]] = {}
        for state in current.seasons:
            if state.is_specials:
                continue
            try:
                episodes_by_season[state.season_number] = await self._episodes_with_retry(
                    series_id, state.season_number, ctx, self._recheck_episode_attempts
                )
            except ApiError as e:
                result.warnings.append(
                    f"Could not verify season {state.season_number}: {e.user_message()}"
                )
                return True
        return has_remaining_monitored_content(current.seasons, episodes_by_season)


def _numbers(episodes: Sequence[Episode]) -> tuple[int, ...]:
    return tuple(sorted(episode.episode_number for episode in episodes))
