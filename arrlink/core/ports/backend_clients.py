"""
Interfaces ports pour les clients backend.

Interfaces abstraites (ports) definissant les operations typees que
l'orchestrateur utilise. Les implementations (adaptateurs) construisent
ces operations a partir du RequestExecutor et d'une table d'endpoints propre
a chaque backend (Sonarr pour les series, Radarr pour les films, Emby pour
la mediatheque).

Chaque operation accepte un OperationContext optionnel : son identifiant de
correlation est transmis a toutes les requetes, son echeance borne les
relances.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from arrlink.core.backends import BackendKind
from arrlink.core.entities.media import (
    AddMovieRequest,
    AddSeriesRequest,
    BackendCapabilities,
    CommandResult,
    Episode,
    HealthStatus,
    LibraryItem,
    Movie,
    QualityProfile,
    QueueItem,
    RootFolder,
    Series,
)
from arrlink.core.value_objects.api_version import ApiVersionResult
from arrlink.core.value_objects.context import OperationContext


class IBackendClient(ABC):
    """Operations communes a tous les clients backend."""

    @property
    @abstractmethod
    def backend(self) -> BackendKind:
        ...

    @abstractmethod
    def capabilities(self) -> BackendCapabilities:
        ...

    @abstractmethod
    async def check_health(self, *, ctx: Optional[OperationContext] = None) -> HealthStatus:
        """
        Verifie l'etat du backend via son endpoint de statut systeme.

        Ne leve jamais d'ApiError : un echec est rapporte dans HealthStatus.
        """
        ...

    @abstractmethod
    async def get_api_version(self, *, ctx: Optional[OperationContext] = None) -> ApiVersionResult:
        """Retourne la version d'API negociee (calculee une fois puis en cache)."""
        ...

    @abstractmethod
    async def refresh_api_version(
        self, *, ctx: Optional[OperationContext] = None
    ) -> ApiVersionResult:
        """Force le recalcul de la version d'API et remplace le cache."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class ISeriesManager(IBackendClient):
    """
    Port du gestionnaire de series (Sonarr).

    Toutes les methodes levent une ApiError terminale en cas d'echec.
    """

    @abstractmethod
    async def search_series(
        self, query: str, *, ctx: Optional[OperationContext] = None
    ) -> list[Series]:
        """
        Recherche des series via l'endpoint de lookup.

        Raises:
            InvalidSearchQueryError: Terme invalide, avant tout appel reseau
        """
        ...

    @abstractmethod
    async def get_series_by_tvdb_id(
        self, tvdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Series]:
        """Retourne la serie de la bibliotheque ayant cet ID TVDB, ou None."""
        ...

    @abstractmethod
    async def get_series(
        self, series_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Series:
        ...

    @abstractmethod
    async def add_series(
        self, request: AddSeriesRequest, *, ctx: Optional[OperationContext] = None
    ) -> Series:
        ...

    @abstractmethod
    async def update_series(
        self, series: Series, *, ctx: Optional[OperationContext] = None
    ) -> Series:
        """Envoie la serie complete (flag monitored et liste des saisons) en une requete."""
        ...

    @abstractmethod
    async def delete_series(
        self,
        series_id: int,
        *,
        delete_files: bool,
        add_import_list_exclusion: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        ...

    @abstractmethod
    async def get_episodes(
        self,
        series_id: int,
        season_number: Optional[int] = None,
        *,
        ctx: Optional[OperationContext] = None,
    ) -> list[Episode]:
        ...

    @abstractmethod
    async def set_episodes_monitored(
        self,
        episode_ids: Sequence[int],
        monitored: bool,
        *,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        ...

    @abstractmethod
    async def delete_episode_file(
        self, episode_file_id: int, *, ctx: Optional[OperationContext] = None
    ) -> None:
        ...

    @abstractmethod
    async def get_queue(self, *, ctx: Optional[OperationContext] = None) -> list[QueueItem]:
        ...

    @abstractmethod
    async def remove_queue_item(
        self,
        queue_id: int,
        *,
        remove_from_client: bool = True,
        blocklist: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        ...

    @abstractmethod
    async def trigger_series_search(
        self, series_id: int, *, ctx: Optional[OperationContext] = None
    ) -> CommandResult:
        ...

    @abstractmethod
    async def get_quality_profiles(
        self, *, ctx: Optional[OperationContext] = None
    ) -> list[QualityProfile]:
        ...

    @abstractmethod
    async def get_root_folders(self, *, ctx: Optional[OperationContext] = None) -> list[RootFolder]:
        ...


class IMovieManager(IBackendClient):
    """Port du gestionnaire de films (Radarr)."""

    @abstractmethod
    async def search_movies(
        self, query: str, *, ctx: Optional[OperationContext] = None
    ) -> list[Movie]:
        ...

    @abstractmethod
    async def lookup_movie_by_tmdb_id(
        self, tmdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Movie]:
        """Resout un film hors bibliotheque par correspondance exacte d'ID TMDB."""
        ...

    @abstractmethod
    async def get_movie_by_tmdb_id(
        self, tmdb_id: int, *, ctx: Optional[OperationContext] = None
    ) -> Optional[Movie]:
        """Retourne le film de la bibliotheque ayant cet ID TMDB, ou None."""
        ...

    @abstractmethod
    async def add_movie(
        self, request: AddMovieRequest, *, ctx: Optional[OperationContext] = None
    ) -> Movie:
        ...

    @abstractmethod
    async def update_movie(self, movie: Movie, *, ctx: Optional[OperationContext] = None) -> Movie:
        ...

    @abstractmethod
    async def delete_movie(
        self,
        movie_id: int,
        *,
        delete_files: bool,
        add_import_exclusion: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        ...

    @abstractmethod
    async def get_queue(self, *, ctx: Optional[OperationContext] = None) -> list[QueueItem]:
        ...

    @abstractmethod
    async def remove_queue_item(
        self,
        queue_id: int,
        *,
        remove_from_client: bool = True,
        blocklist: bool = False,
        ctx: Optional[OperationContext] = None,
    ) -> None:
        ...

    @abstractmethod
    async def trigger_movie_search(
        self, movie_id: int, *, ctx: Optional[OperationContext] = None
    ) -> CommandResult:
        ...

    @abstractmethod
    async def get_quality_profiles(
        self, *, ctx: Optional[OperationContext] = None
    ) -> list[QualityProfile]:
        ...

    @abstractmethod
    async def get_root_folders(self, *, ctx: Optional[OperationContext] = None) -> list[RootFolder]:
        ...


class ILibraryServer(IBackendClient):
    """Port du serveur de mediatheque (Emby)."""

    @abstractmethod
    async def search_library(
        self, query: str, *, limit: int = 20, ctx: Optional[OperationContext] = None
    ) -> list[LibraryItem]:
        ...

    @abstractmethod
    async def get_item(
        self, item_id: str, *, ctx: Optional[OperationContext] = None
    ) -> Optional[LibraryItem]:
        ...

    @abstractmethod
    def build_playback_url(self, item_id: str, server_id: Optional[str] = None) -> str:
        ...
