"""
Regles pures de l'orchestration du monitoring.

Aucune de ces fonctions n'effectue d'appel reseau : elles calculent l'etat
cible a partir de l'etat courant et de la selection, ce qui les rend
testables sans client backend.
"""

from typing import Mapping, Optional, Sequence

from arrlink.core.entities.media import (
    SPECIALS_SEASON,
    Episode,
    QualityProfile,
    RootFolder,
    SeasonState,
)
from arrlink.core.value_objects.selection import EpisodeSelection

# Type de monitoring passe a l'ajout d'une serie ; le detail est regle
# ensuite episode par episode.
DEFAULT_MONITOR_TYPE = "all"


def determine_monitoring_strategy(
    seasons: Sequence[SeasonState],
    selection: Optional[Sequence[EpisodeSelection]] = None,
) -> list[SeasonState]:
    """
    Calcule l'etat de monitoring cible des saisons.

    Sans selection, toutes les saisons hors specials sont monitorees et la
    saison 0 garde son etat. Avec une selection, seules les saisons listees
    sont monitorees : l'etat est remplace, pas fusionne.

    Args:
        seasons: Etat courant des saisons
        selection: Selection validee, ou None pour toute la serie

    Returns:
        Nouvel etat des saisons, dans le meme ordre

    Example:
        >>> determine_monitoring_strategy(
        ...     [SeasonState(1, False), SeasonState(2, True)],
        ...     [EpisodeSelection(1)],
        ... )
        [SeasonState(season_number=1, monitored=True), SeasonState(season_number=2, monitored=False)]
    """
    if not selection:
        return [
            state if state.is_specials else SeasonState(state.season_number, True)
            for state in seasons
        ]

    selected = {entry.season for entry in selection}
    return [
        SeasonState(state.season_number, state.season_number in selected)
        for state in seasons
    ]


def has_remaining_monitored_content(
    seasons: Sequence[SeasonState],
    episodes_by_season: Mapping[int, Sequence[Episode]],
) -> bool:
    """
    Indique si au moins une saison (hors specials) a encore un episode monitore.

    Une saison absente du mapping, ou dont la liste est vide, compte comme
    n'ayant aucun episode monitore.
    """
    for state in seasons:
        if state.season_number == SPECIALS_SEASON:
            continue
        if any(episode.monitored for episode in episodes_by_season.get(state.season_number, ())):
            return True
    return False


def select_quality_profile(profiles: Sequence[QualityProfile]) -> Optional[QualityProfile]:
    """Profil par defaut : celui dont le nom contient "any", sinon le premier."""
    if not profiles:
        return None
    for profile in profiles:
        if "any" in profile.name.lower():
            return profile
    return profiles[0]


def select_root_folder(folders: Sequence[RootFolder]) -> Optional[RootFolder]:
    """Dossier racine par defaut : le premier accessible."""
    for folder in folders:
        if folder.accessible:
            return folder
    return None
