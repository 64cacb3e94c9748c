"""
Selection saison/episodes et journal des changements de monitoring.

Une selection est une saisie utilisateur : elle doit etre validee avant
toute utilisation par l'orchestrateur. Chaque regle violee produit un
SelectionIssue distinct afin que l'appelant puisse tous les afficher.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from arrlink.core.errors import SelectionValidationError


@dataclass(frozen=True)
class EpisodeSelection:
    """
    Selection d'une saison, entiere ou partielle.

    Attributs :
        season : Numero de saison (0 = specials)
        episodes : Numeros d'episodes, ou None pour la saison entiere
    """

    season: int
    episodes: Optional[tuple[int, ...]] = None

    def __post_init__(self) -> None:
        if self.episodes is not None and not isinstance(self.episodes, tuple):
            object.__setattr__(self, "episodes", tuple(self.episodes))

    @property
    def is_whole_season(self) -> bool:
        return self.episodes is None


class MonitoringAction(str, Enum):
    """Action effectivement realisee par l'orchestrateur."""

    MONITORED = "monitored"
    UNMONITORED = "unmonitored"
    UNMONITORED_SEASON = "unmonitored_season"
    DELETED_SERIES = "deleted_series"
    DELETED_FILES = "deleted_files"


@dataclass(frozen=True)
class MonitoringChange:
    """
    Entree du journal d'audit d'une orchestration.

    Decrit ce qui a ete fait, independamment de ce qui etait demande
    (une demande peut n'etre que partiellement satisfaite).
    """

    season: int
    action: MonitoringAction
    episodes: Optional[tuple[int, ...]] = None


class SelectionIssueCode(str, Enum):
    DUPLICATE_SEASON = "duplicate_season"
    NEGATIVE_SEASON = "negative_season"
    EMPTY_EPISODE_LIST = "empty_episode_list"
    INVALID_EPISODE_NUMBER = "invalid_episode_number"
    DUPLICATE_EPISODE = "duplicate_episode"
    UNRECOGNIZED_TOKEN = "unrecognized_token"
    RANGE_TOO_LARGE = "range_too_large"


@dataclass(frozen=True)
class SelectionIssue:
    code: SelectionIssueCode
    season: int
    message: str


def find_selection_issues(selection: Sequence[EpisodeSelection]) -> list[SelectionIssue]:
    """
    Liste tous les problemes d'une selection, sans lever d'exception.

    Args:
        selection: Entrees a verifier

    Returns:
        Liste des problemes, vide si la selection est valide
    """
    issues: list[SelectionIssue] = []
    seen_seasons: set[int] = set()

    for entry in selection:
        season = entry.season
        if season < 0:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.NEGATIVE_SEASON,
                    season,
                    f"Season number must not be negative (got {season})",
                )
            )
        if season in seen_seasons:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.DUPLICATE_SEASON,
                    season,
                    f"Season {season} is selected more than once",
                )
            )
        seen_seasons.add(season)

        if entry.episodes is None:
            continue
        if not entry.episodes:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.EMPTY_EPISODE_LIST,
                    season,
                    f"Season {season}: episode list must not be empty",
                )
            )
            continue

        invalid = sorted({number for number in entry.episodes if number <= 0})
        if invalid:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.INVALID_EPISODE_NUMBER,
                    season,
                    f"Season {season}: episode numbers must be positive "
                    f"(got {', '.join(str(n) for n in invalid)})",
                )
            )

        seen_episodes: set[int] = set()
        duplicates: set[int] = set()
        for number in entry.episodes:
            if number in seen_episodes:
                duplicates.add(number)
            seen_episodes.add(number)
        if duplicates:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.DUPLICATE_EPISODE,
                    season,
                    f"Season {season}: duplicate episodes "
                    f"{', '.join(str(n) for n in sorted(duplicates))}",
                )
            )

    return issues


def validate_selection(selection: Sequence[EpisodeSelection]) -> list[EpisodeSelection]:
    """
    Valide une selection et la retourne telle quelle si elle est correcte.

    Raises:
        SelectionValidationError: Avec la liste complete des problemes
    """
    issues = find_selection_issues(selection)
    if issues:
        raise SelectionValidationError(issues)
    return list(selection)


# Nombre maximal d'episodes pour une plage "SxEa-b"
MAX_EPISODE_RANGE = 1000

# "S1", "S2E5", "S3E1-10", "s04e02-e05"
_TOKEN_PATTERN = re.compile(
    r"^S(?P<season>\d+)(?:E(?P<start>\d+)(?:-E?(?P<end>\d+))?)?$", re.IGNORECASE
)


def parse_selection(text: str) -> list[EpisodeSelection]:
    """
    Convertit une saisie texte en selection.

    Les episodes d'une meme saison repartis sur plusieurs elements sont
    regroupes, dans l'ordre d'apparition.

    Args:
        text: Elements separes par des virgules (ex: "S1, S2E5, S3E1-10")

    Returns:
        Liste d'EpisodeSelection (non validee)

    Raises:
        SelectionValidationError: Si un element n'est pas reconnu

    Example:
        >>> parse_selection("S1, S2E1-3")
        [EpisodeSelection(season=1, episodes=None), EpisodeSelection(season=2, episodes=(1, 2, 3))]
    """
    by_season: dict[int, Optional[list[int]]] = {}
    issues: list[SelectionIssue] = []

    for raw_token in text.split(","):
        token = raw_token.strip().replace(" ", "")
        if not token:
            continue
        match = _TOKEN_PATTERN.match(token)
        if match is None:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.UNRECOGNIZED_TOKEN,
                    -1,
                    f"Unrecognized selection '{raw_token.strip()}' (expected S1, S1E2 or S1E2-5)",
                )
            )
            continue

        season = int(match.group("season"))
        start = match.group("start")
        end = match.group("end")
        if start is None:
            by_season[season] = None
            continue

        first, last = int(start), int(end or start)
        if last - first + 1 > MAX_EPISODE_RANGE:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.RANGE_TOO_LARGE,
                    season,
                    f"Season {season}: episode range '{raw_token.strip()}' exceeds "
                    f"{MAX_EPISODE_RANGE} episodes",
                )
            )
            continue
        numbers = list(range(first, last + 1))
        if not numbers:
            issues.append(
                SelectionIssue(
                    SelectionIssueCode.EMPTY_EPISODE_LIST,
                    season,
                    f"Season {season}: empty episode range '{raw_token.strip()}'",
                )
            )
            continue
        if season in by_season and by_season[season] is None:
            # Saison entiere deja demandee
            continue
        by_season.setdefault(season, []).extend(numbers)

    if issues:
        raise SelectionValidationError(issues)

    return [
        EpisodeSelection(season, tuple(episodes) if episodes is not None else None)
        for season, episodes in by_season.items()
    ]
