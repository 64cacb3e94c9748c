"""
Parsing des ressources communes a Sonarr et Radarr (API v3).

File de telechargement, profils de qualite, dossiers racine et commandes
ont le meme format sur les deux backends.
"""

from typing import Any, Optional

from arrlink.core.entities.media import CommandResult, QualityProfile, QueueItem, RootFolder


def parse_queue(payload: Any) -> list[QueueItem]:
    """
    Convertit la reponse de /api/v3/queue en QueueItem.

    Accepte le format pagine ({"records": [...]}) et l'ancien format liste.
    """
    if isinstance(payload, dict):
        records = payload.get("records") or []
    elif isinstance(payload, list):
        records = payload
    else:
        records = []

    items = []
    for record in records:
        if not isinstance(record, dict) or record.get("id") is None:
            continue
        items.append(
            QueueItem(
                id=int(record["id"]),
                title=record.get("title", ""),
                status=record.get("status", ""),
                series_id=_optional_int(record.get("seriesId")),
                episode_id=_optional_int(record.get("episodeId")),
                season_number=_optional_int(record.get("seasonNumber")),
                movie_id=_optional_int(record.get("movieId")),
            )
        )
    return items


def parse_quality_profiles(payload: Any) -> list[QualityProfile]:
    return [
        QualityProfile(id=int(item["id"]), name=item.get("name", ""))
        for item in payload or []
        if isinstance(item, dict) and "id" in item
    ]


def parse_root_folders(payload: Any) -> list[RootFolder]:
    return [
        RootFolder(
            id=int(item["id"]),
            path=item.get("path", ""),
            accessible=item.get("accessible", True),
            free_space=item.get("freeSpace"),
        )
        for item in payload or []
        if isinstance(item, dict) and "id" in item
    ]


def parse_command(payload: Any) -> CommandResult:
    payload = payload if isinstance(payload, dict) else {}
    return CommandResult(
        id=int(payload.get("id", 0)),
        name=payload.get("name", ""),
        status=payload.get("status", ""),
    )


def _optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None
