"""
Commandes CLI d'interrogation des backends : sante et recherches.
"""

import asyncio
from typing import Annotated, NoReturn

import typer

from arrlink.adapters.cli.display import (
    display_health,
    display_library_items,
    display_movies,
    display_series,
)
from arrlink.adapters.cli.helpers import console, suppress_loguru, with_container
from arrlink.core.errors import ApiError, InvalidSearchQueryError


def health() -> None:
    """Verifie l'etat et la version d'API des backends configures."""
    healthy = asyncio.run(_health_async())
    if not healthy:
        raise typer.Exit(code=1)


@with_container()
async def _health_async(container) -> bool:
    service = container.health_service()
    report = await service.check_all()
    with suppress_loguru():
        if not report.statuses:
            console.print("[yellow]Aucun backend configure.[/yellow]")
            return True
        display_health(report)
    return report.healthy


def search_series(
    query: Annotated[str, typer.Argument(help="Titre recherche")],
) -> None:
    """Recherche une serie dans le gestionnaire de series."""
    asyncio.run(_search_series_async(query))


@with_container()
async def _search_series_async(container, query: str) -> None:
    client = container.sonarr_client()
    try:
        results = await client.search_series(query)
    except (InvalidSearchQueryError, ApiError) as e:
        _fail(e)
    with suppress_loguru():
        if not results:
            console.print("[yellow]Aucun resultat.[/yellow]")
            return
        display_series(results)


def search_movies(
    query: Annotated[str, typer.Argument(help="Titre recherche")],
) -> None:
    """Recherche un film dans le gestionnaire de films."""
    asyncio.run(_search_movies_async(query))


@with_container()
async def _search_movies_async(container, query: str) -> None:
    client = container.radarr_client()
    try:
        results = await client.search_movies(query)
    except (InvalidSearchQueryError, ApiError) as e:
        _fail(e)
    with suppress_loguru():
        if not results:
            console.print("[yellow]Aucun resultat.[/yellow]")
            return
        display_movies(results)


def search_library(
    query: Annotated[str, typer.Argument(help="Titre recherche")],
    limit: Annotated[
        int,
        typer.Option("--limit", "-l", help="Nombre maximum de resultats"),
    ] = 20,
) -> None:
    """Recherche un film ou une serie dans la mediatheque."""
    asyncio.run(_search_library_async(query, limit))


@with_container()
async def _search_library_async(container, query: str, limit: int) -> None:
    client = container.emby_client()
    try:
        items = await client.search_library(query, limit=limit)
    except (InvalidSearchQueryError, ApiError) as e:
        _fail(e)
    with suppress_loguru():
        if not items:
            console.print("[yellow]Aucun resultat.[/yellow]")
            return
        urls = [client.build_playback_url(item.id, item.server_id) for item in items]
        display_library_items(items, urls)


def _fail(error: Exception) -> NoReturn:
    """Affiche le message utilisateur d'une erreur et termine la commande."""
    message = error.user_message() if isinstance(error, ApiError) else str(error)
    console.print(f"[red]Erreur:[/red] {message}")
    raise typer.Exit(code=1)
