"""
Commandes CLI d'orchestration du monitoring (series et films).
"""

import asyncio
from typing import Annotated, Optional

import typer

from arrlink.adapters.cli.display import (
    display_delete_movie,
    display_monitor_movie,
    display_monitor_series,
    display_unmonitor_series,
)
from arrlink.adapters.cli.helpers import parse_selection_option, suppress_loguru, with_container

SelectOption = Annotated[
    Optional[str],
    typer.Option(
        "--select", "-s",
        help="Saisons/episodes, ex: \"S1, S2E5, S3E1-10\" (defaut: toute la serie)",
    ),
]


def monitor_series(
    tvdb_id: Annotated[int, typer.Argument(help="ID TVDB de la serie")],
    select: SelectOption = None,
    quality_profile: Annotated[
        Optional[int],
        typer.Option("--quality-profile", help="ID du profil de qualite"),
    ] = None,
    root_folder: Annotated[
        Optional[str],
        typer.Option("--root-folder", help="Dossier racine de la serie"),
    ] = None,
) -> None:
    """Monitore une serie (ou une selection) et lance le telechargement."""
    selection = parse_selection_option(select)
    success = asyncio.run(
        _monitor_series_async(tvdb_id, selection, quality_profile, root_folder)
    )
    if not success:
        raise typer.Exit(code=1)


@with_container()
async def _monitor_series_async(
    container, tvdb_id: int, selection, quality_profile: Optional[int], root_folder: Optional[str]
) -> bool:
    service = container.series_monitoring()
    result = await service.monitor_and_download(
        tvdb_id,
        selection,
        quality_profile_id=quality_profile,
        root_folder_path=root_folder,
    )
    with suppress_loguru():
        display_monitor_series(result)
    return result.success


def unmonitor_series(
    tvdb_id: Annotated[int, typer.Argument(help="ID TVDB de la serie")],
    select: SelectOption = None,
    delete_files: Annotated[
        bool,
        typer.Option(
            "--delete-files",
            help="Supprime les fichiers restants si la serie finit supprimee",
        ),
    ] = False,
) -> None:
    """Demonitore une selection, ou supprime toute la serie sans --select."""
    selection = parse_selection_option(select)
    success = asyncio.run(_unmonitor_series_async(tvdb_id, selection, delete_files))
    if not success:
        raise typer.Exit(code=1)


@with_container()
async def _unmonitor_series_async(container, tvdb_id: int, selection, delete_files: bool) -> bool:
    service = container.series_monitoring()
    result = await service.unmonitor_and_delete(tvdb_id, selection, delete_files=delete_files)
    with suppress_loguru():
        display_unmonitor_series(result)
    return result.success


def monitor_movie(
    tmdb_id: Annotated[int, typer.Argument(help="ID TMDB du film")],
    quality_profile: Annotated[
        Optional[int],
        typer.Option("--quality-profile", help="ID du profil de qualite"),
    ] = None,
    root_folder: Annotated[
        Optional[str],
        typer.Option("--root-folder", help="Dossier racine du film"),
    ] = None,
) -> None:
    """Monitore un film et lance sa recherche."""
    success = asyncio.run(_monitor_movie_async(tmdb_id, quality_profile, root_folder))
    if not success:
        raise typer.Exit(code=1)


@with_container()
async def _monitor_movie_async(
    container, tmdb_id: int, quality_profile: Optional[int], root_folder: Optional[str]
) -> bool:
    service = container.movie_monitoring()
    result = await service.monitor_and_download(
        tmdb_id, quality_profile_id=quality_profile, root_folder_path=root_folder
    )
    with suppress_loguru():
        display_monitor_movie(result)
    return result.success


def delete_movie(
    tmdb_id: Annotated[int, typer.Argument(help="ID TMDB du film")],
    keep_files: Annotated[
        bool,
        typer.Option("--keep-files", help="Conserve les fichiers telecharges"),
    ] = False,
) -> None:
    """Annule les telechargements d'un film et le supprime."""
    success = asyncio.run(_delete_movie_async(tmdb_id, not keep_files))
    if not success:
        raise typer.Exit(code=1)


@with_container()
async def _delete_movie_async(container, tmdb_id: int, delete_files: bool) -> bool:
    service = container.movie_monitoring()
    result = await service.unmonitor_and_delete(tmdb_id, delete_files=delete_files)
    with suppress_loguru():
        display_delete_movie(result)
    return result.success
