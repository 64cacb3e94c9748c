"""
Affichage Rich des resultats d'orchestration et des etats de sante.
"""

from typing import TYPE_CHECKING, Optional, Sequence

from rich.panel import Panel
from rich.table import Table

from arrlink.adapters.cli.helpers import console
from arrlink.core.value_objects.selection import MonitoringAction, MonitoringChange

if TYPE_CHECKING:
    from arrlink.core.entities.media import LibraryItem, Movie, Series
    from arrlink.services.health import HealthReport
    from arrlink.services.movie_monitoring import DeleteMovieResult, MonitorMovieResult
    from arrlink.services.series_monitoring import MonitorSeriesResult, UnmonitorSeriesResult


def format_change(change: MonitoringChange) -> str:
    """Ex: "S01 E01,E02 : monitored", "Serie : deleted_series"."""
    if change.action is MonitoringAction.DELETED_SERIES:
        target = "Serie"
    else:
        target = f"S{change.season:02d}"
        if change.episodes:
            target += " " + ",".join(f"E{n:02d}" for n in change.episodes)
    return f"{target} : {change.action.value}"


def _print_outcome(
    title: str,
    success: bool,
    lines: list[str],
    warnings: Sequence[str],
    error: Optional[str],
) -> None:
    if not success:
        console.print(Panel(f"[red]{error}[/red]", title=title, border_style="red"))
        return
    body = "\n".join(lines) if lines else "[dim]Aucun changement[/dim]"
    if warnings:
        body += "\n\n[yellow]Avertissements :[/yellow]\n" + "\n".join(f"  - {w}" for w in warnings)
    console.print(Panel(body, title=title, border_style="green"))


def display_health(report: "HealthReport") -> None:
    table = Table(title="Etat des backends", show_header=True)
    table.add_column("Backend", style="cyan")
    table.add_column("Etat")
    table.add_column("Version")
    table.add_column("Compatible")
    table.add_column("Temps (ms)", justify="right")
    table.add_column("Details", style="dim")

    for status in report.statuses:
        api_version = status.api_version
        table.add_row(
            status.backend.value,
            "[green]OK[/green]" if status.healthy else "[red]KO[/red]",
            status.version or "-",
            ("oui" if api_version.is_compatible else "[yellow]non[/yellow]")
            if api_version else "-",
            f"{status.response_time_ms:.0f}",
            status.error or "; ".join(status.warnings),
        )
    console.print(table)


def display_series(results: Sequence["Series"]) -> None:
    table = Table(title="Series", show_header=True)
    table.add_column("TVDB", justify="right", style="cyan")
    table.add_column("Titre")
    table.add_column("Annee", justify="right")
    table.add_column("Saisons", justify="right")
    for series in results:
        regular = [s for s in series.seasons if not s.is_specials]
        table.add_row(
            str(series.tvdb_id), series.title, str(series.year or ""), str(len(regular))
        )
    console.print(table)


def display_movies(results: Sequence["Movie"]) -> None:
    table = Table(title="Films", show_header=True)
    table.add_column("TMDB", justify="right", style="cyan")
    table.add_column("Titre")
    table.add_column("Annee", justify="right")
    for movie in results:
        table.add_row(str(movie.tmdb_id), movie.title, str(movie.year or ""))
    console.print(table)


def display_library_items(items: Sequence["LibraryItem"], urls: Sequence[str]) -> None:
    table = Table(title="Mediatheque", show_header=True)
    table.add_column("Type", style="cyan")
    table.add_column("Titre")
    table.add_column("Annee", justify="right")
    table.add_column("Lien", style="dim")
    for item, url in zip(items, urls):
        table.add_row(item.item_type, item.name, str(item.year or ""), url)
    console.print(table)


def display_monitor_series(result: "MonitorSeriesResult") -> None:
    title = result.series.title if result.series else f"TVDB {result.tvdb_id}"
    lines = []
    if result.series_added:
        lines.append("[green]Serie ajoutee[/green]")
    lines.extend(format_change(change) for change in result.changes)
    if result.search_triggered:
        lines.append(f"Recherche lancee (commande {result.command_id})")
    _print_outcome(title, result.success, lines, result.warnings, result.error)


def display_unmonitor_series(result: "UnmonitorSeriesResult") -> None:
    title = result.series.title if result.series else f"TVDB {result.tvdb_id}"
    lines = [format_change(change) for change in result.changes]
    if result.success:
        lines.append(
            f"{result.episodes_unmonitored} episode(s) demonitore(s), "
            f"{result.downloads_cancelled} telechargement(s) annule(s), "
            f"{result.files_deleted} fichier(s) supprime(s)"
        )
    if result.series_deleted:
        lines.append("[red]Serie supprimee[/red]")
    _print_outcome(title, result.success, lines, result.warnings, result.error)


def display_monitor_movie(result: "MonitorMovieResult") -> None:
    title = result.movie.title if result.movie else f"TMDB {result.tmdb_id}"
    lines = []
    if result.movie_added:
        lines.append("[green]Film ajoute[/green]")
    if result.search_triggered:
        lines.append(f"Recherche lancee (commande {result.command_id})")
    _print_outcome(title, result.success, lines, result.warnings, result.error)


def display_delete_movie(result: "DeleteMovieResult") -> None:
    title = result.movie.title if result.movie else f"TMDB {result.tmdb_id}"
    lines = []
    if result.movie_deleted:
        lines.append("[red]Film supprime[/red]")
        lines.append(
            f"{result.downloads_cancelled}/{result.downloads_found} telechargement(s) annule(s)"
        )
        lines.append("Fichiers supprimes" if result.files_deleted else "Fichiers conserves")
    _print_outcome(title, result.success, lines, result.warnings, result.error)
