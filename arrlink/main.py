"""
Point d'entree CLI d'arrlink.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import (
    delete_movie,
    health,
    monitor_movie,
    monitor_series,
    search_library,
    search_movies,
    search_series,
    unmonitor_series,
)
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="arrlink",
    help="Pilotage de Sonarr, Radarr et Emby",
)
container = Container()

# Niveau console selon le nombre de -v
_VERBOSE_LEVELS = {1: "DEBUG", 2: "TRACE"}


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """arrlink - Monitoring et telechargement via les backends media."""
    if quiet:
        logger.disable("arrlink")
    elif verbose:
        _setup_logging(_VERBOSE_LEVELS[min(verbose, 2)])


app.command()(health)
app.command(name="search-series")(search_series)
app.command(name="search-movies")(search_movies)
app.command(name="search-library")(search_library)
app.command(name="monitor-series")(monitor_series)
app.command(name="unmonitor-series")(unmonitor_series)
app.command(name="monitor-movie")(monitor_movie)
app.command(name="delete-movie")(delete_movie)


def get_config() -> Settings:
    """Recupere les parametres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()

    def status(enabled: bool) -> str:
        return "configure" if enabled else "non configure"

    typer.echo(f"Sonarr : {config.sonarr_url} ({status(config.sonarr_enabled)})")
    typer.echo(f"Radarr : {config.radarr_url} ({status(config.radarr_enabled)})")
    typer.echo(f"Emby : {config.emby_url} ({status(config.emby_enabled)})")
    typer.echo(f"Tentatives par requete : {config.max_retries}")
    typer.echo(f"Timeout requete : {config.request_timeout}s")
    typer.echo(f"Echeance d'operation : {config.operation_timeout}s")
    typer.echo(f"Compatibilite de version : {config.version_compatibility.value}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"arrlink v{__version__}")


def _setup_logging(log_level: str) -> None:
    settings = container.config()
    configure_logging(
        log_level=log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


def main() -> None:
    """Point d'entree de l'application."""
    _setup_logging(container.config().log_level)
    logger.info("Demarrage d'arrlink", version=__version__)

    app()


if __name__ == "__main__":
    main()
