"""
Utilitaires partages pour les commandes CLI d'arrlink.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container et fermant les clients
- parse_selection_option : conversion de l'option --select en selection validee
"""

from contextlib import contextmanager
from functools import wraps
from typing import Optional

import typer
from loguru import logger as loguru_logger
from rich.console import Console

from arrlink.container import Container
from arrlink.core.errors import SelectionValidationError
from arrlink.core.value_objects.selection import (
    EpisodeSelection,
    parse_selection,
    validate_selection,
)

console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("arrlink")
    try:
        yield
    finally:
        loguru_logger.enable("arrlink")


def with_container():
    """
    Decorateur qui injecte un container en premier argument.

    Les clients HTTP crees pendant la commande sont fermes a la sortie.

    Usage:
        @with_container()
        async def my_command(container, ...):
            service = container.series_monitoring()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            try:
                return await func(container, *args, **kwargs)
            finally:
                for provider in (
                    container.sonarr_client,
                    container.radarr_client,
                    container.emby_client,
                ):
                    await provider().close()
        return wrapper
    return decorator


def parse_selection_option(text: Optional[str]) -> Optional[list[EpisodeSelection]]:
    """
    Convertit l'option --select ("S1, S2E1-3") en selection validee.

    Raises:
        typer.BadParameter: Selection illisible ou invalide
    """
    if not text:
        return None
    try:
        return validate_selection(parse_selection(text))
    except SelectionValidationError as e:
        raise typer.BadParameter("; ".join(issue.message for issue in e.issues)) from e
