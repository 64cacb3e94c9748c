"""
Interfaces abstraites (ports) pour l'architecture hexagonale.

Les ports definissent les contrats que les adaptateurs doivent implementer.
Cela permet a la logique d'orchestration de rester independante des details
HTTP de chaque backend.

Exports :
- IBackendClient : operations communes (sante, version, capacites)
- ISeriesManager : gestionnaire de series
- IMovieManager : gestionnaire de films
- ILibraryServer : serveur de mediatheque
"""

from arrlink.core.ports.backend_clients import (
    IBackendClient,
    ILibraryServer,
    IMovieManager,
    ISeriesManager,
)

__all__ = [
    "IBackendClient",
    "ILibraryServer",
    "IMovieManager",
    "ISeriesManager",
]
