"""
Identification des backends media.
"""

from enum import Enum


class BackendKind(str, Enum):
    """Backends media supportes."""

    SONARR = "sonarr"
    RADARR = "radarr"
    EMBY = "emby"

    @property
    def display_name(self) -> str:
        """Nom presente a l'utilisateur (jamais le nom technique du service)."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    BackendKind.SONARR: "TV Show service",
    BackendKind.RADARR: "Movie service",
    BackendKind.EMBY: "Media library",
}
