"""
Constantes globales pour arrlink.

Ce module contient :
- Les endpoints de sonde de version par backend
- La table des versions d'API testees et les versions de repli
- Les noms des commandes de recherche des *arr
"""

from arrlink.core.backends import BackendKind

# Endpoints essayes dans l'ordre pour detecter la version d'API
VERSION_PROBE_PATHS = {
    BackendKind.SONARR: ("/api/v3/system/status", "/api/system/status"),
    BackendKind.RADARR: ("/api/v3/system/status", "/api/system/status"),
    BackendKind.EMBY: ("/System/Info", "/System/Info/Public"),
}

# Cles de version propres a un backend, en plus des cles communes
VERSION_EXTRA_KEYS = {
    BackendKind.SONARR: (),
    BackendKind.RADARR: (),
    BackendKind.EMBY: ("ServerVersion", "ApplicationVersion"),
}

# Versions d'API testees
SUPPORTED_VERSIONS = {
    BackendKind.SONARR: ("3.0.0", "4.0.0"),
    BackendKind.RADARR: ("4.0.0", "5.0.0"),
    BackendKind.EMBY: ("4.7.0", "4.8.0"),
}

# Version supposee quand la detection echoue
FALLBACK_VERSIONS = {
    BackendKind.SONARR: "4.0.0",
    BackendKind.RADARR: "5.0.0",
    BackendKind.EMBY: "4.8.0",
}

SERIES_SEARCH_COMMAND = "SeriesSearch"
MOVIES_SEARCH_COMMAND = "MoviesSearch"

# Taille de page pour la lecture de la file de telechargement
QUEUE_PAGE_SIZE = 1000
