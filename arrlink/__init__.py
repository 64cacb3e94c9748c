"""
arrlink - client resilient pour Sonarr, Radarr et Emby.

Fournit un pipeline de requetes HTTP (authentification, retry, circuit
breaker, classification d'erreurs, negociation de version) et un moteur
d'orchestration du monitoring des series et des films.
"""

__version__ = "0.1.0"
