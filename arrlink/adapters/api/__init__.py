"""
Clients HTTP des backends media.

Ce module fournit le pipeline de requetes partage et les clients construits
dessus :
- RequestExecutor : authentification, relances (tenacity), classification
  des erreurs, correlation, circuit breaker
- VersionNegotiator : detection et cache de la version d'API
- SonarrClient, RadarrClient, EmbyClient : tables d'endpoints par backend

Les clients implementent les ports definis dans core/ports/backend_clients.py.
"""

from arrlink.adapters.api.auth import ApiKeyHeaderAuth, AuthStrategy, QueryParamAuth
from arrlink.adapters.api.client_config import ClientConfig, PoolConfig
from arrlink.adapters.api.emby_client import EmbyClient
from arrlink.adapters.api.executor import RequestExecutor, RequestEvent, log_request_event
from arrlink.adapters.api.radarr_client import RadarrClient
from arrlink.adapters.api.retry import RetryPolicy
from arrlink.adapters.api.sonarr_client import SonarrClient
from arrlink.adapters.api.version import VersionNegotiator

__all__ = [
    "ApiKeyHeaderAuth",
    "AuthStrategy",
    "ClientConfig",
    "EmbyClient",
    "PoolConfig",
    "QueryParamAuth",
    "RadarrClient",
    "RequestEvent",
    "RequestExecutor",
    "RetryPolicy",
    "SonarrClient",
    "VersionNegotiator",
    "log_request_event",
]
