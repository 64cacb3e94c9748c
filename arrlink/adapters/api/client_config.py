"""
Configuration immuable d'un client backend.
"""

from dataclasses import dataclass, field

import httpx

from arrlink.adapters.api.retry import RetryPolicy
from arrlink.core.backends import BackendKind
from arrlink.core.value_objects.api_version import CompatibilityMode


@dataclass(frozen=True)
class PoolConfig:
    """Reglage du pool de connexions httpx (un pool par backend)."""

    max_connections: int = 10
    max_keepalive_connections: int = 5
    keepalive_expiry: float = 30.0

    def to_limits(self) -> httpx.Limits:
        return httpx.Limits(
            max_connections=self.max_connections,
            max_keepalive_connections=self.max_keepalive_connections,
            keepalive_expiry=self.keepalive_expiry,
        )


@dataclass(frozen=True)
class ClientConfig:
    """
    Parametres d'un client, crees au demarrage et jamais modifies.

    Attributes:
        backend: Backend cible
        base_url: URL de base (sans slash final)
        timeout: Timeout par requete HTTP (secondes)
        connect_timeout: Timeout de connexion (secondes)
        max_retries: Nombre total de tentatives par appel logique
        pool: Reglage du pool de connexions
        compatibility_mode: Mode de compatibilite de version
        supported_versions: Versions d'API testees
        fallback_version: Version supposee si la detection echoue
        backoff_base_delay: Base du backoff quand l'erreur n'en fournit pas
        backoff_factor: Facteur multiplicatif du backoff
        backoff_max_delay: Plafond du backoff
        backoff_jitter: Part aleatoire du backoff
        circuit_failure_threshold: Echecs consecutifs avant ouverture (0 = desactive)
        circuit_reset_timeout: Duree d'ouverture du circuit avant semi-ouverture
    """

    backend: BackendKind
    base_url: str
    timeout: float = 30.0
    connect_timeout: float = 10.0
    max_retries: int = 3
    pool: PoolConfig = field(default_factory=PoolConfig)
    compatibility_mode: CompatibilityMode = CompatibilityMode.LOOSE
    supported_versions: tuple[str, ...] = ()
    fallback_version: str = "0.0.0"
    backoff_base_delay: float = 1.0
    backoff_factor: float = 2.0
    backoff_max_delay: float = 60.0
    backoff_jitter: float = 0.1
    circuit_failure_threshold: int = 5
    circuit_reset_timeout: float = 30.0

    def __post_init__(self) -> None:
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.max_retries,
            base_delay=self.backoff_base_delay,
            backoff_factor=self.backoff_factor,
            max_delay=self.backoff_max_delay,
            jitter=self.backoff_jitter,
        )
