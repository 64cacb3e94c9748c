"""
Configuration de l'application via pydantic-settings.

La configuration est chargee depuis les variables d'environnement avec le prefixe ARRLINK_,
et peut optionnellement etre fournie via un fichier .env.

Les cles API sont optionnelles : un backend sans cle est considere comme non configure.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from arrlink.adapters.api.client_config import ClientConfig, PoolConfig
from arrlink.core.backends import BackendKind
from arrlink.core.value_objects.api_version import CompatibilityMode
from arrlink.utils.constants import FALLBACK_VERSIONS, SUPPORTED_VERSIONS

# Fichier .env a la racine du projet (parent de arrlink/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Parametres de l'application avec support des variables d'environnement.

    Tous les parametres peuvent etre surcharges via des variables d'environnement
    avec le prefixe ARRLINK_.
    Exemple : ARRLINK_SONARR_API_KEY=abcdef ARRLINK_MAX_RETRIES=5
    """

    model_config = SettingsConfigDict(
        env_prefix="ARRLINK_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Backends
    sonarr_url: str = Field(default="http://sonarr:8989")
    sonarr_api_key: Optional[str] = Field(default=None)
    radarr_url: str = Field(default="http://radarr:7878")
    radarr_api_key: Optional[str] = Field(default=None)
    emby_url: str = Field(default="http://emby:8096")
    emby_api_key: Optional[str] = Field(default=None)
    emby_user_id: Optional[str] = Field(default=None)

    # Pipeline de requetes
    request_timeout: float = Field(default=30.0, gt=0)
    connect_timeout: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=1, le=10)
    backoff_base_delay: float = Field(default=1.0, ge=0)
    backoff_factor: float = Field(default=2.0, ge=1)
    backoff_max_delay: float = Field(default=60.0, ge=0)
    backoff_jitter: float = Field(default=0.1, ge=0, le=1)
    pool_max_connections: int = Field(default=10, ge=1)
    pool_max_keepalive: int = Field(default=5, ge=0)
    pool_keepalive_expiry: float = Field(default=30.0, ge=0)

    # Circuit breaker (0 = desactive)
    circuit_failure_threshold: int = Field(default=5, ge=0)
    circuit_reset_timeout: float = Field(default=30.0, gt=0)

    # Versions d'API
    version_compatibility: CompatibilityMode = Field(default=CompatibilityMode.LOOSE)

    # Orchestration
    operation_timeout: float = Field(default=300.0, gt=0)
    episode_retry_attempts: int = Field(default=3, ge=1)
    episode_retry_delay: float = Field(default=2.0, ge=0)
    deletion_recheck_delay: float = Field(default=5.0, ge=0)
    recheck_episode_attempts: int = Field(default=4, ge=1)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de retention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/arrlink.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Etend ~ vers le repertoire home."""
        return Path(v).expanduser()

    @field_validator("sonarr_url", "radarr_url", "emby_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def sonarr_enabled(self) -> bool:
        """Verifie si Sonarr est configure."""
        return bool(self.sonarr_api_key)

    @property
    def radarr_enabled(self) -> bool:
        """Verifie si Radarr est configure."""
        return bool(self.radarr_api_key)

    @property
    def emby_enabled(self) -> bool:
        """Verifie si Emby est configure (cle API et utilisateur)."""
        return bool(self.emby_api_key and self.emby_user_id)

    def base_url_for(self, backend: BackendKind) -> str:
        return {
            BackendKind.SONARR: self.sonarr_url,
            BackendKind.RADARR: self.radarr_url,
            BackendKind.EMBY: self.emby_url,
        }[backend]

    def client_config(self, backend: BackendKind) -> ClientConfig:
        """Construit la configuration immuable du client d'un backend."""
        return ClientConfig(
            backend=backend,
            base_url=self.base_url_for(backend),
            timeout=self.request_timeout,
            connect_timeout=self.connect_timeout,
            max_retries=self.max_retries,
            pool=PoolConfig(
                max_connections=self.pool_max_connections,
                max_keepalive_connections=self.pool_max_keepalive,
                keepalive_expiry=self.pool_keepalive_expiry,
            ),
            compatibility_mode=self.version_compatibility,
            supported_versions=SUPPORTED_VERSIONS[backend],
            fallback_version=FALLBACK_VERSIONS[backend],
            backoff_base_delay=self.backoff_base_delay,
            backoff_factor=self.backoff_factor,
            backoff_max_delay=self.backoff_max_delay,
            backoff_jitter=self.backoff_jitter,
            circuit_failure_threshold=self.circuit_failure_threshold,
            circuit_reset_timeout=self.circuit_reset_timeout,
        )
