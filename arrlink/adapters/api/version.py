"""
Negociation de la version d'API d'un backend.

Les endpoints de sonde sont essayes dans l'ordre ; le premier qui renvoie un
champ de version reconnaissable l'emporte. La detection est indicative :
en cas d'echec, la version de repli de la configuration est utilisee avec un
avertissement, jamais une erreur.

Le resultat est mis en cache dans l'instance (une par client). refresh()
recalcule et remplace le cache en une seule affectation : un lecteur voit
soit l'ancien resultat, soit le nouveau.
"""

import asyncio
from typing import Any, Optional, Sequence

from loguru import logger

from arrlink.adapters.api.client_config import ClientConfig
from arrlink.adapters.api.executor import RequestExecutor
from arrlink.core.errors import ApiError
from arrlink.core.value_objects.api_version import (
    ApiVersionResult,
    clean_version_string,
    evaluate_version,
)
from arrlink.core.value_objects.context import OperationContext

VERSION_KEYS = ("version", "Version", "apiVersion", "serverVersion", "buildVersion")


def extract_version(payload: Any, extra_keys: Sequence[str] = ()) -> Optional[str]:
    """
    Cherche une version normalisee dans une reponse de sonde.

    Args:
        payload: Corps JSON decode
        extra_keys: Cles propres au backend, essayees apres les cles communes

    Returns:
        Version major.minor.patch, ou None si aucune cle ne convient
    """
    if not isinstance(payload, dict):
        return None
    for key in (*VERSION_KEYS, *extra_keys):
        value = payload.get(key)
        if isinstance(value, str):
            cleaned = clean_version_string(value)
            if cleaned is not None:
                return cleaned
    return None


class VersionNegotiator:
    """
    Detecte et met en cache la version d'API d'un client.

    Example:
        negotiator = VersionNegotiator(executor, config, ["/api/v3/system/status"])
        result = await negotiator.get_version()
        if not result.is_compatible:
            logger.warning(...)
    """

    def __init__(
        self,
        executor: RequestExecutor,
        config: ClientConfig,
        probe_paths: Sequence[str],
        extra_keys: Sequence[str] = (),
    ) -> None:
        self._executor = executor
        self._config = config
        self._probe_paths = tuple(probe_paths)
        self._extra_keys = tuple(extra_keys)
        self._cached: Optional[ApiVersionResult] = None
        self._lock = asyncio.Lock()

    @property
    def cached(self) -> Optional[ApiVersionResult]:
        return self._cached

    async def get_version(self, ctx: Optional[OperationContext] = None) -> ApiVersionResult:
        """Retourne la version en cache, la calcule au premier appel."""
        cached = self._cached
        if cached is not None:
            return cached
        async with self._lock:
            if self._cached is None:
                self._cached = await self._negotiate(ctx or OperationContext())
            return self._cached

    async def refresh(self, ctx: Optional[OperationContext] = None) -> ApiVersionResult:
        """Force une nouvelle negociation et remplace le cache."""
        async with self._lock:
            result = await self._negotiate(ctx or OperationContext())
            self._cached = result
            return result

    async def _negotiate(self, ctx: OperationContext) -> ApiVersionResult:
        backend = self._config.backend.value
        for path in self._probe_paths:
            try:
                payload = await self._executor.execute("GET", path, ctx=ctx, max_attempts=1)
            except ApiError as e:
                logger.debug(
                    "Sonde de version en echec",
                    backend=backend,
                    path=path,
                    error_kind=e.kind.value,
                    correlation_id=ctx.correlation_id,
                )
                continue

            version = extract_version(payload, self._extra_keys)
            if version is not None:
                result = evaluate_version(
                    version,
                    detected=True,
                    supported_versions=self._config.supported_versions,
                    mode=self._config.compatibility_mode,
                )
                logger.info(
                    "Version d'API detectee",
                    backend=backend,
                    version=version,
                    compatible=result.is_compatible,
                )
                return result

        result = evaluate_version(
            self._config.fallback_version,
            detected=False,
            supported_versions=self._config.supported_versions,
            mode=self._config.compatibility_mode,
        )
        logger.warning(
            "Version d'API non detectee, version de repli utilisee",
            backend=backend,
            fallback=self._config.fallback_version,
        )
        return result
