"""
Verification de l'etat des backends configures.
"""

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence

from loguru import logger

from arrlink.core.entities.media import HealthStatus
from arrlink.core.ports.backend_clients import IBackendClient
from arrlink.core.value_objects.context import OperationContext

if TYPE_CHECKING:
    from arrlink.config import Settings


@dataclass
class HealthReport:
    """Etat agrege des backends."""

    statuses: list[HealthStatus] = field(default_factory=list)

    @property
    def healthy(self) -> bool:
        return all(status.healthy for status in self.statuses)

    @property
    def unhealthy(self) -> list[HealthStatus]:
        return [status for status in self.statuses if not status.healthy]


class HealthService:
    """
    Interroge les backends en parallele.

    Les clients absents (backend non configure) sont ignores.
    """

    def __init__(self, clients: Sequence[Optional[IBackendClient]]) -> None:
        self._clients = [client for client in clients if client is not None]

    async def check_all(self, *, correlation_id: Optional[str] = None) -> HealthReport:
        ctx = OperationContext(correlation_id) if correlation_id else OperationContext()
        statuses = await asyncio.gather(
            *(client.check_health(ctx=ctx) for client in self._clients)
        )
        report = HealthReport(statuses=list(statuses))
        logger.info(
            "Verification des backends terminee",
            total=len(report.statuses),
            unhealthy=len(report.unhealthy),
            correlation_id=ctx.correlation_id,
        )
        return report


def enabled_health_service(
    settings: "Settings",
    sonarr: IBackendClient,
    radarr: IBackendClient,
    emby: IBackendClient,
) -> HealthService:
    """Construit un HealthService limite aux backends configures."""
    return HealthService(
        [
            sonarr if settings.sonarr_enabled else None,
            radarr if settings.radarr_enabled else None,
            emby if settings.emby_enabled else None,
        ]
    )
