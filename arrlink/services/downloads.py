"""
Annulation des telechargements en cours.

Partage par les orchestrations series et films : la file est lue une fois,
puis chaque element cible est annule independamment. Un echec d'annulation
n'interrompt pas les suivants.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from loguru import logger

from arrlink.core.entities.media import QueueItem
from arrlink.core.errors import ApiError
from arrlink.core.ports.backend_clients import IMovieManager, ISeriesManager
from arrlink.core.value_objects.context import OperationContext

QueueOwner = Union[ISeriesManager, IMovieManager]


@dataclass
class CancellationReport:
    """Bilan d'une annulation : elements trouves, annules, en echec."""

    found: int = 0
    cancelled: int = 0

    @property
    def failed(self) -> int:
        return self.found - self.cancelled

    def warning(self) -> Optional[str]:
        if not self.failed:
            return None
        return f"Could not cancel {self.failed} of {self.found} queue items"


async def load_queue(
    client: QueueOwner, ctx: OperationContext, warnings: list[str]
) -> list[QueueItem]:
    """Lit la file ; un echec devient un avertissement et une file vide."""
    try:
        return await client.get_queue(ctx=ctx)
    except ApiError as e:
        logger.warning(
            "File de telechargement illisible",
            error_kind=e.kind.value,
            correlation_id=ctx.correlation_id,
        )
        warnings.append(f"Could not read download queue: {e.user_message()}")
        return []


async def cancel_queue_items(
    client: QueueOwner,
    queue: Sequence[QueueItem],
    matches: Callable[[QueueItem], bool],
    ctx: OperationContext,
) -> CancellationReport:
    """
    Annule les elements de la file qui satisfont `matches`.

    Args:
        client: Backend proprietaire de la file
        queue: File deja chargee
        matches: Predicat de selection des elements
        ctx: Contexte de l'operation

    Returns:
        CancellationReport avec le nombre d'elements trouves et annules
    """
    report = CancellationReport()
    for item in queue:
        if not matches(item):
            continue
        report.found += 1
        try:
            await client.remove_queue_item(item.id, remove_from_client=True, ctx=ctx)
        except ApiError as e:
            logger.warning(
                "Annulation impossible",
                queue_id=item.id,
                error_kind=e.kind.value,
                correlation_id=ctx.correlation_id,
            )
            continue
        report.cancelled += 1
        logger.debug("Telechargement annule", queue_id=item.id, title=item.title)
    return report
