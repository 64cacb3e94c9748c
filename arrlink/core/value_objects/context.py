"""
Contexte d'une operation logique : identifiant de correlation et echeance.

Le contexte est cree une fois en tete d'operation puis transmis a chaque
appel backend, y compris a chaque tentative de relance.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from arrlink.utils.timing import Deadline


def new_correlation_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class OperationContext:
    correlation_id: str = field(default_factory=new_correlation_id)
    deadline: Optional["Deadline"] = None

    def with_deadline(self, deadline: "Deadline") -> "OperationContext":
        return replace(self, deadline=deadline)
